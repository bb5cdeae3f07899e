"""Textual terminal client.

Lays out the history sidebar, the message pane and the input line, and maps
key bindings onto session store commands. The store drives every display
change through :class:`chatrelay.tui.presenter.TerminalPresenter`.
"""

from typing import Optional

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Footer, Header, Input, ListView, Static

from chatrelay.client import strings
from chatrelay.client.formatting import format_message, plain_text
from chatrelay.client.gateway import CompletionClient
from chatrelay.client.models import Sender
from chatrelay.client.presenter import HistoryEntry
from chatrelay.client.store import ChatSessionStore
from chatrelay.core.config import ClientSettings
from chatrelay.tui.presenter import TerminalPresenter
from chatrelay.tui.screens import RenameScreen
from chatrelay.tui.widgets import HistoryItem, MessageView

APP_CSS = """
#history {
    width: 32;
    height: 100%;
    border: round $primary 60%;
}

#chat {
    height: 100%;
}

#messages {
    height: 1fr;
    border: round $primary 60%;
    padding: 0 1;
}

.message {
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
}

.user-message {
    border-left: thick $accent;
}

.ai-message {
    border-left: thick $success;
}

.message-info {
    color: $text-muted;
}

#typing {
    display: none;
    color: $text-muted;
    padding: 0 1;
}
"""


class ChatApp(App):
    CSS = APP_CSS
    TITLE = 'Chat Relay'

    BINDINGS = [
        Binding('ctrl+n', 'new_chat', 'Новый чат', priority=True),
        Binding('ctrl+r', 'rename_chat', 'Переименовать', priority=True),
        Binding('ctrl+y', 'copy_answer', 'Скопировать ответ', priority=True),
        Binding('ctrl+t', 'toggle_theme', 'Тема', priority=True),
        Binding('ctrl+d', 'clear_history', 'Очистить историю', priority=True),
        Binding('ctrl+q', 'quit', 'Выход', priority=True),
    ]

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        gateway: Optional[CompletionClient] = None,
    ) -> None:
        super().__init__()
        self.store = ChatSessionStore.from_settings(settings, TerminalPresenter(self), gateway=gateway)
        self._history_items: list[HistoryItem] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            yield ListView(id='history')
            with Vertical(id='chat'):
                yield VerticalScroll(id='messages')
                yield Static(strings.TYPING, id='typing')
                yield Input(placeholder=strings.INPUT_PLACEHOLDER, id='prompt')
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = strings.DEFAULT_TITLE
        self.store.restore_theme()
        self.store.restore()
        self.query_one('#prompt', Input).focus()

    def refresh_history(self, entries: list[HistoryEntry], active_id: Optional[str]) -> None:
        history = self.query_one('#history', ListView)
        items = self._history_items
        while len(items) > len(entries):
            items.pop().remove()
        for item, entry in zip(items, entries):
            item.show(entry)
        for entry in entries[len(items):]:
            item = HistoryItem(entry)
            items.append(item)
            history.append(item)
        history.index = next(
            (i for i, entry in enumerate(entries) if entry.session_id == active_id),
            None,
        )

    @on(Input.Submitted, '#prompt')
    def submit_prompt(self, event: Input.Submitted) -> None:
        event.input.clear()
        self._send(event.value)

    @work(group='send')
    async def _send(self, text: str) -> None:
        await self.store.send_message(text)

    @on(ListView.Selected, '#history')
    def select_chat(self, event: ListView.Selected) -> None:
        if isinstance(event.item, HistoryItem):
            self.store.load_chat(event.item.session_id)

    @on(MessageView.CopyRequested)
    def copy_message(self, event: MessageView.CopyRequested) -> None:
        self._copy(event.view.markup)

    def action_new_chat(self) -> None:
        self.store.new_chat()
        self.query_one('#prompt', Input).focus()

    def action_rename_chat(self) -> None:
        self._rename_chat()

    @work(group='dialog')
    async def _rename_chat(self) -> None:
        session_id = self._selected_session_id()
        if session_id is None:
            return
        current_title = self.store.sessions[session_id].title
        title = await self.push_screen_wait(RenameScreen(strings.RENAME_PROMPT, current_title))
        if title is not None:
            self.store.rename_chat(session_id, title)

    def action_copy_answer(self) -> None:
        session = self.store.current_session
        answers = [m for m in session.messages if m.sender is Sender.AI and m.text] if session else []
        if not answers:
            self.notify(strings.NOTHING_TO_COPY, severity='warning', timeout=2)
            return
        self._copy(format_message(answers[-1].text))

    def action_toggle_theme(self) -> None:
        self.store.toggle_theme()

    def action_clear_history(self) -> None:
        self._clear_history()

    @work(group='dialog')
    async def _clear_history(self) -> None:
        await self.store.clear_all_history()

    def _selected_session_id(self) -> Optional[str]:
        highlighted = self.query_one('#history', ListView).highlighted_child
        if isinstance(highlighted, HistoryItem):
            return highlighted.session_id
        return self.store.current_id

    def _copy(self, markup: str) -> None:
        self.copy_to_clipboard(plain_text(markup))
        self.notify(strings.COPIED, timeout=2)


async def run_chat(settings: Optional[ClientSettings] = None) -> None:
    app = ChatApp(settings)
    try:
        await app.run_async()
    finally:
        await app.store.close()
