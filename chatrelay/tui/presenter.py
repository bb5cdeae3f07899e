"""Session store display commands carried out on the Textual widgets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from textual.containers import VerticalScroll
from textual.widgets import Static

from chatrelay.client.models import Message
from chatrelay.client.presenter import HistoryEntry
from chatrelay.client.store import DARK_THEME
from chatrelay.tui.screens import ConfirmScreen
from chatrelay.tui.widgets import MessageView

if TYPE_CHECKING:
    from chatrelay.tui.app import ChatApp

TEXTUAL_THEMES = {
    DARK_THEME: 'textual-dark',
}
DEFAULT_TEXTUAL_THEME = 'textual-light'


class TerminalPresenter:
    def __init__(self, app: ChatApp) -> None:
        self._app = app

    @property
    def _messages(self) -> VerticalScroll:
        return self._app.query_one('#messages', VerticalScroll)

    def clear_messages(self) -> None:
        self._messages.remove_children()

    def render_message(self, message: Message, html: str) -> None:
        self._messages.mount(MessageView(message, html))

    def start_reveal(self, message: Message) -> MessageView:
        view = MessageView(message)
        self._messages.mount(view)
        return view

    def update_reveal(self, handle: MessageView, text: str) -> None:
        handle.show_text(text)

    def end_reveal(self, handle: MessageView, html: str) -> None:
        handle.show_markup(html)

    def set_typing(self, visible: bool) -> None:
        self._app.query_one('#typing', Static).display = visible

    def scroll_to_bottom(self) -> None:
        self._messages.scroll_end(animate=False)

    def set_title(self, title: str) -> None:
        self._app.sub_title = title

    def render_history(self, entries: list[HistoryEntry], active_id: Optional[str]) -> None:
        self._app.refresh_history(list(entries), active_id)

    def apply_theme(self, theme: str) -> None:
        self._app.theme = TEXTUAL_THEMES.get(theme, DEFAULT_TEXTUAL_THEME)

    def alert(self, text: str) -> None:
        self._app.notify(text, severity='warning', timeout=5)

    async def confirm(self, text: str) -> bool:
        return bool(await self._app.push_screen_wait(ConfirmScreen(text)))
