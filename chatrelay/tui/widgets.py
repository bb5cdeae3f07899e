from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import Click
from textual.message import Message
from textual.widgets import Label, ListItem, Static

from chatrelay.client import models
from chatrelay.client.presenter import HistoryEntry
from chatrelay.tui.render import info_line, to_rich


class MessageView(Vertical):
    """One chat message: formatted body plus a sender and ``HH:MM`` info line.

    Clicking an AI message asks the app to copy it.
    """

    class CopyRequested(Message):
        def __init__(self, view: 'MessageView') -> None:
            super().__init__()
            self.view = view

    def __init__(self, message: models.Message, markup: str = '') -> None:
        super().__init__(classes=f'message {message.sender.value}-message')
        self.message = message
        self.markup = markup
        self._body = Static(to_rich(markup), classes='message-body')

    def compose(self) -> ComposeResult:
        yield self._body
        yield Static(info_line(self.message), classes='message-info')

    def show_text(self, text: str) -> None:
        self._body.update(Text(text, overflow='fold'))

    def show_markup(self, markup: str) -> None:
        self.markup = markup
        self._body.update(to_rich(markup))

    def on_click(self, event: Click) -> None:
        if self.message.sender is models.Sender.AI and self.markup:
            event.stop()
            self.post_message(self.CopyRequested(self))


class HistoryItem(ListItem):
    def __init__(self, entry: HistoryEntry) -> None:
        self._label = Label(entry.title)
        super().__init__(self._label)
        self.session_id = entry.session_id

    def show(self, entry: HistoryEntry) -> None:
        self.session_id = entry.session_id
        self._label.update(entry.title)
