"""Modal dialogs: the clear-history confirmation and the rename prompt."""

from typing import Optional

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

DIALOG_CSS = """
ConfirmScreen, RenameScreen {
    align: center middle;
    background: $background 70%;
}

.dialog {
    width: 60;
    height: auto;
    border: tall $accent;
    background: $surface;
    padding: 1 2;
}

.dialog-prompt {
    width: 100%;
    text-align: center;
    padding: 0 0 1 0;
}

.dialog-buttons {
    width: 100%;
    height: 3;
    align: center middle;
}

.dialog-buttons Button {
    margin: 0 1;
    min-width: 10;
}
"""


class ConfirmScreen(ModalScreen[bool]):
    CSS = DIALOG_CSS

    BINDINGS = [
        Binding('y', 'answer(True)', 'Да', show=False),
        Binding('n', 'answer(False)', 'Нет', show=False),
        Binding('escape', 'answer(False)', 'Отмена', show=False),
    ]

    def __init__(self, prompt: str) -> None:
        super().__init__()
        self._prompt = prompt

    def compose(self) -> ComposeResult:
        with Vertical(classes='dialog'):
            yield Static(self._prompt, classes='dialog-prompt')
            with Horizontal(classes='dialog-buttons'):
                yield Button('Да', id='confirm-yes', variant='error')
                yield Button('Нет', id='confirm-no', variant='primary')

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == 'confirm-yes')

    def action_answer(self, value: bool) -> None:
        self.dismiss(value)


class RenameScreen(ModalScreen[Optional[str]]):
    """Asks for a new chat title; dismisses with ``None`` when cancelled."""

    CSS = DIALOG_CSS

    BINDINGS = [Binding('escape', 'cancel', 'Отмена', show=False)]

    def __init__(self, prompt: str, current_title: str) -> None:
        super().__init__()
        self._prompt = prompt
        self._current_title = current_title

    def compose(self) -> ComposeResult:
        with Vertical(classes='dialog'):
            yield Static(self._prompt, classes='dialog-prompt')
            yield Input(value=self._current_title, id='rename-input')

    @on(Input.Submitted, '#rename-input')
    def submit(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss(None)
