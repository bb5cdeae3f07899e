from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from chatrelay.client.models import Message


@dataclass(frozen=True)
class HistoryEntry:
    session_id: str
    title: str


class Presenter(Protocol):
    """Display commands the session store issues; all rendering lives behind this."""

    def clear_messages(self) -> None: ...

    def render_message(self, message: Message, html: str) -> None: ...

    def start_reveal(self, message: Message) -> Any: ...

    def update_reveal(self, handle: Any, text: str) -> None: ...

    def end_reveal(self, handle: Any, html: str) -> None: ...

    def set_typing(self, visible: bool) -> None: ...

    def scroll_to_bottom(self) -> None: ...

    def set_title(self, title: str) -> None: ...

    def render_history(self, entries: list[HistoryEntry], active_id: Optional[str]) -> None: ...

    def apply_theme(self, theme: str) -> None: ...

    def alert(self, text: str) -> None: ...

    async def confirm(self, text: str) -> bool: ...


class NullPresenter:
    """Headless presenter; confirmation prompts are answered with ``confirm_default``."""

    def __init__(self, confirm_default: bool = False) -> None:
        self.confirm_default = confirm_default

    def clear_messages(self) -> None:
        return None

    def render_message(self, message: Message, html: str) -> None:
        return None

    def start_reveal(self, message: Message) -> Any:
        return message

    def update_reveal(self, handle: Any, text: str) -> None:
        return None

    def end_reveal(self, handle: Any, html: str) -> None:
        return None

    def set_typing(self, visible: bool) -> None:
        return None

    def scroll_to_bottom(self) -> None:
        return None

    def set_title(self, title: str) -> None:
        return None

    def render_history(self, entries: list[HistoryEntry], active_id: Optional[str]) -> None:
        return None

    def apply_theme(self, theme: str) -> None:
        return None

    def alert(self, text: str) -> None:
        return None

    async def confirm(self, text: str) -> bool:
        return self.confirm_default
