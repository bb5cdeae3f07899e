import asyncio
import os
from typing import Any, Optional

import pytest

os.environ.setdefault("GROQ_API_KEY", "test")

from chatrelay.client.presenter import HistoryEntry
from chatrelay.core.config import ClientSettings, settings
from chatrelay.core.providers import reset_provider_config


@pytest.fixture(autouse=True, scope="session")
def _configure_provider():
    previous = (settings.MODEL, settings.PROVIDER_API_KEY_ENV)
    settings.MODEL = "llama-3.3-70b-versatile"
    settings.PROVIDER_API_KEY_ENV = "GROQ_API_KEY"
    reset_provider_config()
    try:
        yield
    finally:
        settings.MODEL, settings.PROVIDER_API_KEY_ENV = previous
        reset_provider_config()


@pytest.fixture
def anyio_backend():
    return "asyncio"


class RecordingPresenter:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.rendered: list[tuple[str, str]] = []
        self.history: list[HistoryEntry] = []
        self.active_id: Optional[str] = None
        self.title: Optional[str] = None
        self.typing = False
        self.theme: Optional[str] = None
        self.alerts: list[str] = []
        self.reveals: dict[int, list[str]] = {}
        self.confirm_answer = True
        self.reveal_started = asyncio.Event()

    def clear_messages(self) -> None:
        self.calls.append(("clear_messages", None))
        self.rendered = []

    def render_message(self, message, html: str) -> None:
        self.calls.append(("render_message", html))
        self.rendered.append((message.sender.value, html))

    def start_reveal(self, message):
        handle = len(self.reveals)
        self.reveals[handle] = []
        self.calls.append(("start_reveal", handle))
        self.reveal_started.set()
        return handle

    def update_reveal(self, handle, text: str) -> None:
        self.reveals[handle].append(text)

    def end_reveal(self, handle, html: str) -> None:
        self.calls.append(("end_reveal", handle))
        self.rendered.append(("ai", html))

    def set_typing(self, visible: bool) -> None:
        self.typing = visible

    def scroll_to_bottom(self) -> None:
        self.calls.append(("scroll_to_bottom", None))

    def set_title(self, title: str) -> None:
        self.title = title

    def render_history(self, entries, active_id) -> None:
        self.history = list(entries)
        self.active_id = active_id

    def apply_theme(self, theme: str) -> None:
        self.theme = theme

    def alert(self, text: str) -> None:
        self.alerts.append(text)

    async def confirm(self, text: str) -> bool:
        self.calls.append(("confirm", text))
        return self.confirm_answer


class FakeCompletionClient:
    def __init__(self, replies=None, default: str = "pong") -> None:
        self.replies = list(replies or [])
        self.default = default
        self.calls: list[str] = []
        self.gate: Optional[asyncio.Event] = None
        self.closed = False

    async def request_completion(self, text: str) -> str:
        self.calls.append(text)
        if self.gate is not None:
            await self.gate.wait()
        if self.replies:
            return self.replies.pop(0)
        return self.default

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def client_settings(tmp_path):
    return ClientSettings(
        _env_file=None,
        STORAGE_PATH=tmp_path / "storage.json",
        REVEAL_INTERVAL=0,
        THINK_DELAY_MIN=0,
        THINK_DELAY_MAX=0,
    )
