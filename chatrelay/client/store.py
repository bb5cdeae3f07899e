from __future__ import annotations

import asyncio
import random
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Optional

from loguru import logger
from pydantic import ValidationError

from chatrelay.client import strings
from chatrelay.client.formatting import format_message
from chatrelay.client.gateway import CompletionClient
from chatrelay.client.models import (
    SESSIONS_ADAPTER,
    ChatSession,
    Message,
    Sender,
    derive_title,
    new_session_id,
    utc_now,
)
from chatrelay.client.presenter import HistoryEntry, NullPresenter, Presenter
from chatrelay.client.reveal import Reveal
from chatrelay.client.storage import LocalStorage
from chatrelay.core.config import ClientSettings
from chatrelay.core.errors import SessionNotFound, ValidationFailure

STORAGE_KEY = 'aiChats'
THEME_KEY = 'theme'
LIGHT_THEME = 'light-theme'
DARK_THEME = 'dark-theme'


@dataclass
class _ActiveReveal:
    reveal: Reveal
    message: Message
    handle: Any
    completed: bool = False


class ChatSessionStore:
    """Owns the chat sessions, the current-session pointer and their persistence.

    All mutations go through the commands below. Rendering goes through the
    presenter, network calls through the completion client and durable
    state through local storage. The whole mapping is persisted after every
    mutation.
    """

    def __init__(
        self,
        storage: LocalStorage,
        gateway: CompletionClient,
        presenter: Optional[Presenter] = None,
        *,
        settings: Optional[ClientSettings] = None,
    ) -> None:
        self._storage = storage
        self._gateway = gateway
        self._presenter: Presenter = presenter or NullPresenter()
        self._settings = settings or ClientSettings()
        self._sessions: dict[str, ChatSession] = {}
        self._current_id: Optional[str] = None
        self._active: Optional[_ActiveReveal] = None
        self._pending = 0
        self._theme = LIGHT_THEME

    @classmethod
    def from_settings(
        cls,
        settings: Optional[ClientSettings] = None,
        presenter: Optional[Presenter] = None,
        *,
        gateway: Optional[CompletionClient] = None,
    ) -> ChatSessionStore:
        settings = settings or ClientSettings()
        return cls(
            LocalStorage(settings.STORAGE_PATH),
            gateway or CompletionClient(settings.GATEWAY_URL, timeout=settings.REQUEST_TIMEOUT),
            presenter,
            settings=settings,
        )

    @property
    def sessions(self) -> Mapping[str, ChatSession]:
        return MappingProxyType(self._sessions)

    @property
    def current_id(self) -> Optional[str]:
        return self._current_id

    @property
    def current_session(self) -> Optional[ChatSession]:
        if self._current_id is None:
            return None
        return self._sessions.get(self._current_id)

    @property
    def theme(self) -> str:
        return self._theme

    async def close(self) -> None:
        await self._gateway.aclose()

    # Commands

    async def send_message(self, text: str) -> Optional[Message]:
        try:
            text = self._validate(text)
        except ValidationFailure as e:
            logger.info('chat.send.rejected', reason=str(e))
            self._presenter.alert(str(e))
            return None
        if not text:
            return None

        self._supersede_reveal()
        session_id = self._ensure_session(text)
        session = self._sessions[session_id]

        user_message = Message(sender=Sender.USER, text=text, timestamp=utc_now())
        session.messages.append(user_message)
        self.persist()
        self._render(user_message)

        self._pending += 1
        self._presenter.set_typing(True)
        self._presenter.scroll_to_bottom()
        try:
            await self._think()
            response_text = await self._gateway.request_completion(text)

            ai_message = Message(sender=Sender.AI, text='', timestamp=utc_now())
            session.messages.append(ai_message)
            self.persist()
            await self._reveal(session_id, ai_message, response_text)
        finally:
            self._pending -= 1
            self._presenter.set_typing(self._pending > 0)
        return ai_message

    def new_chat(self) -> None:
        self._supersede_reveal()
        self._current_id = None
        self._presenter.clear_messages()
        self._presenter.set_title(strings.DEFAULT_TITLE)
        self._render_history()

    def load_chat(self, session_id: str) -> ChatSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        self._supersede_reveal()
        self._current_id = session_id
        self._presenter.clear_messages()
        self._presenter.set_title(session.title)
        for message in session.messages:
            self._render(message)
        self._presenter.scroll_to_bottom()
        self._render_history()
        return session

    def rename_chat(self, session_id: str, new_title: str) -> bool:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        title = new_title.strip()
        if not title:
            return False
        session.title = title
        self.persist()
        self._render_history()
        if session_id == self._current_id:
            self._presenter.set_title(title)
        return True

    async def clear_all_history(self) -> bool:
        if not await self._presenter.confirm(strings.CONFIRM_CLEAR_HISTORY):
            return False
        self._supersede_reveal()
        self._storage.remove_item(STORAGE_KEY)
        self._sessions = {}
        self._current_id = None
        self._presenter.clear_messages()
        self._presenter.set_title(strings.DEFAULT_TITLE)
        self._render_history()
        logger.info('chat.history.cleared')
        return True

    def persist(self) -> None:
        payload = SESSIONS_ADAPTER.dump_json(self._sessions).decode('utf-8')
        self._storage.set_item(STORAGE_KEY, payload)

    def restore(self) -> None:
        self._sessions = {}
        self._current_id = None
        raw = self._storage.get_item(STORAGE_KEY)
        if raw:
            try:
                self._sessions = SESSIONS_ADAPTER.validate_json(raw)
            except ValidationError as exc:
                logger.warning('chat.restore.corrupt', errors=exc.error_count())
        self._render_history()
        # TODO: load the most recently used session once sessions record a last-used time
        first_id = next(iter(self._sessions), None)
        if first_id is not None:
            self.load_chat(first_id)

    def restore_theme(self) -> str:
        stored = self._storage.get_item(THEME_KEY)
        self._theme = stored if stored in (LIGHT_THEME, DARK_THEME) else LIGHT_THEME
        self._presenter.apply_theme(self._theme)
        return self._theme

    def toggle_theme(self) -> str:
        self._theme = LIGHT_THEME if self._theme == DARK_THEME else DARK_THEME
        self._storage.set_item(THEME_KEY, self._theme)
        self._presenter.apply_theme(self._theme)
        return self._theme

    # Internals

    def _validate(self, text: str) -> str:
        text = text.strip()
        if len(text) > self._settings.MAX_MESSAGE_LENGTH:
            raise ValidationFailure(strings.MESSAGE_TOO_LONG)
        return text

    def _ensure_session(self, text: str) -> str:
        current = self.current_session
        if current is not None and current.messages:
            return self._current_id  # type: ignore[return-value]
        session_id = new_session_id(self._sessions)
        self._sessions[session_id] = ChatSession(
            title=derive_title(text, self._settings.TITLE_LENGTH),
        )
        self._current_id = session_id
        self._render_history()
        self._presenter.set_title(self._sessions[session_id].title)
        logger.debug('chat.session.created', session_id=session_id)
        return session_id

    def _render(self, message: Message) -> None:
        self._presenter.render_message(message, format_message(message.text))
        self._presenter.scroll_to_bottom()

    def _render_history(self) -> None:
        entries = [HistoryEntry(session_id=key, title=value.title) for key, value in self._sessions.items()]
        self._presenter.render_history(entries, self._current_id)

    async def _think(self) -> None:
        delay = random.uniform(self._settings.THINK_DELAY_MIN, self._settings.THINK_DELAY_MAX)
        if delay > 0:
            await asyncio.sleep(delay)

    async def _reveal(self, session_id: str, message: Message, text: str) -> None:
        if session_id != self._current_id:
            message.text = text
            self.persist()
            return

        active = _ActiveReveal(
            reveal=Reveal(text, interval=self._settings.REVEAL_INTERVAL),
            message=message,
            handle=self._presenter.start_reveal(message),
        )
        self._active = active
        try:
            async for partial in active.reveal.stream():
                self._presenter.update_reveal(active.handle, partial)
                self._presenter.scroll_to_bottom()
        finally:
            self._complete(active)

    def _complete(self, active: _ActiveReveal) -> None:
        if self._active is active:
            self._active = None
        if active.completed:
            return
        active.completed = True
        active.reveal.finish()
        active.message.text = active.reveal.text
        self._presenter.end_reveal(active.handle, format_message(active.message.text))
        self.persist()

    def _supersede_reveal(self) -> None:
        if self._active is not None:
            self._complete(self._active)
