from __future__ import annotations

import time
from collections.abc import Container
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from chatrelay.client import strings


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Sender(str, Enum):
    USER = 'user'
    AI = 'ai'


class Message(BaseModel):
    text: str = ''
    sender: Sender
    timestamp: datetime = Field(default_factory=utc_now)


class ChatSession(BaseModel):
    title: str = strings.DEFAULT_TITLE
    messages: list[Message] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def ensure_title(cls, value: str) -> str:
        value = value.strip()
        return value or strings.DEFAULT_TITLE


SESSIONS_ADAPTER = TypeAdapter(dict[str, ChatSession])


def derive_title(text: str, limit: int = 30) -> str:
    """Title from the first ``limit`` characters of a message, ellipsized when cut."""
    title = text[:limit]
    if len(text) > limit:
        title += '...'
    return title


def new_session_id(existing: Container[str] = ()) -> str:
    candidate = int(time.time() * 1000)
    while str(candidate) in existing:
        candidate += 1
    return str(candidate)
