"""Chat client: session store, local persistence and gateway access."""

from chatrelay.client.gateway import CompletionClient
from chatrelay.client.models import ChatSession, Message, Sender
from chatrelay.client.presenter import HistoryEntry, NullPresenter, Presenter
from chatrelay.client.reveal import Reveal
from chatrelay.client.storage import LocalStorage
from chatrelay.client.store import ChatSessionStore

__all__ = [
    'ChatSession',
    'ChatSessionStore',
    'CompletionClient',
    'HistoryEntry',
    'LocalStorage',
    'Message',
    'NullPresenter',
    'Presenter',
    'Reveal',
    'Sender',
]
