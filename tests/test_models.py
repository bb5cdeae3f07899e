from chatrelay.client import strings
from chatrelay.client.models import SESSIONS_ADAPTER, ChatSession, Sender, derive_title, new_session_id


def test_derive_title_short_text_unchanged():
    assert derive_title("hello") == "hello"
    assert derive_title("x" * 30) == "x" * 30


def test_derive_title_truncates_with_ellipsis():
    assert derive_title("y" * 31) == "y" * 30 + "..."


def test_new_session_id_avoids_existing_keys(monkeypatch):
    monkeypatch.setattr("chatrelay.client.models.time.time", lambda: 1700000000.0)
    assert new_session_id() == "1700000000000"
    assert new_session_id({"1700000000000", "1700000000001"}) == "1700000000002"


def test_blank_title_gets_default():
    assert ChatSession(title="  ").title == strings.DEFAULT_TITLE


def test_sessions_blob_uses_wire_names():
    blob = (
        '{"1700000000000": {"title": "hi", "messages": ['
        '{"text": "hi", "sender": "user", "timestamp": "2024-05-01T10:00:00.000Z"},'
        '{"text": "hello", "sender": "ai", "timestamp": "2024-05-01T10:00:01.000Z"}]}}'
    )
    sessions = SESSIONS_ADAPTER.validate_json(blob)
    session = sessions["1700000000000"]
    assert [m.sender for m in session.messages] == [Sender.USER, Sender.AI]
    assert session.messages[0].timestamp < session.messages[1].timestamp
