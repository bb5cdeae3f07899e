from __future__ import annotations

from typing import Optional


class GatewayError(Exception):
    """Base error rendered by the API as ``{"error": ..., "details": ...}``."""

    status_code = 500

    def __init__(self, error: str, details: Optional[str] = None) -> None:
        super().__init__(details or error)
        self.error = error
        self.details = details

    def to_payload(self) -> dict[str, str]:
        payload = {'error': self.error}
        if self.details is not None:
            payload['details'] = self.details
        return payload


class InvalidRequest(GatewayError):
    status_code = 400


class UpstreamError(GatewayError):
    status_code = 500


class NetworkFailure(Exception):
    """The gateway could not be reached from the client."""


class ValidationFailure(ValueError):
    """A message was rejected before any network activity."""


class SessionNotFound(KeyError):
    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Chat session not found: {self.session_id}"
