from __future__ import annotations

from typing import Optional

import httpx
from loguru import logger

from chatrelay.client import strings
from chatrelay.core.errors import NetworkFailure

CHAT_PATH = '/api/chat'


def _error_field(response: httpx.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get('error'):
        return str(payload['error'])
    return None


class CompletionClient:
    """Calls the completion gateway; every outcome comes back as display text.

    Server errors and network failures are logged and turned into the
    localized strings in :mod:`chatrelay.client.strings` so callers can treat
    them as ordinary AI responses.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @property
    def timeout(self) -> httpx.Timeout:
        return self._client.timeout

    async def __aenter__(self) -> CompletionClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _post(self, text: str) -> httpx.Response:
        try:
            return await self._client.post(CHAT_PATH, json={'message': text})
        except httpx.RequestError as exc:
            raise NetworkFailure(str(exc) or exc.__class__.__name__) from exc

    async def request_completion(self, text: str) -> str:
        try:
            response = await self._post(text)
        except NetworkFailure as exc:
            logger.error('Fetch Error: {}', exc)
            return strings.NETWORK_ERROR

        if response.is_error:
            error = _error_field(response) or response.reason_phrase
            logger.error('Server Error: {} {}', response.status_code, error)
            return strings.SERVER_ERROR.format(error=error)

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict) or not isinstance(payload.get('response'), str):
            logger.error('Server Error: malformed response body')
            return strings.SERVER_ERROR.format(error=response.reason_phrase)
        return payload['response']
