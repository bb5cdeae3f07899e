from __future__ import annotations

import json
from typing import Any, Optional

from loguru import logger
from openai import APIError, APIStatusError, AsyncOpenAI

from chatrelay.core.config import settings
from chatrelay.core.env import get_env_value
from chatrelay.core.errors import InvalidRequest, UpstreamError
from chatrelay.core.providers import ProviderConfig, get_provider_config

MESSAGE_REQUIRED = 'Message is required'
GENERIC_UPSTREAM_DETAIL = 'API Error'


def _error_detail(body: Any) -> str:
    """Pull the human-readable message out of a provider error body."""
    if isinstance(body, dict):
        inner = body.get('error', body)
        if isinstance(inner, dict) and inner.get('message'):
            return str(inner['message'])
        if body.get('message'):
            return str(body['message'])
    return GENERIC_UPSTREAM_DETAIL


class CompletionGateway:
    """Forwards a single user message to the provider and returns the completion text.

    No state is kept between calls. Each call opens one client, makes one
    request without retries and closes the client again.
    """

    def __init__(self, provider: Optional[ProviderConfig] = None) -> None:
        self._provider = provider or get_provider_config()

    @property
    def provider(self) -> ProviderConfig:
        return self._provider

    def _build_client(self) -> AsyncOpenAI:
        api_key = get_env_value(self._provider.api_key_env)
        if not api_key:
            raise UpstreamError(
                settings.ERROR_MESSAGE,
                f"{self._provider.api_key_env} is missing in environment or .env",
            )
        return AsyncOpenAI(api_key=api_key, base_url=self._provider.base_url, max_retries=0)

    def build_request(self, message: str) -> dict[str, Any]:
        return {
            'model': self._provider.model,
            'messages': [{'role': 'user', 'content': message}],
            'temperature': self._provider.temperature,
            'max_tokens': self._provider.max_tokens,
        }

    async def complete(self, message: Optional[str]) -> str:
        if not message:
            raise InvalidRequest(MESSAGE_REQUIRED)

        logger.info('Processing message: {}...', message[:50])
        request = self.build_request(message)
        logger.debug(
            json.dumps(
                {
                    'event': 'llm_gateway.request',
                    'provider': self._provider.host,
                    'model': request['model'],
                    'temperature': request['temperature'],
                    'max_tokens': request['max_tokens'],
                },
                ensure_ascii=False,
            )
        )

        client = self._build_client()
        async with client:
            try:
                completion = await client.chat.completions.create(**request)
            except APIStatusError as exc:
                detail = _error_detail(exc.body)
                logger.error('llm_gateway.upstream_error', status=exc.status_code, detail=detail)
                raise UpstreamError(settings.ERROR_MESSAGE, detail) from exc
            except APIError as exc:
                logger.error('llm_gateway.transport_error', detail=exc.message)
                raise UpstreamError(settings.ERROR_MESSAGE, exc.message) from exc

        choices = getattr(completion, 'choices', None) or []
        content = None
        if choices:
            choice_message = getattr(choices[0], 'message', None)
            content = getattr(choice_message, 'content', None)
        if not content:
            logger.warning('llm_gateway.empty_completion', model=request['model'])
            return settings.FALLBACK_RESPONSE

        logger.info('Response sent successfully')
        return content


def get_completion_gateway() -> CompletionGateway:
    return CompletionGateway()
