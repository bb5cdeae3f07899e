from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from chatrelay.core.config import settings


class ProviderConfig(BaseModel):
    """Fixed completion parameters for the upstream provider."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    host: str = Field(..., min_length=1)
    base_url: str = Field(..., min_length=1)
    api_key_env: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    temperature: float = Field(..., ge=0.0, le=2.0)
    max_tokens: int = Field(..., gt=0)


@lru_cache
def get_provider_config() -> ProviderConfig:
    try:
        return ProviderConfig(
            host=settings.PROVIDER_HOST.strip(),
            base_url=settings.PROVIDER_BASE_URL.strip(),
            api_key_env=settings.PROVIDER_API_KEY_ENV.strip(),
            model=settings.MODEL.strip(),
            temperature=settings.TEMPERATURE,
            max_tokens=settings.MAX_TOKENS,
        )
    except ValidationError as exc:
        raise RuntimeError(f"Provider settings validation error: {exc}") from exc


def reset_provider_config() -> None:
    get_provider_config.cache_clear()
