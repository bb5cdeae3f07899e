from pathlib import Path
from typing import Annotated, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_PROJECT_NAME = "Chat Relay API"
DEFAULT_API_PREFIX = "/api"
DEFAULT_ERROR_MESSAGE = "Произошла ошибка при обработке запроса"
DEFAULT_FALLBACK_RESPONSE = "Не удалось получить ответ"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    PROJECT_NAME: str = DEFAULT_PROJECT_NAME
    API_PREFIX: str = DEFAULT_API_PREFIX
    ENV: str = 'development'
    DEBUG: bool = False

    LOG_LEVEL: str = 'INFO'
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ['*']

    PROVIDER_HOST: str = 'groq'
    PROVIDER_BASE_URL: str = 'https://api.groq.com/openai/v1'
    PROVIDER_API_KEY_ENV: str = 'GROQ_API_KEY'
    MODEL: str = 'llama-3.3-70b-versatile'
    TEMPERATURE: float = 0.7
    MAX_TOKENS: int = 1024

    ERROR_MESSAGE: str = DEFAULT_ERROR_MESSAGE
    FALLBACK_RESPONSE: str = DEFAULT_FALLBACK_RESPONSE

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, value):  # type: ignore[override]
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return []
            if value == '*':
                return ['*']
            return [item.strip() for item in value.split(',') if item.strip()]
        return value


class ClientSettings(BaseSettings):
    """Settings for the chat client; read from ``CHAT_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix='CHAT_', env_file='.env', extra='ignore')

    GATEWAY_URL: str = 'http://localhost:3000'
    STORAGE_PATH: Path = Path.home() / '.chatrelay' / 'storage.json'
    # Seconds; unset waits as long as the gateway takes.
    REQUEST_TIMEOUT: Optional[float] = None

    MAX_MESSAGE_LENGTH: int = 5000
    TITLE_LENGTH: int = 30
    REVEAL_INTERVAL: float = 0.03
    THINK_DELAY_MIN: float = 0.5
    THINK_DELAY_MAX: float = 1.5

    @field_validator('THINK_DELAY_MAX')
    @classmethod
    def check_delay_range(cls, value: float, info):  # type: ignore[override]
        lower = info.data.get('THINK_DELAY_MIN', 0.0)
        if value < lower:
            raise ValueError('THINK_DELAY_MAX must not be lower than THINK_DELAY_MIN')
        return value


settings = Settings()
