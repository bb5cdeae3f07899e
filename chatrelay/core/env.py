from __future__ import annotations

import os
from pathlib import Path

from chatrelay.core.config import settings


def _env_files() -> list[Path]:
    configured = settings.model_config.get('env_file')
    if not configured:
        return []
    if isinstance(configured, (list, tuple)):
        return [Path(item) for item in configured]
    return [Path(configured)]


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def read_env_file(path: Path) -> dict[str, str]:
    """Parse a dotenv file into a dict; missing or unreadable files yield nothing."""
    values: dict[str, str] = {}
    try:
        content = path.read_text(encoding='utf-8')
    except OSError:
        return values
    for line in content.splitlines():
        raw = line.strip()
        if not raw or raw.startswith('#'):
            continue
        if raw.startswith('export '):
            raw = raw[len('export ') :].lstrip()
        key, sep, value = raw.partition('=')
        key = key.strip()
        if not sep or not key:
            continue
        values[key] = _strip_quotes(value.strip())
    return values


def get_env_value(key: str) -> str | None:
    if key in os.environ:
        return os.environ[key] or None
    for path in _env_files():
        value = read_env_file(path).get(key)
        if value:
            return value
    return None
