from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from loguru import logger


class LocalStorage:
    """Durable string key/value storage backed by one JSON file.

    Every write replaces the whole file through a temporary file and
    ``os.replace``, so a crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()
        self._items = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            content = self._path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return {}
        try:
            payload = json.loads(content)
        except json.JSONDecodeError:
            logger.warning('storage.corrupt', path=str(self._path))
            return {}
        if not isinstance(payload, dict):
            logger.warning('storage.corrupt', path=str(self._path))
            return {}
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                json.dump(self._items, handle, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def keys(self) -> list[str]:
        return list(self._items)
