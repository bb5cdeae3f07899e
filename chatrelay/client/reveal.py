from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator


class Reveal:
    """Timed, character-by-character reveal of an already complete text.

    ``stream()`` yields the revealed prefix after every tick. ``cancel()``
    stops the stream at the current position, ``resume()`` allows a later
    ``stream()`` to continue from there, and ``finish()`` jumps to the end.
    """

    def __init__(self, text: str, *, interval: float = 0.03, step: int = 1) -> None:
        if step < 1:
            raise ValueError('step must be positive')
        self._text = text
        self._interval = interval
        self._step = step
        self._position = 0
        self._cancelled = False

    @property
    def text(self) -> str:
        return self._text

    @property
    def revealed(self) -> str:
        return self._text[: self._position]

    @property
    def done(self) -> bool:
        return self._position >= len(self._text)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def resume(self) -> None:
        self._cancelled = False

    def finish(self) -> None:
        self._position = len(self._text)
        self._cancelled = True

    async def stream(self) -> AsyncIterator[str]:
        while not self._cancelled and not self.done:
            await asyncio.sleep(self._interval)
            if self._cancelled:
                break
            self._position = min(self._position + self._step, len(self._text))
            yield self.revealed
