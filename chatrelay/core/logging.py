import logging
import sys
from typing import Any

from loguru import logger

_STDLIB_LOGGERS = ('uvicorn', 'uvicorn.access', 'uvicorn.error', 'httpx', 'openai')


class _InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records to loguru, keeping the caller location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str, sink: Any = None) -> None:
    logger.remove()
    logger.add(
        sink or sys.stdout,
        level=level,
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )
    logging.root.handlers = [_InterceptHandler()]
    logging.root.setLevel(level)
    for name in _STDLIB_LOGGERS:
        named = logging.getLogger(name)
        named.handlers = []
        named.propagate = True
