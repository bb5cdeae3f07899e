"""Command line entry point for the terminal chat client."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from chatrelay.core.config import ClientSettings
from chatrelay.core.logging import configure_logging
from chatrelay.tui.app import run_chat

LOG_FILE_NAME = 'chatrelay.log'

app = typer.Typer(
    name='chatrelay',
    help='Terminal chat client for the chat relay gateway',
    add_completion=False,
)


@app.command()
def chat(
    gateway_url: Optional[str] = typer.Option(
        None,
        '--gateway-url',
        '-g',
        help='Base URL of the completion gateway (defaults to CHAT_GATEWAY_URL)',
    ),
    storage: Optional[Path] = typer.Option(
        None,
        '--storage',
        '-s',
        help='Chat history file (defaults to CHAT_STORAGE_PATH)',
    ),
    log_level: str = typer.Option('INFO', '--log-level', help='Log level for the log file'),
):
    """Open the chat window."""
    overrides = {}
    if gateway_url:
        overrides['GATEWAY_URL'] = gateway_url
    if storage is not None:
        overrides['STORAGE_PATH'] = storage
    settings = ClientSettings(**overrides)

    configure_logging(log_level.upper(), settings.STORAGE_PATH.with_name(LOG_FILE_NAME))
    asyncio.run(run_chat(settings))


def main():
    app()


if __name__ == '__main__':
    main()
