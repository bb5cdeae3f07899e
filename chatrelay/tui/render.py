"""Terminal rendering of formatted chat messages.

:func:`chatrelay.client.formatting.format_message` escapes every ``<`` in
user text before adding its own tags, so the only tags left in its output
are the ones it produces. They map onto rich styles here.
"""

import html
import re
from typing import Optional

from rich.text import Text

from chatrelay.client.formatting import format_time
from chatrelay.client.models import Message, Sender

_TAG = re.compile(r'<(/?)(strong|em|pre|code)(?: class="[^"]*")?>')

_STYLES: dict[str, Optional[str]] = {
    'strong': 'bold',
    'em': 'italic',
    'pre': None,
    'code': 'bright_cyan',
}

SENDER_LABELS = {
    Sender.USER: 'Вы',
    Sender.AI: 'ИИ',
}


def to_rich(markup: str) -> Text:
    text = Text(overflow='fold')
    active: list[str] = []
    pos = 0
    for match in _TAG.finditer(markup):
        _append(text, markup[pos:match.start()], active)
        closing, tag = match.group(1), match.group(2)
        style = _STYLES[tag]
        if style is not None:
            if not closing:
                active.append(style)
            elif style in active:
                active.remove(style)
        pos = match.end()
    _append(text, markup[pos:], active)
    return text


def _append(text: Text, chunk: str, active: list[str]) -> None:
    if chunk:
        text.append(html.unescape(chunk), style=' '.join(active) or None)


def info_line(message: Message) -> str:
    return f'{SENDER_LABELS[message.sender]} · {format_time(message.timestamp)}'
