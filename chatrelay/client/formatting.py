"""Display formatting for chat messages.

The pipeline is one-directional: stored text is never formatted. Steps run in
a fixed order:

1. escape ``& < > " '`` so user text cannot inject markup
2. fenced code blocks become ``<pre><code class="language-...">``
3. ``*text*`` becomes bold
4. ``_text_`` becomes italic

Code block bodies are set aside before steps 3 and 4 and put back afterwards.
"""

import html
import re
from datetime import datetime

_ESCAPES = (
    ('\x00', ''),
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&#039;'),
)

_CODE_BLOCK = re.compile(r'```(\w+)?\n([\s\S]*?)\n```')
_BOLD = re.compile(r'\*([^*]+)\*')
_ITALIC = re.compile(r'_([^_]+)_')
_PLACEHOLDER = re.compile(r'\x00(\d+)\x00')
_TAG = re.compile(r'<[^>]*>?')


def escape_html(text: str) -> str:
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def format_message(text: str) -> str:
    formatted = escape_html(text)

    blocks: list[str] = []

    def _stash(match: re.Match) -> str:
        lang = match.group(1) or 'plaintext'
        blocks.append(f'<pre><code class="language-{lang}">{match.group(2)}</code></pre>')
        return f'\x00{len(blocks) - 1}\x00'

    formatted = _CODE_BLOCK.sub(_stash, formatted)
    formatted = _BOLD.sub(r'<strong>\1</strong>', formatted)
    formatted = _ITALIC.sub(r'<em>\1</em>', formatted)
    def _restore(match: re.Match) -> str:
        index = int(match.group(1))
        return blocks[index] if index < len(blocks) else match.group(0)

    return _PLACEHOLDER.sub(_restore, formatted)


def plain_text(markup: str) -> str:
    """Clipboard text for a formatted message: tags stripped, entities decoded."""
    return html.unescape(_TAG.sub('', markup))


def format_time(moment: datetime) -> str:
    return moment.astimezone().strftime('%H:%M')
