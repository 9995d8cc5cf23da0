"""
Text sanitization for free-text fields (locations, notes, accessory names,
out-of-service reasons).

Notes are rendered by the browser with URLs turned into links, so markup that
could execute is stripped before anything is stored.
"""

import re
import unicodedata
from typing import Optional


_EVENT_HANDLER = re.compile(r'(<[^>]*?)\s+on\w+\s*=\s*("[^"]*"|\'[^\']*\'|[^\s>]+)', re.IGNORECASE)
_SCRIPT_BLOCK = re.compile(r'<(script|style)[^>]*>.*?</\1>', re.IGNORECASE | re.DOTALL)
_DANGEROUS_SCHEMES = re.compile(r'(javascript|vbscript)\s*:|data\s*:\s*text/html', re.IGNORECASE)

_INVISIBLE_CHARS = (
    '\u200b',  # Zero Width Space
    '\u200c',  # Zero Width Non-Joiner
    '\u200d',  # Zero Width Joiner
    '\u202e',  # Right-to-Left Override
    '\ufeff',  # BOM
)


def strip_dangerous_tags(content: str) -> str:
    """
    Remove script/style blocks, inline event handlers and script URLs.
    """
    if not content:
        return content

    content = _SCRIPT_BLOCK.sub('', content)
    previous = None
    while previous != content:
        previous = content
        content = _EVENT_HANDLER.sub(r'\1', content)
    return _DANGEROUS_SCHEMES.sub('', content)


def normalize_unicode(value: str) -> str:
    """NFKC-normalize and drop zero-width characters."""
    if not value:
        return value

    normalized = unicodedata.normalize('NFKC', value)
    for char in _INVISIBLE_CHARS:
        normalized = normalized.replace(char, '')
    return normalized


def clean_text(value: Optional[str]) -> Optional[str]:
    """Sanitize a free-text field and trim surrounding whitespace."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return strip_dangerous_tags(normalize_unicode(value)).strip()

