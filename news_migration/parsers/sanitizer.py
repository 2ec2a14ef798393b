"""
Cleanup of HTML fragments copied out of the legacy editor.

The legacy editor leaves three kinds of artifacts behind: hard line breaks
inside the markup, placeholder paragraphs holding nothing but a
non-breaking space, and paragraphs wrapped twice (``<p><p>...</p></p>``).
:func:`clean_up` removes all three.
"""

from __future__ import annotations

import re

__all__ = ["clean_up", "is_blank_text"]

NBSP = "\xa0"

_LINE_BREAKS = re.compile(r"[\r\n]")
_NBSP_PARAGRAPH = re.compile(r"<p(?:\s[^>]*)?>\s*(?:&nbsp;|&#160;|&#xa0;|\xa0)\s*</p>", re.IGNORECASE)
_DOUBLE_OPEN = re.compile(r"(<p(?:\s[^>]*)?>)\s*<p>", re.IGNORECASE)
_DOUBLE_CLOSE = re.compile(r"</p>\s*</p>", re.IGNORECASE)


def is_blank_text(text: str) -> bool:
    """True for text that is empty or a lone non-breaking space once trimmed."""
    stripped = (text or "").strip()
    return stripped == "" or stripped == NBSP


def _collapse(pattern: re.Pattern, replacement: str, html: str) -> str:
    # <p><p><p> needs more than one pass
    while True:
        collapsed = pattern.sub(replacement, html)
        if collapsed == html:
            return collapsed
        html = collapsed


def clean_up(html: str) -> str:
    if not html:
        return ""
    text = _LINE_BREAKS.sub("", html)
    text = _NBSP_PARAGRAPH.sub("", text)
    text = _collapse(_DOUBLE_OPEN, r"\1", text)
    text = _collapse(_DOUBLE_CLOSE, "</p>", text)
    return text
