"""Plain-text sanitization for user supplied catalog fields."""

from __future__ import annotations

import html
import re

import bleach

_SCRIPT_BLOCK_RE = re.compile(
    r"<\s*(script|style)[^>]*>.*?<\s*/\s*\1\s*>", re.IGNORECASE | re.DOTALL
)
_WHITESPACE_RE = re.compile(r"[ \t\r\f\v]+")


def strip_markup(value: str | None) -> str:
    """Return ``value`` with every HTML tag removed and whitespace collapsed.

    Catalog fields are stored as plain text, so entities produced by
    ``bleach`` are decoded again; escaping is the renderer's job.
    """

    if not value:
        return ""

    without_blocks = _SCRIPT_BLOCK_RE.sub("", value)
    cleaned = bleach.clean(without_blocks, tags=[], attributes={}, strip=True)
    cleaned = html.unescape(cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def clean_tags(values) -> list[str]:
    """Sanitize tag labels, dropping blanks and duplicates but keeping order."""

    tags: list[str] = []
    for value in values or []:
        tag = strip_markup(value)
        if tag and tag not in tags:
            tags.append(tag)
    return tags


__all__ = ["clean_tags", "strip_markup"]
