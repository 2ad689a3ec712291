"""Text cleanup helpers shared by every source adapter."""

from __future__ import annotations

import re
from html import unescape

_WHITESPACE_RE = re.compile(r"\s+")
_HTML_TAG_RE = re.compile(r"<[^>]+>")
# "1.2 Title", "3. Title", "3) Title", "• Title", "- Title"
_LIST_PREFIX_RE = re.compile(r"^\s*(?:\d+(?:\.\d+)+\.?|\d+[.)]|[•\-–—*·])\s+")


def clean_text(text: str | None) -> str:
    """Collapse whitespace runs to a single space and trim."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.replace("\xa0", " ")).strip()


def strip_list_prefix(text: str | None) -> str:
    """Remove one leading ordinal or bullet marker from a listing title."""
    cleaned = clean_text(text)
    return _LIST_PREFIX_RE.sub("", cleaned, count=1)


def strip_html(text: str | None) -> str:
    """Remove HTML tags and unescape entities."""
    if not text:
        return ""
    return clean_text(unescape(_HTML_TAG_RE.sub(" ", text)))


def truncate(text: str, limit: int) -> str:
    """Shorten text to at most ``limit`` characters on a word boundary."""
    if len(text) <= limit:
        return text
    cut = text[: limit - 1].rsplit(" ", 1)[0].rstrip(",;:.")
    return f"{cut}…"
