"""Date normalization for the many formats regulators publish.

Every parser here returns a timezone-aware UTC ``datetime`` or ``None``;
none of them raise. Day-first is assumed for ambiguous numeric dates since
every source covered is European, UK or Indian.
"""

from __future__ import annotations

import logging
import re
import time
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime

from dateutil import parser as dtparser

from regwatch.ingestion.text import clean_text

logger = logging.getLogger(__name__)

ITALIAN_MONTHS = {
    "gennaio": 1, "gen": 1,
    "febbraio": 2, "feb": 2,
    "marzo": 3, "mar": 3,
    "aprile": 4, "apr": 4,
    "maggio": 5, "mag": 5,
    "giugno": 6, "giu": 6,
    "luglio": 7, "lug": 7,
    "agosto": 8, "ago": 8,
    "settembre": 9, "set": 9,
    "ottobre": 10, "ott": 10,
    "novembre": 11, "nov": 11,
    "dicembre": 12, "dic": 12,
}

SPANISH_MONTHS = {
    "enero": 1, "ene": 1,
    "febrero": 2,
    "abril": 4, "abr": 4,
    "mayo": 5, "may": 5,
    "junio": 6, "jun": 6,
    "julio": 7, "jul": 7,
    "septiembre": 9, "setiembre": 9, "sep": 9,
    "octubre": 10, "oct": 10,
    "noviembre": 11,
    "diciembre": 12,
}

_LOCAL_MONTHS = {**SPANISH_MONTHS, **ITALIAN_MONTHS}

_ENGLISH_MONTH = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)

_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_ORDINAL_RE = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_LABEL_PREFIX_RE = re.compile(
    r"^\s*(?:published|last updated|updated|posted|date|pubblicato il|fecha)\b\s*:?\s*",
    re.IGNORECASE,
)
_LOCAL_DATE_RE = re.compile(
    r"\b(\d{1,2})\s+(?:de\s+)?([a-zàèéìòù]+)\.?\s+(?:de\s+|del\s+)?(\d{4})\b",
    re.IGNORECASE,
)
_NUMERIC_DATE_RE = re.compile(
    r"\b(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{4})(?:[\s,T]+(\d{1,2}):(\d{2}))?\b"
)
_TIME_RE = re.compile(r"\b(\d{1,2})[:.](\d{2})\b")

# Embedded date shapes, most specific first.
_EMBEDDED_DATE_RES = (
    re.compile(
        rf"\b\d{{1,2}}(?:st|nd|rd|th)?\s+{_ENGLISH_MONTH}\.?,?\s+\d{{4}}\b",
        re.IGNORECASE,
    ),
    re.compile(
        rf"\b{_ENGLISH_MONTH}\.?\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}}\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    re.compile(r"\b\d{1,2}[/.]\d{1,2}[/.]\d{4}\b"),
)

DEFAULT_DATE_LABELS = (
    "deadline",
    "responses? by",
    "comments? by",
    "consultation (?:closes|ends)(?: on)?",
    "closes? on",
    "closing date",
    "published(?: on)?",
    "by",
)


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _safe_datetime(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime | None:
    try:
        return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
    except ValueError:
        return None


def _parse_iso(text: str) -> datetime | None:
    if not _ISO_RE.match(text):
        return None
    try:
        return _to_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None


def _parse_rfc2822(text: str) -> datetime | None:
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
    return _to_utc(parsed) if parsed else None


def _parse_local_month(text: str) -> datetime | None:
    """Italian and Spanish month names: "12 gennaio 2025", "3 de marzo de 2025"."""
    for match in _LOCAL_DATE_RE.finditer(text):
        month = _LOCAL_MONTHS.get(match.group(2).lower())
        if month is None:
            continue
        return _safe_datetime(int(match.group(3)), month, int(match.group(1)))
    return None


def _parse_numeric(text: str) -> datetime | None:
    match = _NUMERIC_DATE_RE.search(text)
    if not match:
        return None
    day, month, year = int(match.group(1)), int(match.group(2)), int(match.group(3))
    hour = int(match.group(4)) if match.group(4) else 0
    minute = int(match.group(5)) if match.group(5) else 0
    return _safe_datetime(year, month, day, hour, minute)


def _parse_fuzzy(text: str) -> datetime | None:
    # dateutil fills missing parts from "today", so only trust it with a year.
    if not _YEAR_RE.search(text):
        return None
    try:
        parsed = dtparser.parse(text, dayfirst=True, fuzzy=True)
    except (ValueError, OverflowError):
        return None
    return _to_utc(parsed)


def parse_date(raw) -> datetime | None:
    """Parse any date representation a source may hand us.

    Accepts ``datetime``, ``date``, ``time.struct_time`` (feedparser's
    ``*_parsed`` fields) or text. Returns ``None`` for anything unparseable.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return _to_utc(raw)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    if isinstance(raw, time.struct_time):
        return _safe_datetime(*raw[:5])
    if not isinstance(raw, str):
        return None

    text = _LABEL_PREFIX_RE.sub("", clean_text(raw))
    if not text:
        return None

    for attempt in (_parse_iso, _parse_rfc2822):
        parsed = attempt(text)
        if parsed is not None:
            return parsed

    text = _ORDINAL_RE.sub(r"\1", text)
    for attempt in (_parse_local_month, _parse_numeric, _parse_fuzzy):
        parsed = attempt(text)
        if parsed is not None:
            return parsed

    logger.debug("Unparseable date: %r", raw)
    return None


def combine_date_time(date_text: str | None, time_text: str | None) -> datetime | None:
    """Join a date field and a separate "HH:mm" field into one instant."""
    parsed = parse_date(date_text)
    if parsed is None:
        return None
    match = _TIME_RE.search(time_text or "")
    if not match:
        return parsed
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return parsed
    return parsed.replace(hour=hour, minute=minute)


def _find_date_match(text: str) -> re.Match | None:
    for pattern in _EMBEDDED_DATE_RES:
        match = pattern.search(text)
        if match:
            return match
    return None


def find_date_in_text(text: str | None) -> datetime | None:
    """Return the first date embedded anywhere in free text."""
    if not text:
        return None
    match = _find_date_match(text)
    if match:
        return parse_date(match.group(0))
    return _parse_local_month(_ORDINAL_RE.sub(r"\1", text))


def extract_labeled_date(text: str | None, labels=DEFAULT_DATE_LABELS) -> datetime | None:
    """Find a date introduced by a label such as "Responses by 12 March 2024"."""
    if not text:
        return None
    for label in labels:
        pattern = re.compile(rf"\b{label}\b\s*:?\s*(.{{6,40}})", re.IGNORECASE)
        for match in pattern.finditer(text):
            parsed = find_date_in_text(match.group(1))
            if parsed is not None:
                return parsed
    return None


def split_title_and_date(raw: str | None) -> tuple[str, datetime | None]:
    """Separate a listing teaser like "Report title 12 March 2024" into parts."""
    text = clean_text(raw)
    match = _find_date_match(text)
    if not match:
        return text, None
    title = clean_text(text[: match.start()] + " " + text[match.end():])
    title = title.strip(" |-–—:")
    return title, parse_date(match.group(0))
