"""Canonical record shape produced by every source adapter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import unquote_plus, urljoin, urlsplit, urlunsplit

from regwatch.ingestion.authority import normalize_authority
from regwatch.ingestion.dates import parse_date
from regwatch.ingestion.text import clean_text, strip_list_prefix

logger = logging.getLogger(__name__)

_TRACKING_PARAMS = frozenset({"fbclid", "gclid", "mc_cid", "mc_eid"})


@dataclass(frozen=True)
class CandidateRecord:
    """Normalized item emitted by an adapter, ready for storage."""

    title: str
    link: str
    authority: str
    summary: str
    published_at: datetime | None = None
    country: str | None = None
    region: str | None = None
    sectors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_fallback_summary(self) -> bool:
        return self.summary == fallback_summary(self.authority, self.title)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "link": self.link,
            "authority": self.authority,
            "summary": self.summary,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "country": self.country,
            "region": self.region,
            "sectors": list(self.sectors),
        }


def fallback_summary(authority: str, title: str) -> str:
    """Synthetic summary used when a source provides none."""
    return f"{authority}: {title}"


def _is_tracking(segment: str) -> bool:
    key = unquote_plus(segment.split("=", 1)[0]).lower()
    return key.startswith("utm_") or key in _TRACKING_PARAMS


def canonical_link(href: str | None, base_url: str) -> str | None:
    """Resolve ``href`` against ``base_url`` and strip tracking noise.

    Returns None for empty, fragment-only, ``javascript:``, ``mailto:`` and
    malformed links. Untouched query parameters keep their original
    encoding. Plain anchors are dropped but hash routes (``#/...``,
    ``#!...``) are kept, since they identify distinct items.
    """
    href = clean_text(href)
    if not href or href.startswith("#"):
        return None
    try:
        parts = urlsplit(urljoin(base_url, href))
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None
    query = "&".join(s for s in parts.query.split("&") if s and not _is_tracking(s))
    fragment = parts.fragment if parts.fragment.startswith(("/", "!")) else ""
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, fragment))


def build_record(
    title: str | None,
    link: str | None,
    *,
    authority: str,
    base_url: str,
    published_at=None,
    summary: str | None = None,
    country: str | None = None,
    region: str | None = None,
    sectors: tuple[str, ...] = (),
) -> CandidateRecord | None:
    """Build a CandidateRecord, or None if the title or link is unusable.

    ``published_at`` may be anything ``parse_date`` accepts.
    """
    clean_title = strip_list_prefix(title)
    if not clean_title:
        return None
    absolute_link = canonical_link(link, base_url)
    if absolute_link is None:
        logger.debug("Dropping %r: unusable link %r", clean_title, link)
        return None

    canonical_authority = normalize_authority(authority)
    clean_summary = clean_text(summary)
    if not clean_summary or clean_summary == clean_title:
        clean_summary = fallback_summary(canonical_authority, clean_title)

    return CandidateRecord(
        title=clean_title,
        link=absolute_link,
        authority=canonical_authority,
        summary=clean_summary,
        published_at=parse_date(published_at),
        country=country,
        region=region,
        sectors=tuple(sectors),
    )


def dedupe_by_link(records: list[CandidateRecord]) -> list[CandidateRecord]:
    """Keep the first record for each link, preserving order."""
    seen: set[str] = set()
    unique: list[CandidateRecord] = []
    for record in records:
        if record.link in seen:
            continue
        seen.add(record.link)
        unique.append(record)
    return unique
