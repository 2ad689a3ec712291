"""Exclusion of informational pages (careers, about, contact) from listings."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from regwatch.ingestion.normalize import CandidateRecord

logger = logging.getLogger(__name__)

# Link text that points at an index page rather than an article.
NAVIGATION_TITLES = re.compile(
    r"^(view all|see all|see more|read more|learn more|more news|press releases|news|latest news)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class InformationalPageFilter:
    """Drop records whose URL or title matches a blocklisted pattern.

    Patterns are lowercase substrings matched case-insensitively.
    """

    url_patterns: tuple[str, ...] = ()
    title_patterns: tuple[str, ...] = ()

    def is_informational(self, url: str | None, title: str | None) -> bool:
        url_lower = (url or "").lower()
        title_lower = (title or "").lower()
        if any(pattern in url_lower for pattern in self.url_patterns):
            return True
        return any(pattern in title_lower for pattern in self.title_patterns)

    def apply(self, records: list[CandidateRecord]) -> list[CandidateRecord]:
        kept = [r for r in records if not self.is_informational(r.link, r.title)]
        if len(kept) != len(records):
            logger.debug("Dropped %d informational pages", len(records) - len(kept))
        return kept


GENERIC_INFO_FILTER = InformationalPageFilter(
    url_patterns=(
        "/careers", "/jobs/", "/job-opportunities", "/vacancies",
        "/about-us", "/contact", "/sitemap", "/cookie", "/privacy",
        "/accessibility",
    ),
    title_patterns=(
        "career", "vacancy", "vacancies", "job opportunit", "recruitment",
        "cookie policy", "privacy notice", "privacy policy", "accessibility statement",
        "contact us", "about us",
    ),
)

FATF_INFO_FILTER = InformationalPageFilter(
    url_patterns=(
        "/job-opportunities", "/jobs/", "/careers/", "/fatf-secretariat",
        "/secretariat/", "/code-of-conduct", "/history-of-the-fatf",
        "/fatf-presidency", "/mandate-of-the-fatf", "/about-us", "/about/",
        "/contact", "/members", "/membership", "/who-we-are", "/faqs",
        "/glossary", "/sitemap",
    ),
    title_patterns=(
        "job opportunit", "career", "vacancy", "recruitment", "secretariat",
        "fatf team", "staff", "code of conduct", "history of the fatf",
        "presidency", "mandate", "about us", "about fatf", "contact us",
        "members", "membership", "faq", "glossary",
    ),
)
