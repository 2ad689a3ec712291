"""Optional second pass that fetches detail pages for better summaries."""

from __future__ import annotations

import logging
import time
from dataclasses import replace

from bs4 import BeautifulSoup

from regwatch.ingestion.errors import IngestionError
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.normalize import CandidateRecord
from regwatch.ingestion.text import clean_text, truncate

logger = logging.getLogger(__name__)

DEFAULT_DETAIL_SELECTORS = (
    ".page-content p",
    ".content-block p",
    "article p",
    "main p",
    ".field--name-body p",
)


def extract_summary(html: str, selectors=DEFAULT_DETAIL_SELECTORS, min_length: int = 40) -> str:
    """First substantial paragraph, else the page's meta description."""
    soup = BeautifulSoup(html, "html.parser")
    for selector in selectors:
        for element in soup.select(selector):
            text = clean_text(element.get_text(" "))
            if len(text) >= min_length:
                return text
    for attrs in ({"name": "description"}, {"property": "og:description"}):
        meta = soup.find("meta", attrs=attrs)
        if meta is not None:
            content = clean_text(meta.get("content"))
            if len(content) >= min_length:
                return content
    return ""


class DetailSummaryEnricher:
    """Replace synthetic summaries with text from each item's detail page.

    Pages are fetched one at a time with a pause in between. A failed fetch
    leaves the record untouched.
    """

    def __init__(
        self,
        fetcher: HttpFetcher,
        selectors=DEFAULT_DETAIL_SELECTORS,
        *,
        min_length: int = 40,
        max_fetches: int = 10,
        delay_seconds: float | None = None,
        summary_limit: int = 400,
    ) -> None:
        self._fetcher = fetcher
        self._selectors = tuple(selectors)
        self._min_length = min_length
        self._max_fetches = max_fetches
        self._delay = fetcher.settings.detail_delay_seconds if delay_seconds is None else delay_seconds
        self._summary_limit = summary_limit

    def enrich(self, records: list[CandidateRecord]) -> list[CandidateRecord]:
        enriched: list[CandidateRecord] = []
        fetched = 0
        for record in records:
            if not record.has_fallback_summary or fetched >= self._max_fetches:
                enriched.append(record)
                continue
            if fetched:
                time.sleep(self._delay)
            fetched += 1
            try:
                summary = extract_summary(
                    self._fetcher.get_text(record.link), self._selectors, self._min_length
                )
            except IngestionError as exc:
                logger.debug("Detail fetch failed for %s: %s", record.link, exc)
                enriched.append(record)
                continue
            except Exception:
                logger.debug("Detail page %s could not be processed", record.link, exc_info=True)
                enriched.append(record)
                continue
            if summary:
                record = replace(record, summary=truncate(summary, self._summary_limit))
            enriched.append(record)
        logger.debug("Enriched %d of %d records from detail pages", fetched, len(records))
        return enriched
