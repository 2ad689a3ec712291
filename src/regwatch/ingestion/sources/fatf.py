"""FATF publications and news.

The publications search is backed by a JSON endpoint; when it refuses us the
AEM-rendered news and publication pages are loaded in a browser. Both
listings mix in "about the FATF" pages, which the FATF filter removes.
"""

from __future__ import annotations

from datetime import datetime, timezone

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.enrich import DetailSummaryEnricher
from regwatch.ingestion.errors import ExtractionError
from regwatch.ingestion.filters import FATF_INFO_FILTER
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.normalize import CandidateRecord
from regwatch.ingestion.recency import RecencyPolicy
from regwatch.ingestion.strategies import (
    BrowserStrategy,
    FetchStrategy,
    JsonApiStrategy,
    SelectorSet,
)
from regwatch.ingestion.text import strip_html

BASE_URL = "https://www.fatf-gafi.org"
PUBLICATIONS_API_URL = f"{BASE_URL}/en/publications/_jcr_content.results.json"
PUBLICATIONS_API_PARAMS = {"page": "", "size": 20, "sort": "Publication date descending"}
BROWSER_PAGES = (
    f"{BASE_URL}/en/the-fatf/news.html",
    f"{BASE_URL}/en/publications.html",
)

TEASER_SETS = (
    SelectorSet(
        container='.cmp-teaser, [data-cmp-is="teaser"]',
        title=".cmp-teaser__title, h3, h2",
        link="a[href]",
        date=".cmp-teaser__pretitle, .cmp-teaser__date, time",
        summary=".cmp-teaser__description",
    ),
    SelectorSet(container=".cmp-list__item", title=".cmp-list__item-title, a", date=".cmp-list__item-date"),
    SelectorSet(container=".cmp-contentfragmentlist__item", title="h3, h2, a", date="time, .date"),
    SelectorSet(container="article, .article, .card", title="h3, h2, a", date="time, .date"),
)
LINK_PATTERNS = (r"/publications/", r"/news/", r"/topics/")
DETAIL_SELECTORS = (
    ".summary",
    ".lead",
    ".content-main p",
    ".main-content p",
    ".publication-content p",
    ".news-content p",
    "article .content p",
    "main p",
)


def _publication_date(value):
    # Epoch milliseconds on some deployments, ISO text on others.
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return value


def extract_publications(data, make_record) -> list[CandidateRecord | None]:
    """Map the publications search payload to records."""
    items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise ExtractionError("FATF publications payload has no items list")
    records = []
    for item in items:
        details = item.get("detailsPage") or {}
        records.append(
            make_record(
                item.get("title"),
                details.get("absoluteUrl"),
                published_at=_publication_date(item.get("publicationDate")),
                summary=strip_html(item.get("description")) or None,
            )
        )
    return records


class FATFAdapter(SourceAdapter):
    authority = "FATF"
    base_url = BASE_URL
    max_items = 15
    recency = RecencyPolicy(window_days=90, widen_to_days=None)
    info_filter = FATF_INFO_FILTER
    run_timeout = 180.0
    sectors = ("AML & Financial Crime",)

    @property
    def name(self) -> str:
        return "fatf"

    def build_enricher(self, fetcher: HttpFetcher) -> DetailSummaryEnricher:
        # Browser-extracted teasers rarely carry a description.
        return DetailSummaryEnricher(fetcher, DETAIL_SELECTORS, max_fetches=self.max_items)

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            JsonApiStrategy(
                fetcher,
                PUBLICATIONS_API_URL,
                lambda data: extract_publications(data, self.make_record),
                params=PUBLICATIONS_API_PARAMS,
            ),
            BrowserStrategy(
                fetcher.settings,
                BROWSER_PAGES,
                self.make_record,
                selectors=TEASER_SETS,
                link_patterns=LINK_PATTERNS,
                split_title_dates=True,
                min_title_length=25,
            ),
        ]
