"""Bank of England news and PRA publications.

The Bank's news listing is rendered from an internal JSON endpoint whose
``Results`` field is an HTML fragment; we post the same query the site does.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.enrich import DetailSummaryEnricher
from regwatch.ingestion.errors import ExtractionError
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.normalize import CandidateRecord
from regwatch.ingestion.recency import RecencyPolicy
from regwatch.ingestion.strategies import (
    FeedStrategy,
    FetchStrategy,
    HtmlStrategy,
    JsonApiStrategy,
    SelectorSet,
    feed_entry_mapper,
)
from regwatch.ingestion.text import clean_text

BASE_URL = "https://www.bankofengland.co.uk"
NEWS_FEED_URL = f"{BASE_URL}/rss/news"
PRA_FEED_URL = f"{BASE_URL}/rss/prudential-regulation-publications"
NEWS_API_URL = f"{BASE_URL}/_api/News/RefreshPagedNewsList"
PRA_PUBLICATIONS_URL = f"{BASE_URL}/prudential-regulation/publication"

_NEWS_TYPE = "d10a561861b94c2ea06d82cfeda25c57"
NEWS_API_PAYLOAD = {
    "SearchTerm": "",
    "Id": "{CE377CC8-BFBC-418B-B4D9-DBC1C64774A8}",
    "PageSize": 10,
    "NewsTypes": [_NEWS_TYPE],
    "NewsTypesAvailable": [_NEWS_TYPE],
    "Taxonomies": [],
    "TaxonomiesAvailable": [],
    "Page": 1,
    "Direction": 1,
}

DETAIL_SELECTORS = (".page-content p", ".content-block p", ".page-section p", "main p")

RELEASE_LISTING = SelectorSet(
    container=".release, .col3 > a",
    title="h3",
    link="a[href]",
    date="time, .release-date",
    summary=None,
)


def parse_news_fragment(fragment: str, make_record) -> list[CandidateRecord | None]:
    """Records from the HTML fragment the news API returns."""
    soup = BeautifulSoup(fragment, "html.parser")
    records = []
    for node in soup.select(".release, .col3 > a"):
        link_el = node if node.name == "a" else node.select_one("a[href]")
        heading = node.select_one("h3")
        title = clean_text(heading.get_text(" ") if heading else node.get_text(" "))
        date_el = node.select_one("time, .release-date")
        published = None
        if date_el is not None:
            published = date_el.get("datetime") or clean_text(date_el.get_text(" "))
        records.append(
            make_record(title, link_el.get("href") if link_el else None, published_at=published)
        )
    return records


class BoEAdapter(SourceAdapter):
    """News feed, then the news API; detail pages fill in summaries."""

    authority = "Bank of England"
    base_url = BASE_URL
    max_items = 15
    sectors = ("Banking", "Monetary Policy", "Financial Stability")

    @property
    def name(self) -> str:
        return "boe"

    def _extract_api(self, data) -> list[CandidateRecord | None]:
        fragment = data.get("Results") if isinstance(data, dict) else None
        if not isinstance(fragment, str):
            raise ExtractionError("BoE news API response has no Results fragment")
        return parse_news_fragment(fragment, self.make_record)

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            FeedStrategy(fetcher, NEWS_FEED_URL, feed_entry_mapper(self.make_record)),
            JsonApiStrategy(
                fetcher,
                NEWS_API_URL,
                self._extract_api,
                method="POST",
                payload=NEWS_API_PAYLOAD,
                headers={"Content-Type": "application/json"},
            ),
        ]

    def build_enricher(self, fetcher: HttpFetcher) -> DetailSummaryEnricher:
        return DetailSummaryEnricher(fetcher, DETAIL_SELECTORS, max_fetches=self.max_items)


class PRAAdapter(SourceAdapter):
    """PRA publications; sparse, so the window widens to four months."""

    authority = "Prudential Regulation Authority (PRA)"
    base_url = BASE_URL
    max_items = 15
    recency = RecencyPolicy(window_days=30, widen_below=3, widen_to_days=120)
    sectors = ("Banking", "Insurance", "Prudential Regulation")

    @property
    def name(self) -> str:
        return "pra"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            FeedStrategy(fetcher, PRA_FEED_URL, feed_entry_mapper(self.make_record)),
            HtmlStrategy(fetcher, PRA_PUBLICATIONS_URL, RELEASE_LISTING, self.make_record),
        ]

    def build_enricher(self, fetcher: HttpFetcher) -> DetailSummaryEnricher:
        return DetailSummaryEnricher(fetcher, DETAIL_SELECTORS, max_fetches=self.max_items)
