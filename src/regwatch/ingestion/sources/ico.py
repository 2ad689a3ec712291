"""Information Commissioner's Office news."""

from __future__ import annotations

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.errors import ExtractionError
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.normalize import CandidateRecord
from regwatch.ingestion.strategies import (
    FetchStrategy,
    HtmlStrategy,
    JsonApiStrategy,
    SelectorSet,
)

SEARCH_API_URL = "https://ico.org.uk/api/search"
SEARCH_PAYLOAD = {
    "query": "",
    "filters": {"contentType": ["news"]},
    "page": 1,
    "pageSize": 10,
}
MEDIA_CENTRE_URL = "https://ico.org.uk/about-the-ico/media-centre/"

NEWS_ITEMS = SelectorSet(
    container=".news-item, article",
    title=".news-item__title a, h2, h3, a",
    link=".news-item__title a, a[href]",
    date=".news-item__date, time, .date",
    summary=".news-item__excerpt, p",
)


def extract_search_results(data, make_record) -> list[CandidateRecord | None]:
    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        raise ExtractionError("ICO search payload has no results list")
    return [
        make_record(
            result.get("title"),
            result.get("url"),
            published_at=result.get("date"),
            summary=result.get("description"),
        )
        for result in results
    ]


class ICOAdapter(SourceAdapter):
    authority = "Information Commissioner's Office"
    base_url = "https://ico.org.uk"
    max_items = 10
    sectors = ("Data Protection",)

    @property
    def name(self) -> str:
        return "ico"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            JsonApiStrategy(
                fetcher,
                SEARCH_API_URL,
                lambda data: extract_search_results(data, self.make_record),
                method="POST",
                payload=SEARCH_PAYLOAD,
                headers={"Content-Type": "application/json"},
            ),
            HtmlStrategy(fetcher, MEDIA_CENTRE_URL, NEWS_ITEMS, self.make_record),
        ]
