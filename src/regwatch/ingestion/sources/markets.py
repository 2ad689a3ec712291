"""Market infrastructure: London Stock Exchange, Aquis and Pay.UK.

All three render their listings client-side. LSE also exposes the content
API its front end uses, which is tried before starting a browser.
"""

from __future__ import annotations

import logging

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.errors import ExtractionError
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.normalize import CandidateRecord
from regwatch.ingestion.recency import RecencyPolicy
from regwatch.ingestion.strategies import BrowserStrategy, FetchStrategy, SelectorSet
from regwatch.ingestion.text import strip_html, truncate

logger = logging.getLogger(__name__)

LSE_BASE_URL = "https://www.londonstockexchange.com"
LSE_API_BASE = "https://api.londonstockexchange.com/api/v1"
LSE_PAGE_PATH = "discover/news-and-insights"
LSE_PAGE_URL = f"{LSE_BASE_URL}/{LSE_PAGE_PATH}?tab=latest"

AQUIS_URL = "https://www.aquis.eu/stock-exchange/announcements"
PAYUK_URL = "https://www.wearepay.uk/news-and-insight/latest-updates/"

BROWSER_CARDS = SelectorSet(
    container="article, .card, [class*='news-item'], [class*='article-card'], [class*='teaser']",
    title="h2, h3, h4, [class*='title']",
    date="time, [class*='date']",
    summary="p, [class*='description'], [class*='summary']",
)


class LSEContentApiStrategy(FetchStrategy):
    """Two calls: resolve the "latest" tab's modules, then refresh them."""

    label = "lse-api"

    def __init__(self, fetcher: HttpFetcher, make_record) -> None:
        self._fetcher = fetcher
        self._make_record = make_record

    @staticmethod
    def _latest_tab(page_data) -> dict | None:
        components = page_data.get("components") if isinstance(page_data, dict) else None
        for component in components or []:
            if isinstance(component, dict) and component.get("type") == "tab-nav":
                tabs = component["content"][0]["value"]["contentTabNav"]
                for tab in tabs:
                    if (tab.get("label") or "").lower() == "latest":
                        return tab
                return tabs[0] if tabs else None
        return None

    def _records(self, components) -> list[CandidateRecord | None]:
        records = []
        for component in components if isinstance(components, list) else []:
            kind = component.get("type")
            value = (component.get("content") or [{}])[0].get("value") or {}
            if kind == "explore-stories-filter":
                for result in value.get("exploreStoriesResults") or []:
                    records.append(
                        self._make_record(
                            result.get("title"),
                            result.get("link"),
                            published_at=result.get("datetime"),
                            summary=truncate(strip_html(result.get("text")), 280) or None,
                        )
                    )
            elif kind == "card-grid":
                for card in value.get("cards") or []:
                    link = card.get("link")
                    href = link.get("link") if isinstance(link, dict) else link
                    records.append(
                        self._make_record(
                            card.get("title"),
                            href,
                            summary=truncate(strip_html(card.get("text")), 280) or None,
                        )
                    )
        return records

    def fetch(self) -> list[CandidateRecord]:
        page_data = self._fetcher.get_json(
            f"{LSE_API_BASE}/pages",
            params={"path": LSE_PAGE_PATH, "parameters": "tab%3Dlatest"},
        )
        try:
            tab = self._latest_tab(page_data)
        except (KeyError, IndexError, TypeError) as exc:
            raise ExtractionError(f"Unexpected LSE page payload: {exc}") from exc
        if not tab or not tab.get("tabId"):
            raise ExtractionError("LSE page payload has no latest tab")
        module_ids = [m.get("moduleId") for m in tab.get("modules") or [] if m.get("moduleId")]
        if not module_ids:
            raise ExtractionError("LSE latest tab lists no modules")

        refreshed = self._fetcher.post_json(
            f"{LSE_API_BASE}/components/refresh",
            {
                "path": LSE_PAGE_PATH,
                "parameters": f"tab%3Dlatest%26tabId%3D{tab['tabId']}",
                "components": [{"componentId": module_id} for module_id in module_ids],
            },
            headers={"Content-Type": "application/json"},
        )
        try:
            records = self._records(refreshed)
        except (AttributeError, IndexError, TypeError) as exc:
            raise ExtractionError(f"Unexpected LSE refresh payload: {exc}") from exc
        return [r for r in records if r is not None]


class LSEAdapter(SourceAdapter):
    authority = "London Stock Exchange"
    base_url = LSE_BASE_URL
    max_items = 15
    # Stories are often undated; the rest are dated at publication.
    recency = RecencyPolicy(window_days=30, widen_to_days=90, include_undated=True)
    run_timeout = 180.0
    sectors = ("Capital Markets",)

    @property
    def name(self) -> str:
        return "lse"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            LSEContentApiStrategy(fetcher, self.make_record),
            BrowserStrategy(
                fetcher.settings,
                [LSE_PAGE_URL],
                self.make_record,
                selectors=[BROWSER_CARDS],
                link_patterns=(r"/discover/news-and-insights/[^?]+",),
            ),
        ]


class AquisAdapter(SourceAdapter):
    authority = "Aquis Exchange"
    base_url = "https://www.aquis.eu"
    max_items = 15
    run_timeout = 180.0
    sectors = ("Capital Markets",)

    @property
    def name(self) -> str:
        return "aquis"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            BrowserStrategy(
                fetcher.settings,
                [AQUIS_URL],
                self.make_record,
                selectors=[
                    SelectorSet(
                        container="table tbody tr",
                        title="td a, td:nth-of-type(3)",
                        link="a[href]",
                        date="td:nth-of-type(1)",
                        summary=None,
                    ),
                    BROWSER_CARDS,
                ],
                link_patterns=(r"/announcements/", r"/news/"),
                min_title_length=8,
            ),
        ]


class PayUKAdapter(SourceAdapter):
    authority = "Pay.UK"
    base_url = "https://www.wearepay.uk"
    max_items = 10
    run_timeout = 180.0
    sectors = ("Payments",)

    @property
    def name(self) -> str:
        return "payuk"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            BrowserStrategy(
                fetcher.settings,
                [PAYUK_URL],
                self.make_record,
                selectors=[BROWSER_CARDS],
                link_patterns=(r"/news-and-insight/.+/.+", r"/latest-updates/.+"),
            ),
        ]
