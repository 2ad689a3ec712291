"""Securities and Exchange Board of India press releases."""

from __future__ import annotations

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.strategies import (
    BrowserStrategy,
    FetchStrategy,
    HtmlStrategy,
    SelectorSet,
)

SEBI_LISTING_URL = (
    "https://www.sebi.gov.in/sebiweb/home/HomeAction.do"
    "?doListingAll=yes&sid=1&ssid=2&smession=No"
)

# Rows are "<td>Mar 12, 2025</td><td>Press release</td><td><a>Title</a></td>".
TABLE_ROWS = SelectorSet(
    container="table tr, .list-group-item, .press-item, .news-item",
    title="td a, a",
    link='a[href*="HomeAction"], a[href*=".html"], a[href]',
    date="td:nth-of-type(1), .date",
    summary=None,
)


class SEBIAdapter(SourceAdapter):
    authority = "SEBI"
    base_url = "https://www.sebi.gov.in"
    max_items = 15
    run_timeout = 180.0
    sectors = ("Capital Markets",)

    @property
    def name(self) -> str:
        return "sebi"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(fetcher, SEBI_LISTING_URL, TABLE_ROWS, self.make_record),
            BrowserStrategy(
                fetcher.settings,
                [SEBI_LISTING_URL],
                self.make_record,
                selectors=[TABLE_ROWS],
                link_patterns=(r"/media/press-releases/", r"/media-and-notifications/"),
            ),
        ]
