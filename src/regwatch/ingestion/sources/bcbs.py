"""Basel Committee on Banking Supervision publications (bis.org).

The publications list is a table whose rows carry the date in a cell of its
own; newer deployments build it client-side, hence the browser fallback.
"""

from __future__ import annotations

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.recency import RecencyPolicy
from regwatch.ingestion.strategies import (
    BrowserStrategy,
    FetchStrategy,
    HtmlStrategy,
    LinkDiscoveryStrategy,
    SelectorSet,
)

BASE_URL = "https://www.bis.org"
PUBLICATIONS_URL = f"{BASE_URL}/bcbs/publications.htm"

PUBLICATION_ROWS = SelectorSet(
    container=".bcbs_list tr, table.documentList tr, .document-list tr, .publication-item, article",
    title="a.title, a[href$='.htm'], a[href$='.pdf']",
    link="a.title, a[href$='.htm'], a[href$='.pdf']",
    date=".date, time, .pubDate, td.item_date",
    summary=None,
)
LINK_PATTERNS = (r"/bcbs/publ/", r"/publ/bcbs")


class BCBSAdapter(SourceAdapter):
    """Standards are published slowly, so the window is 120 days."""

    authority = "BCBS"
    base_url = BASE_URL
    max_items = 20
    recency = RecencyPolicy(window_days=120, widen_to_days=None)
    run_timeout = 180.0
    sectors = ("Banking", "Capital Requirements", "Prudential Regulation")

    @property
    def name(self) -> str:
        return "bcbs"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(fetcher, PUBLICATIONS_URL, PUBLICATION_ROWS, self.make_record),
            LinkDiscoveryStrategy(
                fetcher,
                PUBLICATIONS_URL,
                self.make_record,
                anchor_selectors=("#main a[href*='bcbs']", ".content a[href*='publ']"),
                url_patterns=LINK_PATTERNS,
                base_url=self.base_url,
            ),
            BrowserStrategy(
                fetcher.settings,
                [PUBLICATIONS_URL],
                self.make_record,
                selectors=[PUBLICATION_ROWS],
                link_patterns=LINK_PATTERNS,
            ),
        ]
