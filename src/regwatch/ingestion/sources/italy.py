"""Italian authorities: CONSOB and the Bank of Italy.

Both publish dates in Italian ("12 gennaio 2025") or as DD/MM/YYYY; the
date normalizer handles both.
"""

from __future__ import annotations

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.recency import NO_WIDEN, RecencyPolicy
from regwatch.ingestion.strategies import (
    BrowserStrategy,
    FetchStrategy,
    HtmlStrategy,
    LinkDiscoveryStrategy,
    SelectorSet,
)

CONSOB_URL = "https://www.consob.it/web/consob-and-its-activities/press-releases"
BANK_OF_ITALY_URL = "https://www.bancaditalia.it/media/notizie/index.html?page=1"

CONSOB_ROWS = SelectorSet(
    container=".asset-entry, .list-group-item, article, .news-item, .press-release",
    title=".entry-title, .asset-title, h3, h4, a",
    date=".entry-date, .date, .publish-date, time, small",
    summary=".entry-summary, .asset-summary, p",
)
BANK_OF_ITALY_ROWS = SelectorSet(
    container=".risultati li, .news-list li, .elenco-notizie li, article",
    title="h3, h4, .titolo, a",
    date=".data, .date, time, span",
    summary="p",
)


class ConsobAdapter(SourceAdapter):
    """Press releases over a 90-day window; Liferay sometimes needs JS."""

    authority = "CONSOB"
    base_url = "https://www.consob.it"
    max_items = 20
    recency = RecencyPolicy(window_days=90, widen_to_days=None)
    run_timeout = 180.0
    sectors = ("Capital Markets",)

    @property
    def name(self) -> str:
        return "consob"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(fetcher, CONSOB_URL, CONSOB_ROWS, self.make_record),
            BrowserStrategy(
                fetcher.settings,
                [CONSOB_URL],
                self.make_record,
                selectors=[CONSOB_ROWS],
                link_patterns=(r"/press-releases/", r"/comunicati-stampa/", r"/-/"),
            ),
        ]


class BankOfItalyAdapter(SourceAdapter):
    authority = "Banca d'Italia"
    base_url = "https://www.bancaditalia.it"
    max_items = 15
    recency = NO_WIDEN
    sectors = ("Banking", "Monetary Policy")

    @property
    def name(self) -> str:
        return "bank_of_italy"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(fetcher, BANK_OF_ITALY_URL, BANK_OF_ITALY_ROWS, self.make_record),
            LinkDiscoveryStrategy(
                fetcher,
                BANK_OF_ITALY_URL,
                self.make_record,
                url_patterns=(r"/media/notizie/\d{4}/",),
                base_url=self.base_url,
            ),
        ]
