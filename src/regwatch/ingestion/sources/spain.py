"""CNMV communications.

Listing rows carry the date and the time in separate cells
("12/03/2025" and "09:30"), joined before recency filtering.
"""

from __future__ import annotations

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.strategies import (
    FetchStrategy,
    HtmlStrategy,
    LinkDiscoveryStrategy,
    SelectorSet,
)

CNMV_URL = "https://www.cnmv.es/portal/Publicaciones/Comunicaciones.aspx"

CNMV_ROWS = SelectorSet(
    container="table tr, .listado li, .comunicado",
    title="a, .titulo",
    link="a[href]",
    date="td.fecha, .fecha, td:nth-of-type(1)",
    time="td.hora, .hora, td:nth-of-type(2)",
    summary=None,
)


class CNMVAdapter(SourceAdapter):
    authority = "CNMV"
    base_url = "https://www.cnmv.es"
    max_items = 15
    sectors = ("Capital Markets",)

    @property
    def name(self) -> str:
        return "cnmv"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(fetcher, CNMV_URL, CNMV_ROWS, self.make_record),
            LinkDiscoveryStrategy(
                fetcher,
                CNMV_URL,
                self.make_record,
                url_patterns=(r"/portal/verDoc\.axd", r"/Comunicaciones/", r"/Publicaciones/"),
                base_url=self.base_url,
            ),
        ]
