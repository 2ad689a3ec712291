"""European supervisory authorities: EBA and ESMA."""

from __future__ import annotations

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.strategies import (
    FeedStrategy,
    FetchStrategy,
    HtmlStrategy,
    LinkDiscoveryStrategy,
    SelectorSet,
    feed_entry_mapper,
)

EBA_FEED_URL = "https://www.eba.europa.eu/news-press/news/rss.xml"
EBA_PRESS_URL = "https://www.eba.europa.eu/publications-and-media/press-releases"
ESMA_NEWS_URL = "https://www.esma.europa.eu/press-news/esma-news"
ESMA_FEED_URL = "https://www.esma.europa.eu/rss.xml"

DRUPAL_VIEWS = SelectorSet(
    container=".view-content .views-row",
    title="h2, h3, .views-field-title a, a",
    date="time, .date, .views-field-created, [class*='date']",
    summary=".views-field-body, p",
)
ARTICLES = SelectorSet(
    container="article, .news-item",
    title="h2, h3, a",
    date="time, .date, [class*='date']",
)


class EBAAdapter(SourceAdapter):
    authority = "EBA (European Banking Authority)"
    base_url = "https://www.eba.europa.eu"
    max_items = 15
    sectors = ("Banking", "Prudential Regulation")

    @property
    def name(self) -> str:
        return "eba"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            FeedStrategy(fetcher, EBA_FEED_URL, feed_entry_mapper(self.make_record)),
            HtmlStrategy(fetcher, EBA_PRESS_URL, DRUPAL_VIEWS, self.make_record),
            HtmlStrategy(fetcher, EBA_PRESS_URL, ARTICLES, self.make_record),
        ]


class ESMAAdapter(SourceAdapter):
    """News listing first; ESMA's feed mixes in document library uploads."""

    authority = "ESMA"
    base_url = "https://www.esma.europa.eu"
    max_items = 15
    sectors = ("Capital Markets", "Investment Management")

    @property
    def name(self) -> str:
        return "esma"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(fetcher, ESMA_NEWS_URL, ARTICLES, self.make_record),
            HtmlStrategy(fetcher, ESMA_NEWS_URL, DRUPAL_VIEWS, self.make_record),
            FeedStrategy(fetcher, ESMA_FEED_URL, feed_entry_mapper(self.make_record)),
            LinkDiscoveryStrategy(
                fetcher,
                ESMA_NEWS_URL,
                self.make_record,
                url_patterns=(r"/press-news/esma-news/",),
                base_url=self.base_url,
            ),
        ]
