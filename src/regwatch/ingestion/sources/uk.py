"""Smaller UK bodies: FRC, FOS, TPR, SFO, Ofcom and JMLSG."""

from __future__ import annotations

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.recency import RecencyPolicy
from regwatch.ingestion.strategies import (
    BrowserStrategy,
    FeedStrategy,
    FetchStrategy,
    HtmlStrategy,
    LinkDiscoveryStrategy,
    SelectorSet,
    feed_entry_mapper,
)

FRC_NEWS_URL = "https://www.frc.org.uk/news-and-events/news/"
FOS_NEWS_URL = "https://www.financial-ombudsman.org.uk/news"
TPR_NEWS_URL = "https://www.thepensionsregulator.gov.uk/en/media-hub/press-releases"
SFO_FEED_URL = "https://www.gov.uk/government/organisations/serious-fraud-office.atom"
SFO_SEARCH_URL = (
    "https://www.gov.uk/search/news-and-communications"
    "?organisations%5B%5D=serious-fraud-office&order=updated-newest"
)
OFCOM_FEED_URL = "https://www.ofcom.org.uk/rss/news"
OFCOM_NEWS_URL = "https://www.ofcom.org.uk/news-and-updates"
JMLSG_NEWS_URL = "https://www.jmlsg.org.uk/latest-news/"

CARD_LISTING = SelectorSet(
    container="article, .card, .news-item, .listing-item",
    title="h2, h3, .card__title, a",
    date="time, .date, [class*='date']",
    summary="p",
)
GOV_UK_DOCUMENT_LIST = SelectorSet(
    container=".gem-c-document-list__item",
    title=".gem-c-document-list__item-title a, a",
    link=".gem-c-document-list__item-title a, a[href]",
    date=".gem-c-document-list__item-metadata time, .gem-c-document-list__item-metadata",
    summary=".gem-c-document-list__item-description",
)


class FRCAdapter(SourceAdapter):
    authority = "Financial Reporting Council"
    base_url = "https://www.frc.org.uk"
    max_items = 15
    sectors = ("Audit & Accounting",)

    @property
    def name(self) -> str:
        return "frc"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(
                fetcher,
                FRC_NEWS_URL,
                SelectorSet(
                    container=".news-listing__item",
                    title=".news-listing__title a, h3",
                    link=".news-listing__title a, a[href]",
                    date=".news-listing__date",
                    summary=".news-listing__summary",
                ),
                self.make_record,
            ),
            HtmlStrategy(fetcher, FRC_NEWS_URL, CARD_LISTING, self.make_record),
            LinkDiscoveryStrategy(
                fetcher,
                FRC_NEWS_URL,
                self.make_record,
                url_patterns=(r"/news-and-events/news/\d{4}/",),
                base_url=self.base_url,
            ),
        ]


class FOSAdapter(SourceAdapter):
    authority = "Financial Ombudsman Service"
    base_url = "https://www.financial-ombudsman.org.uk"
    max_items = 12
    sectors = ("Consumer Protection", "Dispute Resolution")

    @property
    def name(self) -> str:
        return "fos"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(fetcher, FOS_NEWS_URL, CARD_LISTING, self.make_record),
            LinkDiscoveryStrategy(
                fetcher,
                FOS_NEWS_URL,
                self.make_record,
                url_patterns=(r"/news/[^/?#]+",),
                skip_patterns=(r"/news/?$",),
                base_url=self.base_url,
            ),
        ]


class TPRAdapter(SourceAdapter):
    authority = "The Pensions Regulator"
    base_url = "https://www.thepensionsregulator.gov.uk"
    max_items = 12
    sectors = ("Pensions",)

    @property
    def name(self) -> str:
        return "tpr"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(
                fetcher,
                TPR_NEWS_URL,
                SelectorSet(
                    container=".listing__item",
                    title=".listing__item-title a, h3",
                    link=".listing__item-title a, a[href]",
                    date=".listing__item-date",
                    summary=".listing__item-summary",
                ),
                self.make_record,
            ),
            HtmlStrategy(
                fetcher,
                TPR_NEWS_URL,
                SelectorSet(container=".newsitem, .news-item, article, .search-result"),
                self.make_record,
            ),
            LinkDiscoveryStrategy(
                fetcher,
                TPR_NEWS_URL,
                self.make_record,
                url_patterns=(r"/media-hub/press-releases/.+",),
                base_url=self.base_url,
            ),
        ]


class SFOAdapter(SourceAdapter):
    authority = "Serious Fraud Office"
    base_url = "https://www.gov.uk"
    max_items = 12
    sectors = ("AML & Financial Crime", "Enforcement")

    @property
    def name(self) -> str:
        return "sfo"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            FeedStrategy(fetcher, SFO_FEED_URL, feed_entry_mapper(self.make_record)),
            HtmlStrategy(fetcher, SFO_SEARCH_URL, GOV_UK_DOCUMENT_LIST, self.make_record),
        ]


class OfcomAdapter(SourceAdapter):
    authority = "Ofcom"
    base_url = "https://www.ofcom.org.uk"
    max_items = 12
    run_timeout = 180.0
    sectors = ("Telecoms", "Online Safety")

    @property
    def name(self) -> str:
        return "ofcom"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            FeedStrategy(fetcher, OFCOM_FEED_URL, feed_entry_mapper(self.make_record)),
            HtmlStrategy(fetcher, OFCOM_NEWS_URL, CARD_LISTING, self.make_record),
            BrowserStrategy(
                fetcher.settings,
                [OFCOM_NEWS_URL],
                self.make_record,
                selectors=[CARD_LISTING],
                link_patterns=(r"/news-centre/", r"/news/", r"-news"),
            ),
        ]


class JMLSGAdapter(SourceAdapter):
    """JMLSG rarely dates its notices, so undated items are kept."""

    authority = "JMLSG"
    base_url = "https://www.jmlsg.org.uk"
    max_items = 10
    recency = RecencyPolicy(window_days=30, widen_to_days=180, include_undated=True)
    run_timeout = 180.0
    sectors = ("AML & Financial Crime",)

    @property
    def name(self) -> str:
        return "jmlsg"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            HtmlStrategy(fetcher, JMLSG_NEWS_URL, CARD_LISTING, self.make_record),
            BrowserStrategy(
                fetcher.settings,
                [JMLSG_NEWS_URL, self.base_url + "/"],
                self.make_record,
                selectors=[CARD_LISTING],
                link_patterns=(r"/latest-news/.+", r"/news/.+", r"/consultations/.+"),
            ),
        ]
