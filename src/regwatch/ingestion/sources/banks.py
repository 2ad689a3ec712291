"""Bank newsrooms, driven by one configuration table.

Each bank is scanned for anchors matching its own selectors; if none match,
a generic scan for news-like URLs runs instead. Bank newsrooms rarely mark
up dates consistently, so undated items are kept and stamped at fetch time.
"""

from __future__ import annotations

from dataclasses import dataclass

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.http import FetchSettings, HttpFetcher
from regwatch.ingestion.recency import RecencyPolicy
from regwatch.ingestion.strategies import (
    GENERIC_NEWS_LINK,
    FetchStrategy,
    LinkDiscoveryStrategy,
)


@dataclass(frozen=True)
class BankConfig:
    key: str
    name: str
    url: str
    base_url: str
    link_selectors: tuple[str, ...]
    skip_patterns: tuple[str, ...] = ()


BANK_CONFIGS: dict[str, BankConfig] = {
    config.key: config
    for config in (
        BankConfig(
            "JPMorgan", "JPMorgan Chase",
            "https://www.jpmorganchase.com/newsroom/press-releases",
            "https://www.jpmorganchase.com",
            ('a[href*="/newsroom/press-releases/"]', 'a[href*="/newsroom/stories/"]'),
            (r"/press-releases/?$", r"/stories/?$"),
        ),
        BankConfig(
            "BofA", "Bank of America",
            "https://newsroom.bankofamerica.com/content/newsroom/press-releases.html",
            "https://newsroom.bankofamerica.com",
            ('a[href*="/press-releases/"]', 'a[href*="/newsroom/"][href$=".html"]'),
            (r"/press-releases\.html$", r"/newsroom/$"),
        ),
        BankConfig(
            "Citigroup", "Citigroup",
            "https://www.citigroup.com/global/news/press-release",
            "https://www.citigroup.com",
            ('a[href*="/press-release/"]', 'a[href*="/news/2"]'),
            (r"/press-release$", r"/news/$"),
        ),
        BankConfig(
            "Goldman", "Goldman Sachs",
            "https://www.goldmansachs.com/pressroom",
            "https://www.goldmansachs.com",
            ('a[href*="/pressroom/press-releases/"]', 'a[href*="/insights/"]'),
            (r"/pressroom/$", r"/press-releases/$"),
        ),
        BankConfig(
            "HSBC", "HSBC",
            "https://www.hsbc.com/news-and-views/news",
            "https://www.hsbc.com",
            ('a[href*="/news-and-views/news/"]',),
            (r"/hsbc-news-archive$", r"/news-and-views/news$"),
        ),
        BankConfig(
            "Barclays", "Barclays",
            "https://home.barclays/news/press-releases/",
            "https://home.barclays",
            ('a[href*="/news/press-releases/2"]', 'a[href*="/news/2"]'),
            (r"/news/$", r"/press-releases/$"),
        ),
        BankConfig(
            "DeutscheBank", "Deutsche Bank",
            "https://www.db.com/news",
            "https://www.db.com",
            ('a[href*="/news/"]', ".news-stream-entry a"),
            (r"/news/?$",),
        ),
        BankConfig(
            "UBS", "UBS",
            "https://www.ubs.com/global/en/media.html",
            "https://www.ubs.com",
            ('a[href*="/media/"][href$=".html"]', 'a[href*="media-releases"]'),
            (r"/media\.html$", r"/media/$"),
        ),
        BankConfig(
            "Lloyds", "Lloyds Banking Group",
            "https://www.lloydsbankinggroup.com/media/press-releases.html",
            "https://www.lloydsbankinggroup.com",
            ('a[href*="/media/press-releases/"]',),
            (r"/press-releases\.html$", r"/press-releases/$"),
        ),
        BankConfig(
            "NatWest", "NatWest Group",
            "https://www.natwestgroup.com/news-and-insights/news-room/press-releases.html",
            "https://www.natwestgroup.com",
            ('a[href*="/news-room/"]', 'a[href*="/press-releases/"]'),
            (r"/press-releases\.html$", r"/news-room\.html$"),
        ),
        BankConfig(
            "SantanderUK", "Santander UK",
            "https://www.santander.co.uk/about-santander/media-centre/press-releases",
            "https://www.santander.co.uk",
            ('a[href*="/media-centre/press-releases/"]',),
            (r"/press-releases/?$",),
        ),
        BankConfig(
            "Nationwide", "Nationwide Building Society",
            "https://www.nationwide.co.uk/media/news/",
            "https://www.nationwide.co.uk",
            ('a[href*="/media/news/"]',),
            (r"/news/?$",),
        ),
        BankConfig(
            "TSB", "TSB",
            "https://www.tsb.co.uk/news-releases.html",
            "https://www.tsb.co.uk",
            ('a[href*="/news-releases/"]',),
            (r"/news-releases\.html$", r"/news-releases/$"),
        ),
        BankConfig(
            "Monzo", "Monzo",
            "https://monzo.com/blog",
            "https://monzo.com",
            ('a[href*="/blog/"]',),
            (r"^https://monzo\.com/blog/?$",),
        ),
        BankConfig(
            "Starling", "Starling Bank",
            "https://www.starlingbank.com/news/",
            "https://www.starlingbank.com",
            ('a[href*="/news/"]',),
            (r"/news/?$",),
        ),
        BankConfig(
            "Revolut", "Revolut",
            "https://www.revolut.com/news/",
            "https://www.revolut.com",
            ('a[href*="/news/"]', 'a[href*="/blog/"]'),
            (r"/news/?$",),
        ),
        BankConfig(
            "MetroBank", "Metro Bank",
            "https://www.metrobankonline.co.uk/about-us/press-releases/",
            "https://www.metrobankonline.co.uk",
            ('a[href*="/press-releases/"]',),
            (r"/press-releases/?$",),
        ),
        BankConfig(
            "VirginMoney", "Virgin Money",
            "https://www.virginmoneyukplc.com/newsroom/all-news-and-releases/",
            "https://www.virginmoneyukplc.com",
            ('a[href*="/newsroom/"]',),
            (r"/newsroom/$", r"/all-news-and-releases/$"),
        ),
    )
}


class BankNewsAdapter(SourceAdapter):
    """Newsroom scanner for one entry of ``BANK_CONFIGS``."""

    max_items = 15
    recency = RecencyPolicy(window_days=30, widen_to_days=90, include_undated=True)
    sectors = ("Banking",)

    def __init__(self, bank_key: str, settings: FetchSettings | None = None) -> None:
        super().__init__(settings)
        self._config = BANK_CONFIGS[bank_key]
        self.authority = self._config.key
        self.base_url = self._config.base_url

    @property
    def name(self) -> str:
        return f"bank:{self._config.key.lower()}"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        config = self._config
        return [
            LinkDiscoveryStrategy(
                fetcher,
                config.url,
                self.make_record,
                anchor_selectors=config.link_selectors,
                url_patterns=(),
                skip_patterns=config.skip_patterns,
                base_url=config.base_url,
            ),
            LinkDiscoveryStrategy(
                fetcher,
                config.url,
                self.make_record,
                url_patterns=(GENERIC_NEWS_LINK,),
                skip_patterns=config.skip_patterns,
                base_url=config.base_url,
            ),
        ]
