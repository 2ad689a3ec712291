"""Financial Conduct Authority news, policy papers and Dear CEO letters."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import replace
from urllib.parse import quote, urlencode

from bs4 import BeautifulSoup

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.dates import extract_labeled_date, find_date_in_text, parse_date
from regwatch.ingestion.errors import IngestionError
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.normalize import CandidateRecord
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
from regwatch.ingestion.text import clean_text, truncate

logger = logging.getLogger(__name__)

BASE_URL = "https://www.fca.org.uk"
FEED_URL = f"{BASE_URL}/news/rss.xml"
NEWS_URL = f"{BASE_URL}/news"
PUBLICATIONS_SEARCH_URL = f"{BASE_URL}/publications/search-results"
SEARCH_PAGE_SIZE = 10

CONSULTATION_PAPERS = "policy and guidance-consultation papers"
DISCUSSION_PAPERS = "policy and guidance-discussion papers"
DEAR_CEO_LETTERS = "dear-ceo-letters"

SEARCH_RESULTS = SelectorSet(
    container=".search-result",
    title=".search-result__title, h3, h4",
    link="a[href]",
    date=".search-result__date, .meta-item.published-date, time",
    summary=".search-result__description, p",
)
LATEST_NEWS = SelectorSet(
    container=".latest-news li, .news-item, article",
    title="h3, h4, a",
    date="time, .date, .published-date",
)

_SEARCH_CONTAINERS = ("li.search-item", ".search-item", ".search-list > li", ".publication-item", "article")
_SEARCH_LINK = (
    ".search-item__clickthrough, .publication-title a, h3 a, h2 a, "
    "a[href*='dear-ceo'], a[href*='/publications/']"
)
_SEARCH_DATE = ".meta-item.published-date, [class*='published-date'], .publication-date, time"
_SEARCH_SUMMARY = ".search-item__body, .publication-summary, .summary, p"
_PUBLISHED_LABELS = ("published(?: on)?",)
_URL_MONTH_RE = re.compile(r"/(\d{4})/(\d{1,2})/")

PUBLICATION_CARDS = SelectorSet(
    container=".search-item, .publication-item, article",
    title=".search-item__clickthrough, .publication-title a, h3 a, h2 a",
    link=".search-item__clickthrough, .publication-title a, h3 a, h2 a",
    date=_SEARCH_DATE,
    summary=_SEARCH_SUMMARY,
)

DEAR_CEO_SECTORS = (
    ("Motor Finance", re.compile(r"motor\s*finance|car\s*finance|vehicle\s*finance", re.I)),
    ("Consumer Credit", re.compile(r"consumer\s*credit|lending|loans|credit\s*broking", re.I)),
    ("Banking", re.compile(r"\bbank|deposit|current\s*account|savings", re.I)),
    ("Investment Management", re.compile(r"investment|asset\s*management|\bfunds?\b|portfolio", re.I)),
    ("Insurance", re.compile(r"insurance|insurer|underwriting", re.I)),
    ("Payments", re.compile(r"payment|app\s*fraud|e-money|emoney", re.I)),
    ("Wealth Management", re.compile(r"wealth|private\s*client", re.I)),
    ("Mortgage", re.compile(r"mortgage|home\s*loan", re.I)),
    ("Claims Management", re.compile(r"\bcmcs?\b|claims\s*management", re.I)),
    ("Consumer Duty", re.compile(r"consumer\s*duty|treating\s*customers\s*fairly", re.I)),
    ("Financial Crime", re.compile(r"\baml\b|financial\s*crime|fraud|sanctions|money\s*laundering", re.I)),
    ("Operational Resilience", re.compile(r"operational\s*resilience|outsourcing", re.I)),
    ("Crypto Assets", re.compile(r"crypto|digital\s*asset|stablecoin", re.I)),
)


def search_url(category: str, start: int | None = None) -> str:
    params = {"category": category, "sort_by": "dmetaZ"}
    if start:
        params["start"] = start
    return f"{PUBLICATIONS_SEARCH_URL}?{urlencode(params, quote_via=quote)}"


def published_date(node):
    """Date of one search result: date element, "Published:" label, any date, URL month."""
    date_el = node.select_one(_SEARCH_DATE)
    if date_el is not None:
        parsed = parse_date(date_el.get("datetime") or clean_text(date_el.get_text(" ")))
        if parsed is not None:
            return parsed
    text = clean_text(node.get_text(" "))
    parsed = extract_labeled_date(text, _PUBLISHED_LABELS) or find_date_in_text(text)
    if parsed is not None:
        return parsed
    link = node.select_one("a[href]")
    match = _URL_MONTH_RE.search(link.get("href", "")) if link is not None else None
    if match:
        return parse_date(f"{match.group(1)}-{int(match.group(2)):02d}-01")
    return None


def parse_search_results(html: str, make_record) -> list[CandidateRecord]:
    """Records from one publications search results page."""
    soup = BeautifulSoup(html, "html.parser")
    nodes = []
    for selector in _SEARCH_CONTAINERS:
        nodes = soup.select(selector)
        if nodes:
            break
    records = []
    for node in nodes:
        link_el = node.select_one(_SEARCH_LINK)
        if link_el is None:
            continue
        title = clean_text(link_el.get_text(" "))
        if len(title) < 10:
            continue
        summary_el = node.select_one(_SEARCH_SUMMARY)
        summary = truncate(clean_text(summary_el.get_text(" ")), 500) if summary_el is not None else ""
        record = make_record(
            title,
            link_el.get("href"),
            published_at=published_date(node),
            summary=summary or None,
        )
        if record is not None:
            records.append(record)
    return records


class PublicationSearchStrategy(FetchStrategy):
    """Static publications search results, following ``start=`` pagination.

    A failure on the first page propagates; a failure on a later page ends
    pagination and keeps what was already collected.
    """

    label = "fca-search"

    def __init__(self, fetcher: HttpFetcher, category: str, make_record, *, max_pages: int = 1) -> None:
        self._fetcher = fetcher
        self._category = category
        self._make_record = make_record
        self._max_pages = max_pages

    def fetch(self) -> list[CandidateRecord]:
        records: list[CandidateRecord] = []
        for page in range(self._max_pages):
            start = page * SEARCH_PAGE_SIZE + 1 if page else None
            if page:
                time.sleep(self._fetcher.settings.detail_delay_seconds)
            try:
                html = self._fetcher.get_text(search_url(self._category, start))
            except IngestionError as exc:
                if not page:
                    raise
                logger.info("FCA search page %d failed, stopping: %s", page + 1, exc)
                break
            page_records = parse_search_results(html, self._make_record)
            if not page_records:
                break
            records.extend(page_records)
        return records


class FCAAdapter(SourceAdapter):
    """Feed first; the news listing when the feed is down or empty."""

    authority = "FCA"
    base_url = BASE_URL
    max_items = 20
    sectors = ("Banking", "Investment Management", "Consumer Credit", "Payments")

    @property
    def name(self) -> str:
        return "fca"

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            FeedStrategy(fetcher, FEED_URL, feed_entry_mapper(self.make_record)),
            HtmlStrategy(fetcher, NEWS_URL, SEARCH_RESULTS, self.make_record),
            HtmlStrategy(fetcher, NEWS_URL, LATEST_NEWS, self.make_record),
            LinkDiscoveryStrategy(
                fetcher,
                NEWS_URL,
                self.make_record,
                url_patterns=(r"/news/(press-releases|statements|news-stories|speeches)/",),
                base_url=self.base_url,
            ),
        ]


class _FCASearchAdapter(SourceAdapter):
    """Publications search category: static results, then a browser."""

    authority = "FCA"
    base_url = BASE_URL
    category: str = ""
    max_pages: int = 1
    link_patterns: tuple[str, ...] = (r"/publications/",)
    run_timeout = 180.0

    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        return [
            PublicationSearchStrategy(fetcher, self.category, self.make_record, max_pages=self.max_pages),
            BrowserStrategy(
                fetcher.settings,
                [search_url(self.category)],
                self.make_record,
                selectors=[PUBLICATION_CARDS],
                link_patterns=self.link_patterns,
            ),
        ]


class FCAConsultationPapersAdapter(_FCASearchAdapter):
    category = CONSULTATION_PAPERS
    max_items = 20
    recency = RecencyPolicy(window_days=90, widen_to_days=None)
    link_patterns = (r"/publications/consultation-papers/",)
    sectors = ("Multi-sector", "Banking", "Investment Management", "Consumer Credit")

    @property
    def name(self) -> str:
        return "fca_cp"


class FCADiscussionPapersAdapter(_FCASearchAdapter):
    category = DISCUSSION_PAPERS
    max_items = 20
    recency = RecencyPolicy(window_days=90, widen_to_days=None)
    link_patterns = (r"/publications/discussion-papers/",)
    sectors = ("Multi-sector", "Banking", "Investment Management", "Consumer Credit")

    @property
    def name(self) -> str:
        return "fca_dp"


def dear_ceo_sectors(text: str) -> tuple[str, ...]:
    sectors = tuple(name for name, pattern in DEAR_CEO_SECTORS if pattern.search(text or ""))
    return sectors or ("Multi-sector",)


class FCADearCEOAdapter(_FCASearchAdapter):
    """Dear CEO letters. Few are published, so the window covers five years."""

    category = DEAR_CEO_LETTERS
    max_items = 50
    max_pages = 5
    recency = RecencyPolicy(window_days=1825, widen_to_days=None)
    link_patterns = (r"/publications/(dear-ceo-letters|correspondence)/", r"dear-ceo")

    @property
    def name(self) -> str:
        return "fca_dear_ceo"

    def make_record(self, title, link, *, published_at=None, summary=None) -> CandidateRecord | None:
        record = super().make_record(title, link, published_at=published_at, summary=summary)
        if record is None:
            return None
        return replace(record, sectors=dear_ceo_sectors(f"{title} {summary or ''}"))
