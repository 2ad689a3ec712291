"""Fetch strategies and the ordered fallback chain that runs them.

A strategy returns candidate records or raises an ``IngestionError``.
``StrategyChain`` tries strategies in order and keeps the first result that
has enough records after selection; a strategy that raises or comes back
short is logged and skipped.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Sequence
from urllib.parse import urljoin

import feedparser
from bs4 import BeautifulSoup

from regwatch.ingestion.browser import (
    EXTRACT_LISTING_JS,
    PlaywrightError,
    browser_page,
    load_listing,
)
from regwatch.ingestion.dates import combine_date_time, find_date_in_text, parse_date, split_title_and_date
from regwatch.ingestion.errors import ExtractionError, SourceUnavailableError
from regwatch.ingestion.filters import NAVIGATION_TITLES
from regwatch.ingestion.http import FetchSettings, HttpFetcher
from regwatch.ingestion.normalize import CandidateRecord
from regwatch.ingestion.text import clean_text, strip_html, truncate

logger = logging.getLogger(__name__)

# make_record(title, link, published_at=None, summary=None) -> record or None
RecordFactory = Callable[..., "CandidateRecord | None"]

GENERIC_NEWS_LINK = r"/(news|press|release|blog|article|insight|stories|newsroom)/"
_CARD_SELECTOR = 'article, li, [class*="card"], [class*="item"], [class*="teaser"]'


@dataclass(frozen=True)
class SelectorSet:
    """CSS selectors describing one listing layout.

    ``container`` selects one element per item; the other selectors are
    evaluated inside it. When ``time`` is set the date and time are read
    from separate cells and combined.
    """

    container: str
    title: str = "h2, h3, h4, a"
    link: str = "a[href]"
    date: str | None = "time, .date, [class*='date']"
    summary: str | None = "p"
    date_attr: str = "datetime"
    time: str | None = None
    min_title_length: int = 10

    def as_js(self) -> dict:
        return {
            "container": self.container,
            "title": self.title,
            "link": self.link,
            "date": self.date,
            "summary": self.summary,
            "dateAttr": self.date_attr,
        }


class FetchStrategy(ABC):
    """One way of obtaining a source's listing."""

    label: str = "strategy"

    @abstractmethod
    def fetch(self) -> list[CandidateRecord]:
        """Return candidate records. May raise IngestionError."""


class FeedStrategy(FetchStrategy):
    """RSS/Atom feed parsed with feedparser."""

    label = "feed"

    def __init__(
        self,
        fetcher: HttpFetcher,
        url: str,
        mapper: Callable[[Any], CandidateRecord | None],
    ) -> None:
        self._fetcher = fetcher
        self._url = url
        self._mapper = mapper

    def fetch(self) -> list[CandidateRecord]:
        feed = feedparser.parse(self._fetcher.get_text(self._url))
        if feed.bozo and not feed.entries:
            raise ExtractionError(f"{self._url} is not a readable feed: {feed.get('bozo_exception')}")
        records = [self._mapper(entry) for entry in feed.entries]
        return [r for r in records if r is not None]


def _entry_summary(entry) -> str:
    """Best available description of a feed entry."""
    if entry.get("content"):
        return strip_html(entry["content"][0].get("value", ""))
    return strip_html(entry.get("summary", "") or entry.get("description", ""))


def feed_entry_mapper(make_record: RecordFactory, summary_limit: int = 400):
    """Default mapping from a feedparser entry to a record."""

    def _map(entry) -> CandidateRecord | None:
        published = (
            entry.get("published_parsed")
            or entry.get("updated_parsed")
            or entry.get("published")
            or entry.get("updated")
        )
        summary = _entry_summary(entry)
        return make_record(
            entry.get("title"),
            entry.get("link"),
            published_at=published,
            summary=truncate(summary, summary_limit) if summary else None,
        )

    return _map


class JsonApiStrategy(FetchStrategy):
    """JSON endpoint with an explicit per-source extraction function.

    ``extract`` receives the decoded payload and returns records (``None``
    entries are dropped). It raises ExtractionError if the payload shape is
    not what the source normally returns.
    """

    label = "json"

    def __init__(
        self,
        fetcher: HttpFetcher,
        url: str,
        extract: Callable[[Any], Sequence[CandidateRecord | None]],
        *,
        method: str = "GET",
        params: dict | None = None,
        payload: dict | None = None,
        headers: dict | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._url = url
        self._extract = extract
        self._method = method.upper()
        self._params = params
        self._payload = payload
        self._headers = headers

    def fetch(self) -> list[CandidateRecord]:
        if self._method == "POST":
            data = self._fetcher.post_json(self._url, self._payload or {}, headers=self._headers)
        else:
            data = self._fetcher.get_json(self._url, params=self._params)
        try:
            records = self._extract(data)
        except (KeyError, TypeError, AttributeError) as exc:
            raise ExtractionError(f"Unexpected JSON shape from {self._url}: {exc}") from exc
        return [r for r in records if r is not None]


def _select_text(node, selector: str | None) -> str:
    if not selector:
        return ""
    found = node.select_one(selector)
    return clean_text(found.get_text(" ")) if found else ""


class HtmlStrategy(FetchStrategy):
    """Static HTML listing parsed with BeautifulSoup CSS selectors."""

    label = "html"

    def __init__(
        self,
        fetcher: HttpFetcher,
        url: str,
        selectors: SelectorSet,
        make_record: RecordFactory,
        *,
        date_parser: Callable[[str], Any] = parse_date,
        limit: int = 40,
    ) -> None:
        self._fetcher = fetcher
        self._url = url
        self._selectors = selectors
        self._make_record = make_record
        self._date_parser = date_parser
        self._limit = limit

    def _date_of(self, node):
        sel = self._selectors
        raw = ""
        if sel.date:
            date_el = node.select_one(sel.date)
            if date_el is not None:
                raw = date_el.get(sel.date_attr) or clean_text(date_el.get_text(" "))
        if sel.time:
            return combine_date_time(raw, _select_text(node, sel.time))
        parsed = self._date_parser(raw) if raw else None
        if parsed is None:
            parsed = find_date_in_text(clean_text(node.get_text(" ")))
        return parsed

    def parse(self, html: str) -> list[CandidateRecord]:
        sel = self._selectors
        soup = BeautifulSoup(html, "html.parser")
        records: list[CandidateRecord] = []
        for node in soup.select(sel.container)[: self._limit]:
            if node.name == "a" and node.get("href"):
                link_el = node
            else:
                link_el = node.select_one(sel.link)
            title = _select_text(node, sel.title)
            if not title and link_el is not None:
                title = clean_text(link_el.get_text(" "))
            if len(title) < sel.min_title_length or NAVIGATION_TITLES.match(title):
                continue
            record = self._make_record(
                title,
                link_el.get("href") if link_el is not None else None,
                published_at=self._date_of(node),
                summary=_select_text(node, sel.summary) or None,
            )
            if record is not None:
                records.append(record)
        return records

    def fetch(self) -> list[CandidateRecord]:
        return self.parse(self._fetcher.get_text(self._url))


class LinkDiscoveryStrategy(FetchStrategy):
    """Scan a page's anchors for article-looking URLs.

    Used when a listing has no stable container markup. The title comes from
    the nearest heading in the anchor's card, falling back to the anchor text.
    """

    label = "links"

    def __init__(
        self,
        fetcher: HttpFetcher,
        url: str,
        make_record: RecordFactory,
        *,
        anchor_selectors: Sequence[str] = ("a[href]",),
        url_patterns: Sequence[str] = (GENERIC_NEWS_LINK,),
        skip_patterns: Sequence[str] = (),
        base_url: str | None = None,
        min_title_length: int = 15,
        limit: int = 15,
    ) -> None:
        self._fetcher = fetcher
        self._url = url
        self._make_record = make_record
        self._anchor_selectors = tuple(anchor_selectors)
        self._url_patterns = [re.compile(p, re.IGNORECASE) for p in url_patterns]
        self._skip_patterns = [re.compile(p) for p in skip_patterns]
        self._base_url = base_url or url
        self._min_title_length = min_title_length
        self._limit = limit

    def _wanted(self, href: str) -> bool:
        if href.lower().split("?")[0].endswith(".pdf"):
            return False
        if href.rstrip("/") == self._url.rstrip("/"):
            return False
        if any(p.search(href) for p in self._skip_patterns):
            return False
        return not self._url_patterns or any(p.search(href) for p in self._url_patterns)

    def parse(self, html: str) -> list[CandidateRecord]:
        soup = BeautifulSoup(html, "html.parser")
        records: list[CandidateRecord] = []
        seen: set[str] = set()
        for selector in self._anchor_selectors:
            for anchor in soup.select(selector):
                if len(records) >= self._limit:
                    return records
                record = self._from_anchor(anchor, seen)
                if record is not None:
                    records.append(record)
        return records

    def _from_anchor(self, anchor, seen: set[str]) -> CandidateRecord | None:
        href = anchor.get("href") or ""
        if not href or href.startswith(("#", "javascript:", "mailto:")):
            return None
        try:
            record_link = urljoin(self._base_url, href)
        except ValueError:
            logger.debug("Skipping malformed href %r", href)
            return None
        if not self._wanted(record_link) or record_link in seen:
            return None

        card = anchor.find_parent(lambda tag: tag.name in ("article", "li") or _is_card(tag))
        title = ""
        date_raw = ""
        if card is not None:
            heading = card.select_one("h2, h3, h4, [class*='title'], [class*='headline']")
            if heading is not None:
                title = clean_text(heading.get_text(" "))
            date_el = card.select_one("time, [class*='date'], [datetime]")
            if date_el is not None:
                date_raw = date_el.get("datetime") or clean_text(date_el.get_text(" "))
        if not title:
            title = clean_text(anchor.get_text(" "))
        if len(title) < self._min_title_length or NAVIGATION_TITLES.match(title):
            return None

        seen.add(record_link)
        return self._make_record(title, record_link, published_at=date_raw or None)

    def fetch(self) -> list[CandidateRecord]:
        return self.parse(self._fetcher.get_text(self._url))


def _is_card(tag) -> bool:
    classes = " ".join(tag.get("class") or []).lower()
    return any(token in classes for token in ("card", "item", "teaser"))


class BrowserStrategy(FetchStrategy):
    """Render listing pages in headless Chromium and extract items in-page.

    Each URL is loaded in turn; a URL that fails to load is skipped. If every
    URL fails the strategy raises SourceUnavailableError.
    """

    label = "browser"

    def __init__(
        self,
        settings: FetchSettings,
        urls: Sequence[str],
        make_record: RecordFactory,
        *,
        selectors: Sequence[SelectorSet] = (),
        link_patterns: Sequence[str] = (GENERIC_NEWS_LINK,),
        date_parser: Callable[[str], Any] = parse_date,
        split_title_dates: bool = False,
        min_title_length: int = 15,
        limit: int = 30,
    ) -> None:
        self._settings = settings
        self._urls = tuple(urls)
        self._make_record = make_record
        self._selectors = tuple(selectors)
        self._link_patterns = tuple(link_patterns)
        self._date_parser = date_parser
        self._split_title_dates = split_title_dates
        self._min_title_length = min_title_length
        self._limit = limit

    def _to_record(self, item: dict) -> CandidateRecord | None:
        title = clean_text(item.get("title"))
        published = self._date_parser(item.get("dateText") or "") if item.get("dateText") else None
        if self._split_title_dates:
            title, embedded = split_title_and_date(title)
            published = published or embedded
        return self._make_record(
            title,
            item.get("href"),
            published_at=published,
            summary=item.get("description") or None,
        )

    def fetch(self) -> list[CandidateRecord]:
        args = {
            "selectorSets": [s.as_js() for s in self._selectors],
            "linkPatterns": list(self._link_patterns),
            "limit": self._limit,
            "minTitleLength": self._min_title_length,
        }
        records: list[CandidateRecord] = []
        failures = 0
        with browser_page(self._settings) as page:
            for url in self._urls:
                try:
                    load_listing(page, url, self._settings.browser_timeout_ms)
                    items = page.evaluate(EXTRACT_LISTING_JS, args) or []
                except PlaywrightError as exc:
                    failures += 1
                    logger.warning("Browser load of %s failed: %s", url, exc)
                    continue
                logger.debug("Browser extracted %d raw items from %s", len(items), url)
                for item in items:
                    record = self._to_record(item)
                    if record is not None:
                        records.append(record)
        if failures and failures == len(self._urls):
            raise SourceUnavailableError(f"All {failures} browser page loads failed")
        return records


class StrategyChain:
    """Run strategies in order until one yields at least ``min_items``.

    When ``select`` is given it is applied to each strategy's output before
    counting, so a strategy whose items are all stale or filtered out falls
    through like an empty one.
    """

    def __init__(
        self,
        strategies: Sequence[FetchStrategy],
        *,
        min_items: int = 1,
        source: str = "",
        select: Callable[[list[CandidateRecord]], list[CandidateRecord]] | None = None,
    ) -> None:
        self._strategies = list(strategies)
        self._min_items = min_items
        self._source = source
        self._select = select

    def run(self) -> list[CandidateRecord]:
        for position, strategy in enumerate(self._strategies, start=1):
            try:
                records = strategy.fetch()
                if self._select is not None:
                    records = self._select(records)
            except (ExtractionError, SourceUnavailableError) as exc:
                logger.info("%s: %s strategy failed (%s)", self._source, strategy.label, exc)
                continue
            except Exception:
                logger.warning(
                    "%s: %s strategy raised unexpectedly", self._source, strategy.label, exc_info=True
                )
                continue
            if len(records) >= self._min_items:
                logger.debug(
                    "%s: %s strategy (#%d) returned %d records",
                    self._source, strategy.label, position, len(records),
                )
                return records
            logger.info(
                "%s: %s strategy returned %d records, falling through",
                self._source, strategy.label, len(records),
            )
        logger.warning("%s: all %d strategies exhausted", self._source, len(self._strategies))
        return []
