"""Tests for regwatch.ingestion.strategies — fetch strategies and the chain."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from regwatch.ingestion.errors import ExtractionError, SourceUnavailableError
from regwatch.ingestion.http import HttpFetcher
from regwatch.ingestion.normalize import CandidateRecord, build_record
from regwatch.ingestion.strategies import (
    FeedStrategy,
    FetchStrategy,
    HtmlStrategy,
    JsonApiStrategy,
    LinkDiscoveryStrategy,
    SelectorSet,
    StrategyChain,
    feed_entry_mapper,
)

BASE = "https://www.example.org"


class MockResponse:
    def __init__(self, text: str = "", status_code: int = 200):
        self.text = text
        self.status_code = status_code

    def json(self):
        return json.loads(self.text)


def make_record(title, link, *, published_at=None, summary=None):
    return build_record(
        title, link, authority="FCA", base_url=BASE, published_at=published_at, summary=summary
    )


def _record(n: int) -> CandidateRecord:
    return CandidateRecord(title=f"Item {n}", link=f"{BASE}/{n}", authority="FCA", summary="s")


class _Static(FetchStrategy):
    def __init__(self, label: str, result=None, error: Exception | None = None):
        self.label = label
        self._result = result or []
        self._error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._result


# --- Sample payloads ---

SAMPLE_RSS = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Regulator news</title>
    <item>
      <title>Consultation on new rules</title>
      <link>https://www.example.org/news/consultation?utm_source=rss</link>
      <description>&lt;p&gt;We are consulting on new rules.&lt;/p&gt;</description>
      <pubDate>Sun, 15 Jun 2025 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Final notice issued</title>
      <link>https://www.example.org/news/final-notice</link>
      <pubDate>Sun, 15 Jun 2025 11:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""

LISTING_HTML = """\
<html><body>
  <div class="latest">
    <article class="news">
      <h3>1. Regulator publishes market study</h3>
      <a href="/news/market-study">Read</a>
      <time datetime="2025-06-10">10 June 2025</time>
      <p>The study looks at competition in wholesale markets.</p>
    </article>
    <article class="news">
      <h3>Short</h3>
      <a href="/news/short">Read</a>
    </article>
    <article class="news">
      <h3>Consultation closes on payments rules</h3>
      <a href="/news/payments">Read</a>
      <span class="meta">Published 2 June 2025</span>
    </article>
  </div>
</body></html>
"""

ROWS_HTML = """\
<table>
  <tr class="row"><td class="d">12/06/2025</td><td class="t">09:30</td>
    <td><a href="/notices/1">Notice about trading halt</a></td></tr>
  <tr class="row"><td class="d">11/06/2025</td><td class="t">17:05</td>
    <td><a href="/notices/2">Notice about new listing</a></td></tr>
</table>
"""

LINKS_HTML = """\
<html><body>
  <nav><a href="/news/">News</a><a href="/about-us">About</a></nav>
  <div class="card">
    <h3>Bank announces quarterly results</h3>
    <span class="date">5 June 2025</span>
    <a href="/news/quarterly-results">Read more</a>
  </div>
  <ul>
    <li><a href="/press/new-ceo-appointed-today">New chief executive appointed today</a></li>
    <li><a href="/press/annual-report.pdf">Annual report download (PDF)</a></li>
    <li><a href="https://www.example.org/news/quarterly-results">Duplicate link to results</a></li>
  </ul>
</body></html>
"""


class TestStrategyChain:
    def test_first_success_wins(self):
        first = _Static("a", [_record(1)])
        second = _Static("b", [_record(2)])
        assert StrategyChain([first, second]).run() == [_record(1)]
        assert second.calls == 0

    def test_falls_through_on_ingestion_error(self):
        failing = _Static("a", error=SourceUnavailableError("down"))
        bad_shape = _Static("b", error=ExtractionError("bad"))
        good = _Static("c", [_record(3)])
        assert StrategyChain([failing, bad_shape, good]).run() == [_record(3)]

    def test_falls_through_on_unexpected_error(self):
        broken = _Static("a", error=RuntimeError("bug"))
        good = _Static("b", [_record(1)])
        assert StrategyChain([broken, good]).run() == [_record(1)]

    def test_short_result_falls_through(self):
        primary = _Static("a", [])
        fallback = _Static("b", [_record(i) for i in range(8)])
        assert len(StrategyChain([primary, fallback]).run()) == 8

    def test_min_items(self):
        thin = _Static("a", [_record(1)])
        rich = _Static("b", [_record(1), _record(2), _record(3)])
        assert len(StrategyChain([thin, rich], min_items=3).run()) == 3

    def test_selection_applied_before_counting(self):
        stale = _Static("a", [_record(1), _record(2)])
        fresh = _Static("b", [_record(7), _record(8)])

        def keep_recent(records):
            return [r for r in records if r.title in ("Item 7", "Item 8")]

        chain = StrategyChain([stale, fresh], select=keep_recent)
        assert chain.run() == [_record(7), _record(8)]
        assert stale.calls == 1

    def test_exhausted_returns_empty(self):
        chain = StrategyChain([_Static("a", error=SourceUnavailableError("down")), _Static("b")])
        assert chain.run() == []


class TestFeedStrategy:
    def test_maps_entries(self):
        fetcher = HttpFetcher()
        strategy = FeedStrategy(fetcher, f"{BASE}/rss", feed_entry_mapper(make_record))
        with patch("regwatch.ingestion.http.httpx.get", return_value=MockResponse(SAMPLE_RSS)):
            records = strategy.fetch()
        assert len(records) == 2
        first = records[0]
        assert first.title == "Consultation on new rules"
        assert first.link == "https://www.example.org/news/consultation"
        assert first.summary == "We are consulting on new rules."
        assert first.published_at == datetime(2025, 6, 15, 10, 0, tzinfo=timezone.utc)
        assert records[1].summary == "FCA: Final notice issued"

    def test_unreadable_feed(self):
        strategy = FeedStrategy(HttpFetcher(), f"{BASE}/rss", feed_entry_mapper(make_record))
        with patch("regwatch.ingestion.http.httpx.get", return_value=MockResponse("<<<not xml")):
            with pytest.raises(ExtractionError):
                strategy.fetch()


class TestJsonApiStrategy:
    def test_extracts(self):
        def extract(data):
            return [make_record(i["title"], i["url"]) for i in data["items"]]

        strategy = JsonApiStrategy(HttpFetcher(), f"{BASE}/api", extract)
        body = '{"items": [{"title": "Enforcement notice", "url": "/n/1"}]}'
        with patch("regwatch.ingestion.http.httpx.get", return_value=MockResponse(body)):
            records = strategy.fetch()
        assert [r.link for r in records] == [f"{BASE}/n/1"]

    def test_shape_error_becomes_extraction_error(self):
        strategy = JsonApiStrategy(HttpFetcher(), f"{BASE}/api", lambda data: data["items"])
        with patch("regwatch.ingestion.http.httpx.get", return_value=MockResponse("{}")):
            with pytest.raises(ExtractionError):
                strategy.fetch()

    def test_post(self):
        strategy = JsonApiStrategy(
            HttpFetcher(), f"{BASE}/api", lambda data: [], method="POST", payload={"page": 1}
        )
        with patch("regwatch.ingestion.http.httpx.post", return_value=MockResponse("{}")) as mock_post:
            assert strategy.fetch() == []
        assert mock_post.call_args.kwargs["json"] == {"page": 1}


class TestHtmlStrategy:
    def test_parses_listing(self):
        selectors = SelectorSet(container="article.news", title="h3")
        strategy = HtmlStrategy(HttpFetcher(), BASE, selectors, make_record)
        records = strategy.parse(LISTING_HTML)
        assert [r.title for r in records] == [
            "Regulator publishes market study",
            "Consultation closes on payments rules",
        ]
        assert records[0].link == f"{BASE}/news/market-study"
        assert records[0].published_at == datetime(2025, 6, 10, tzinfo=timezone.utc)
        assert records[0].summary == "The study looks at competition in wholesale markets."

    def test_date_found_in_card_text(self):
        selectors = SelectorSet(container="article.news", title="h3")
        records = HtmlStrategy(HttpFetcher(), BASE, selectors, make_record).parse(LISTING_HTML)
        assert records[1].published_at == datetime(2025, 6, 2, tzinfo=timezone.utc)

    def test_separate_date_and_time_cells(self):
        selectors = SelectorSet(
            container="tr.row", title="a", date="td.d", time="td.t", summary=None
        )
        records = HtmlStrategy(HttpFetcher(), BASE, selectors, make_record).parse(ROWS_HTML)
        assert records[0].published_at == datetime(2025, 6, 12, 9, 30, tzinfo=timezone.utc)
        assert records[1].published_at == datetime(2025, 6, 11, 17, 5, tzinfo=timezone.utc)

    def test_primary_empty_fallback_layout_used(self):
        primary = HtmlStrategy(
            HttpFetcher(), BASE, SelectorSet(container=".search-result"), make_record
        )
        items = "".join(
            f'<li class="item"><a href="/news/{i}">Regulatory update number {i}</a></li>'
            for i in range(8)
        )
        fallback = HtmlStrategy(
            HttpFetcher(), BASE, SelectorSet(container="li.item", title="a"), make_record
        )
        with patch(
            "regwatch.ingestion.http.httpx.get",
            return_value=MockResponse(f"<ul>{items}</ul>"),
        ):
            records = StrategyChain([primary, fallback]).run()
        assert len(records) == 8


class TestLinkDiscoveryStrategy:
    def test_discovers_article_links(self):
        strategy = LinkDiscoveryStrategy(
            HttpFetcher(),
            f"{BASE}/news/",
            make_record,
            url_patterns=(r"/(news|press)/",),
        )
        records = strategy.parse(LINKS_HTML)
        assert [r.link for r in records] == [
            f"{BASE}/news/quarterly-results",
            f"{BASE}/press/new-ceo-appointed-today",
        ]
        assert records[0].title == "Bank announces quarterly results"
        assert records[0].published_at == datetime(2025, 6, 5, tzinfo=timezone.utc)
        assert records[1].title == "New chief executive appointed today"

    def test_skip_patterns(self):
        strategy = LinkDiscoveryStrategy(
            HttpFetcher(),
            f"{BASE}/news/",
            make_record,
            url_patterns=(r"/(news|press)/",),
            skip_patterns=(r"/press/",),
        )
        records = strategy.parse(LINKS_HTML)
        assert [r.link for r in records] == [f"{BASE}/news/quarterly-results"]

    def test_malformed_href_skipped(self):
        strategy = LinkDiscoveryStrategy(
            HttpFetcher(), f"{BASE}/news/", make_record, url_patterns=(r"/(news|press)/",)
        )
        html = '<a href="http://[broken/news/x">Broken link to a news article</a>' + LINKS_HTML
        records = strategy.parse(html)
        assert [r.link for r in records] == [
            f"{BASE}/news/quarterly-results",
            f"{BASE}/press/new-ceo-appointed-today",
        ]

    def test_limit(self):
        strategy = LinkDiscoveryStrategy(
            HttpFetcher(), f"{BASE}/news/", make_record, url_patterns=(r"/(news|press)/",), limit=1
        )
        assert len(strategy.parse(LINKS_HTML)) == 1
