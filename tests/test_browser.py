"""Tests for regwatch.ingestion.browser and BrowserStrategy — Playwright is mocked."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from regwatch.ingestion.browser import (
    STEALTH_ARGS,
    PlaywrightError,
    PlaywrightTimeoutError,
    _block_heavy_resources,
    browser_page,
)
from regwatch.ingestion.errors import SourceUnavailableError
from regwatch.ingestion.http import FetchSettings
from regwatch.ingestion.normalize import build_record
from regwatch.ingestion.sources import PayUKAdapter
from regwatch.ingestion.strategies import BrowserStrategy


def _mock_playwright():
    """Return (sync_playwright mock, browser mock, page mock)."""
    sync_pw = MagicMock()
    playwright = sync_pw.return_value.__enter__.return_value
    browser = playwright.chromium.launch.return_value
    page = browser.new_context.return_value.new_page.return_value
    return sync_pw, browser, page


def make_record(title, link, *, published_at=None, summary=None):
    return build_record(
        title,
        link,
        authority="FATF",
        base_url="https://www.fatf-gafi.org",
        published_at=published_at,
        summary=summary,
    )


class TestBrowserPage:
    def test_launch_configuration(self):
        sync_pw, browser, page = _mock_playwright()
        settings = FetchSettings(user_agent="TestAgent/1.0", browser_headless=False, browser_timeout_ms=5000)
        with patch("regwatch.ingestion.browser.sync_playwright", sync_pw):
            with browser_page(settings) as yielded:
                assert yielded is page
        launch = sync_pw.return_value.__enter__.return_value.chromium.launch
        assert launch.call_args.kwargs == {"headless": False, "args": STEALTH_ARGS}
        assert browser.new_context.call_args.kwargs["user_agent"] == "TestAgent/1.0"
        page.set_default_timeout.assert_called_once_with(5000)
        page.route.assert_called_once_with("**/*", _block_heavy_resources)
        browser.close.assert_called_once()

    def test_browser_closed_on_error(self):
        sync_pw, browser, _page = _mock_playwright()
        with patch("regwatch.ingestion.browser.sync_playwright", sync_pw):
            with pytest.raises(RuntimeError):
                with browser_page(FetchSettings()):
                    raise RuntimeError("boom")
        browser.close.assert_called_once()


class TestBlockHeavyResources:
    @pytest.mark.parametrize("resource_type", ["image", "font", "media"])
    def test_blocked(self, resource_type):
        route = MagicMock()
        route.request.resource_type = resource_type
        _block_heavy_resources(route)
        route.abort.assert_called_once()
        route.continue_.assert_not_called()

    def test_documents_pass(self):
        route = MagicMock()
        route.request.resource_type = "document"
        _block_heavy_resources(route)
        route.continue_.assert_called_once()
        route.abort.assert_not_called()


class TestBrowserStrategy:
    def test_extracts_and_splits_title_dates(self):
        sync_pw, _browser, page = _mock_playwright()
        page.evaluate.return_value = [
            {
                "title": "Outcomes of the FATF Plenary 12 June 2025",
                "href": "https://www.fatf-gafi.org/en/publications/plenary.html",
                "dateText": "",
                "description": "Plenary outcomes.",
            }
        ]
        strategy = BrowserStrategy(
            FetchSettings(), ["https://www.fatf-gafi.org/en/news.html"], make_record, split_title_dates=True
        )
        with patch("regwatch.ingestion.browser.sync_playwright", sync_pw):
            records = strategy.fetch()
        assert len(records) == 1
        assert records[0].title == "Outcomes of the FATF Plenary"
        assert records[0].published_at == datetime(2025, 6, 12, tzinfo=timezone.utc)
        assert records[0].summary == "Plenary outcomes."
        page.goto.assert_called_once()

    def test_one_failed_url_is_skipped(self):
        sync_pw, _browser, page = _mock_playwright()
        page.goto.side_effect = [PlaywrightTimeoutError("Timeout"), None]
        page.evaluate.return_value = [
            {"title": "Mutual evaluation report", "href": "https://www.fatf-gafi.org/en/publications/me.html"}
        ]
        strategy = BrowserStrategy(FetchSettings(), ["https://a.example", "https://b.example"], make_record)
        with patch("regwatch.ingestion.browser.sync_playwright", sync_pw):
            records = strategy.fetch()
        assert len(records) == 1

    def test_all_urls_failing_raises(self):
        sync_pw, browser, page = _mock_playwright()
        page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        strategy = BrowserStrategy(FetchSettings(), ["https://a.example"], make_record)
        with patch("regwatch.ingestion.browser.sync_playwright", sync_pw):
            with pytest.raises(SourceUnavailableError):
                strategy.fetch()
        browser.close.assert_called_once()


class TestBrowserAdapter:
    def test_timeout_returns_empty_and_closes_browser(self):
        sync_pw, browser, page = _mock_playwright()
        page.goto.side_effect = PlaywrightTimeoutError("Timeout")
        with patch("regwatch.ingestion.browser.sync_playwright", sync_pw):
            assert PayUKAdapter().fetch() == []
        browser.close.assert_called_once()

    def test_launch_failure_returns_empty(self):
        sync_pw, _browser, _page = _mock_playwright()
        sync_pw.return_value.__enter__.return_value.chromium.launch.side_effect = PlaywrightError(
            "Executable doesn't exist"
        )
        with patch("regwatch.ingestion.browser.sync_playwright", sync_pw):
            assert PayUKAdapter().fetch() == []

    def test_rendered_items(self):
        sync_pw, _browser, page = _mock_playwright()
        recent = (datetime.now(timezone.utc) - timedelta(days=2)).strftime("%Y-%m-%d")
        page.evaluate.return_value = [
            {
                "title": "Pay.UK publishes new standards for payments",
                "href": "https://www.wearepay.uk/news-and-insight/latest-updates/new-standards/",
                "dateText": recent,
                "description": "",
            }
        ]
        with patch("regwatch.ingestion.browser.sync_playwright", sync_pw):
            records = PayUKAdapter().fetch()
        assert len(records) == 1
        assert records[0].authority == "Pay.UK"
        assert records[0].summary == "Pay.UK: Pay.UK publishes new standards for payments"
        assert records[0].country == "UK"
