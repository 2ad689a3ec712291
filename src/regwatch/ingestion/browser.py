"""Headless Chromium for sources that only render their listings client-side."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

if TYPE_CHECKING:
    from playwright.sync_api import Page, Route

    from regwatch.ingestion.http import FetchSettings

logger = logging.getLogger(__name__)

__all__ = [
    "EXTRACT_LISTING_JS",
    "PlaywrightError",
    "PlaywrightTimeoutError",
    "browser_page",
    "load_listing",
]

STEALTH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--window-size=1920,1080",
]

BLOCKED_RESOURCE_TYPES = frozenset({"image", "font", "media"})

_STEALTH_INIT_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['en-GB', 'en'] });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
window.chrome = window.chrome || { runtime: {} };
"""

# Tries each selector set in order and returns the first one with hits.
# With no selector hits, falls back to scanning anchors whose href matches
# one of the link patterns.
EXTRACT_LISTING_JS = """
({ selectorSets, linkPatterns, limit, minTitleLength }) => {
  const clean = (t) => (t || '').replace(/\\s+/g, ' ').trim();
  const results = [];
  const seen = new Set();
  const push = (title, href, dateText, description) => {
    if (!title || !href || seen.has(href) || results.length >= limit) return;
    seen.add(href);
    results.push({ title, href, dateText, description });
  };
  const dateOf = (el, attr) => (el ? (el.getAttribute(attr) || clean(el.textContent)) : '');

  for (const set of selectorSets) {
    const nodes = document.querySelectorAll(set.container);
    if (!nodes.length) continue;
    nodes.forEach((node) => {
      const linkEl = node.matches('a[href]') ? node : node.querySelector(set.link);
      const titleEl = node.querySelector(set.title);
      const title = clean(titleEl ? titleEl.textContent : (linkEl ? linkEl.textContent : ''));
      if (title.length < minTitleLength) return;
      const dateEl = set.date ? node.querySelector(set.date) : null;
      const summaryEl = set.summary ? node.querySelector(set.summary) : null;
      push(title, linkEl ? linkEl.href : '', dateOf(dateEl, set.dateAttr),
           summaryEl ? clean(summaryEl.textContent) : '');
    });
    if (results.length) return results;
  }

  const patterns = linkPatterns.map((p) => new RegExp(p, 'i'));
  document.querySelectorAll('a[href]').forEach((a) => {
    const href = a.href;
    if (/\\.pdf($|\\?)/i.test(href)) return;
    if (!patterns.some((re) => re.test(href))) return;
    const card = a.closest('article, li, [class*="card"], [class*="item"], [class*="teaser"]');
    const heading = card ? card.querySelector('h2, h3, h4') : null;
    const title = clean(heading ? heading.textContent : a.textContent);
    if (title.length < minTitleLength) return;
    if (/^(view all|see more|read more|learn more|press releases|news)$/i.test(title)) return;
    const dateEl = card ? card.querySelector('time, [class*="date"]') : null;
    push(title, href, dateOf(dateEl, 'datetime'), '');
  });
  return results;
}
"""


def _block_heavy_resources(route: Route) -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        route.abort()
    else:
        route.continue_()


@contextmanager
def browser_page(settings: FetchSettings) -> Iterator[Page]:
    """Yield a stealth-configured page; the browser is closed on every exit."""
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(
            headless=settings.browser_headless,
            args=STEALTH_ARGS,
        )
        try:
            context = browser.new_context(
                user_agent=settings.user_agent,
                viewport={"width": 1920, "height": 1080},
                locale="en-GB",
                extra_http_headers={"Accept-Language": "en-GB,en;q=0.9"},
            )
            context.add_init_script(_STEALTH_INIT_SCRIPT)
            page = context.new_page()
            page.set_default_timeout(settings.browser_timeout_ms)
            page.route("**/*", _block_heavy_resources)
            yield page
        finally:
            try:
                browser.close()
            except Exception:
                logger.warning("Failed to close browser", exc_info=True)


def load_listing(page: Page, url: str, timeout_ms: int, settle_ms: int = 1500) -> None:
    """Navigate and scroll so lazily loaded listing items render."""
    logger.debug("Browser navigating to %s", url)
    page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    page.wait_for_timeout(settle_ms)
    page.evaluate("window.scrollTo(0, document.body.scrollHeight / 2)")
    page.wait_for_timeout(500)
    page.evaluate("window.scrollTo(0, document.body.scrollHeight)")
    page.wait_for_timeout(settle_ms)
