"""HTTP access for adapters: browser-like headers, maintenance detection.

An ``HttpFetcher`` lives for one adapter invocation. It memoises GET bodies
by URL so a fallback strategy re-reading the same page does not hit the
source twice; nothing is shared between adapters or runs.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass

import httpx

from regwatch.ingestion.errors import ExtractionError, SourceUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

_MAINTENANCE_RE = re.compile(
    r"(down for maintenance|under maintenance|scheduled maintenance|"
    r"temporarily unavailable|service unavailable)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class FetchSettings:
    """Network knobs handed to every adapter."""

    timeout_seconds: float = 20.0
    user_agent: str = DEFAULT_USER_AGENT
    browser_headless: bool = True
    browser_timeout_ms: int = 60000
    detail_delay_seconds: float = 0.5


def is_maintenance_page(text: str) -> bool:
    """True when a short HTML body reads like a maintenance notice."""
    # Real listing pages can mention maintenance in passing; only trust
    # short bodies or the page title.
    head = text[:4000]
    title_match = re.search(r"<title[^>]*>(.*?)</title>", head, re.IGNORECASE | re.DOTALL)
    if title_match and _MAINTENANCE_RE.search(title_match.group(1)):
        return True
    return len(text) < 5000 and bool(_MAINTENANCE_RE.search(text))


class HttpFetcher:
    """Thin wrapper over module-level ``httpx`` calls."""

    def __init__(self, settings: FetchSettings | None = None) -> None:
        self._settings = settings or FetchSettings()
        self._memo: dict[str, str] = {}

    @property
    def settings(self) -> FetchSettings:
        return self._settings

    def _headers(self, accept: str, extra: dict | None = None) -> dict:
        headers = {
            "User-Agent": self._settings.user_agent,
            "Accept": accept,
            "Accept-Language": "en-GB,en;q=0.9",
        }
        if extra:
            headers.update(extra)
        return headers

    def _check(self, response: httpx.Response, url: str) -> None:
        if response.status_code == 503:
            raise SourceUnavailableError(f"{url} returned 503 (maintenance or overload)")
        if response.status_code >= 400:
            raise SourceUnavailableError(f"{url} returned HTTP {response.status_code}")

    def get_text(self, url: str, params: dict | None = None) -> str:
        """GET a page body. Raises SourceUnavailableError on any failure."""
        memo_key = url if not params else f"{url}?{sorted(params.items())}"
        if memo_key in self._memo:
            return self._memo[memo_key]
        try:
            response = httpx.get(
                url,
                params=params,
                headers=self._headers("text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"),
                timeout=self._settings.timeout_seconds,
                follow_redirects=True,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SourceUnavailableError(f"GET {url} failed: {exc}") from exc
        self._check(response, url)
        text = response.text
        if is_maintenance_page(text):
            raise SourceUnavailableError(f"{url} is serving a maintenance page")
        self._memo[memo_key] = text
        return text

    def _decode_json(self, response: httpx.Response, url: str):
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            if is_maintenance_page(response.text):
                raise SourceUnavailableError(f"{url} is serving a maintenance page") from exc
            raise ExtractionError(f"{url} did not return JSON") from exc
        if isinstance(data, dict) and data.get("maintenance") is True:
            raise SourceUnavailableError(f"{url} reports maintenance")
        return data

    def get_json(self, url: str, params: dict | None = None):
        try:
            response = httpx.get(
                url,
                params=params,
                headers=self._headers("application/json, text/plain, */*"),
                timeout=self._settings.timeout_seconds,
                follow_redirects=True,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SourceUnavailableError(f"GET {url} failed: {exc}") from exc
        self._check(response, url)
        return self._decode_json(response, url)

    def post_json(self, url: str, payload: dict, headers: dict | None = None):
        try:
            response = httpx.post(
                url,
                json=payload,
                headers=self._headers("application/json, text/plain, */*", headers),
                timeout=self._settings.timeout_seconds,
                follow_redirects=True,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SourceUnavailableError(f"POST {url} failed: {exc}") from exc
        self._check(response, url)
        return self._decode_json(response, url)
