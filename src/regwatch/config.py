"""Configuration loading and validation."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from regwatch.ingestion.http import DEFAULT_USER_AGENT, FetchSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """Application configuration. All values sourced from environment variables."""

    # Smoke harness / orchestration
    adapter_timeout_ms: int = 60000
    adapter_delay_ms: int = 2000

    # Fetching
    http_timeout_seconds: float = 20.0
    user_agent: str = DEFAULT_USER_AGENT
    browser_headless: bool = True
    browser_timeout_ms: int = 60000
    detail_delay_ms: int = 500

    # Per-source overrides
    sources_config_path: str = "./config/sources.json"

    # Application
    log_level: str = "INFO"
    log_format: str = "text"

    def fetch_settings(self) -> FetchSettings:
        return FetchSettings(
            timeout_seconds=self.http_timeout_seconds,
            user_agent=self.user_agent,
            browser_headless=self.browser_headless,
            browser_timeout_ms=self.browser_timeout_ms,
            detail_delay_seconds=self.detail_delay_ms / 1000,
        )


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _bool_env(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


def load_config(env_path: str | Path | None = None) -> Config:
    """Load configuration from environment variables.

    Loads a .env file if present (for local development). Nothing is
    required; malformed numeric values raise ValueError naming the variable.
    """
    load_dotenv(dotenv_path=env_path)

    return Config(
        adapter_timeout_ms=_int_env("SMOKE_TIMEOUT_MS", 60000),
        adapter_delay_ms=_int_env("SMOKE_DELAY_MS", 2000),
        http_timeout_seconds=_float_env("HTTP_TIMEOUT_SECONDS", 20.0),
        user_agent=os.environ.get("HTTP_USER_AGENT") or DEFAULT_USER_AGENT,
        browser_headless=_bool_env("BROWSER_HEADLESS", True),
        browser_timeout_ms=_int_env("BROWSER_TIMEOUT_MS", 60000),
        detail_delay_ms=_int_env("DETAIL_FETCH_DELAY_MS", 500),
        sources_config_path=os.environ.get("SOURCES_CONFIG_PATH", "./config/sources.json"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "text"),
    )


def load_source_overrides(path: str | Path) -> dict[str, dict]:
    """Read per-source overrides keyed by source name.

    The file holds ``{"adapters": [{"type": "fca", "max_items": 10}, ...]}``.
    A missing file means no overrides.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("No sources config at %s", path)
        return {}
    with path.open() as f:
        data = json.load(f)
    overrides: dict[str, dict] = {}
    for entry in data.get("adapters", []):
        entry = dict(entry)
        source_type = entry.pop("type", None)
        if not source_type:
            logger.warning("Ignoring sources config entry without a type: %s", entry)
            continue
        overrides[source_type] = entry
    return overrides
