"""Source adapter interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timezone

from regwatch.ingestion.authority import authority_tags
from regwatch.ingestion.enrich import DetailSummaryEnricher
from regwatch.ingestion.errors import SourceUnavailableError
from regwatch.ingestion.filters import GENERIC_INFO_FILTER, InformationalPageFilter
from regwatch.ingestion.http import FetchSettings, HttpFetcher
from regwatch.ingestion.normalize import CandidateRecord, build_record, dedupe_by_link
from regwatch.ingestion.recency import RecencyPolicy
from regwatch.ingestion.strategies import FetchStrategy, StrategyChain

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class SourceAdapter(ABC):
    """Abstract base class for source adapters.

    Every adapter knows how to fetch and parse items from one regulator,
    exchange or bank. Subclasses describe the source through class
    attributes and ``build_strategies``; ``fetch`` runs the strategies and
    accepts the first one whose output survives ``finalize``.

    ``fetch`` never raises: any failure is logged and yields ``[]``.
    """

    authority: str = ""
    base_url: str = ""
    max_items: int = 20
    recency: RecencyPolicy = RecencyPolicy()
    info_filter: InformationalPageFilter | None = GENERIC_INFO_FILTER
    min_items: int = 1
    # Runner timeout override in seconds; None uses the runner default.
    run_timeout: float | None = None
    country: str | None = None
    region: str | None = None
    sectors: tuple[str, ...] = ()

    def __init__(self, settings: FetchSettings | None = None) -> None:
        self._settings = settings or FetchSettings()

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key for this adapter."""

    @property
    def settings(self) -> FetchSettings:
        return self._settings

    @abstractmethod
    def build_strategies(self, fetcher: HttpFetcher) -> list[FetchStrategy]:
        """Return this source's strategies, most preferred first."""

    def build_enricher(self, fetcher: HttpFetcher) -> DetailSummaryEnricher | None:
        """Optional detail-page enrichment step. None by default."""
        return None

    def configure(self, config: dict) -> None:
        """Apply per-source overrides.

        Accepted keys: max_items, window_days, widen_below, widen_to_days,
        include_undated, timeout_seconds.
        """
        if "max_items" in config:
            self.max_items = int(config["max_items"])
        policy_overrides = {
            key: config[key]
            for key in ("window_days", "widen_below", "widen_to_days", "include_undated")
            if key in config
        }
        if policy_overrides:
            self.recency = replace(self.recency, **policy_overrides)
        if "timeout_seconds" in config:
            self.run_timeout = float(config["timeout_seconds"])

    def make_record(self, title, link, *, published_at=None, summary=None) -> CandidateRecord | None:
        """Build a record carrying this source's authority and tags."""
        country, region = authority_tags(self.authority)
        return build_record(
            title,
            link,
            authority=self.authority,
            base_url=self.base_url,
            published_at=published_at,
            summary=summary,
            country=self.country or country,
            region=self.region or region,
            sectors=self.sectors,
        )

    def finalize(self, records: list[CandidateRecord], now: datetime | None = None) -> list[CandidateRecord]:
        """Dedupe, drop informational pages, window, sort newest first, cap."""
        records = dedupe_by_link(records)
        if self.info_filter is not None:
            records = self.info_filter.apply(records)
        records = self.recency.apply(records, now=now)
        records.sort(key=lambda r: r.published_at or _EPOCH, reverse=True)
        return records[: self.max_items]

    def fetch(self) -> list[CandidateRecord]:
        """Fetch the source's recent items. Never raises."""
        try:
            fetcher = HttpFetcher(self._settings)
            chain = StrategyChain(
                self.build_strategies(fetcher),
                min_items=self.min_items,
                source=self.name,
                select=self.finalize,
            )
            records = chain.run()
            enricher = self.build_enricher(fetcher)
            if enricher is not None and records:
                records = enricher.enrich(records)
        except SourceUnavailableError as exc:
            logger.warning("%s: source unavailable: %s", self.name, exc)
            return []
        except Exception:
            logger.warning("%s: unexpected error while fetching", self.name, exc_info=True)
            return []
        logger.info("Fetched %d items from %s", len(records), self.name)
        return records
