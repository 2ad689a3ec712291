"""Recency windows, including the widening fallback for quiet sources."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from regwatch.ingestion.normalize import CandidateRecord

logger = logging.getLogger(__name__)


def is_recent(instant: datetime | None, window_days: int, now: datetime | None = None) -> bool:
    """True when ``instant`` falls within the last ``window_days`` days."""
    if instant is None:
        return False
    now = now or datetime.now(timezone.utc)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant >= now - timedelta(days=window_days)


@dataclass(frozen=True)
class RecencyPolicy:
    """Per-source recency rules.

    The primary window applies first. If it keeps fewer than ``widen_below``
    records and ``widen_to_days`` is set, the same unfiltered input is
    re-filtered against the wider window and that result is used instead.
    """

    window_days: int = 30
    widen_below: int = 3
    widen_to_days: int | None = 90
    include_undated: bool = False

    def _filter(
        self, records: list[CandidateRecord], window_days: int, now: datetime
    ) -> list[CandidateRecord]:
        kept: list[CandidateRecord] = []
        for record in records:
            if record.published_at is None:
                if self.include_undated:
                    kept.append(replace(record, published_at=now))
                continue
            if is_recent(record.published_at, window_days, now):
                kept.append(record)
        return kept

    def apply(
        self, records: list[CandidateRecord], now: datetime | None = None
    ) -> list[CandidateRecord]:
        now = now or datetime.now(timezone.utc)
        kept = self._filter(records, self.window_days, now)
        if (
            len(kept) < self.widen_below
            and self.widen_to_days
            and self.widen_to_days > self.window_days
        ):
            widened = self._filter(records, self.widen_to_days, now)
            logger.debug(
                "Widened recency window %dd -> %dd: %d -> %d records",
                self.window_days, self.widen_to_days, len(kept), len(widened),
            )
            return widened
        return kept


NO_WIDEN = RecencyPolicy(widen_to_days=None)
