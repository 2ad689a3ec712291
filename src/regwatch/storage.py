"""Interface to the persistence collaborator.

Storage itself lives outside this package. Anything with ``exists`` and
``save`` keyed by link can receive adapter output.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from regwatch.ingestion.normalize import CandidateRecord

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def exists(self, link: str) -> bool:
        ...

    def save(self, record: CandidateRecord) -> None:
        ...


def persist_new(records: Iterable[CandidateRecord], store: RecordStore) -> int:
    """Save records whose link the store has not seen. Returns the count saved."""
    saved = 0
    for record in records:
        if store.exists(record.link):
            continue
        store.save(record)
        saved += 1
    logger.info("Persisted %d new records", saved)
    return saved
