"""Exceptions raised inside the ingestion layer.

Strategies raise these; the strategy chain treats them as a reason to fall
through, and the adapter boundary turns whatever is left into an empty result.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for ingestion failures."""


class SourceUnavailableError(IngestionError):
    """The source could not be reached or is serving a maintenance page."""


class ExtractionError(IngestionError):
    """The source answered but the payload did not have the expected shape."""
