"""Adapter registry — maps source names to adapter factories."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable

if TYPE_CHECKING:
    from regwatch.ingestion.adapter import SourceAdapter
    from regwatch.ingestion.http import FetchSettings

logger = logging.getLogger(__name__)

AdapterFactory = Callable[..., "SourceAdapter"]

_REGISTRY: dict[str, AdapterFactory] = {}


def register_adapter(type_name: str, factory: AdapterFactory) -> None:
    """Register an adapter class (or factory) under a source name."""
    _REGISTRY[type_name] = factory


def get_adapter_class(type_name: str) -> AdapterFactory | None:
    """Look up an adapter factory by source name. Returns None if not found."""
    return _REGISTRY.get(type_name)


def registered_types() -> list[str]:
    """Return a sorted list of all registered source names."""
    return sorted(_REGISTRY)


def build_adapters(
    settings: FetchSettings | None = None,
    names: Iterable[str] | None = None,
    overrides: dict[str, dict] | None = None,
) -> list[SourceAdapter]:
    """Instantiate adapters in registry order, or the named subset.

    ``overrides`` maps a source name to a ``configure`` dict; an entry with
    ``"enabled": false`` leaves that source out. Unknown names raise KeyError.
    """
    overrides = overrides or {}
    selected = list(names) if names else registered_types()
    unknown = [name for name in selected if name not in _REGISTRY]
    if unknown:
        raise KeyError(f"Unknown source(s): {', '.join(unknown)}")

    adapters: list[SourceAdapter] = []
    for name in selected:
        adapter_config = dict(overrides.get(name, {}))
        if not adapter_config.pop("enabled", True):
            logger.info("Source %s disabled by configuration", name)
            continue
        adapter = _REGISTRY[name](settings)
        if adapter_config:
            adapter.configure(adapter_config)
        adapters.append(adapter)
    return adapters
