"""Adapter orchestration: timeout race, pacing and result caching."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from regwatch.ingestion.adapter import SourceAdapter

logger = logging.getLogger(__name__)


@dataclass
class AdapterRun:
    """Outcome of invoking one adapter."""

    name: str
    records: Any = None
    error: str | None = None
    timed_out: bool = False
    duration_seconds: float = 0.0
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.timed_out and isinstance(self.records, list)


class ResultCache:
    """Time-bounded cache of adapter results, owned by the caller.

    Entries expire ``ttl_seconds`` after they are stored and are evicted
    when next read.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, list]] = {}

    def get(self, key: str) -> list | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at > self._ttl:
            del self._entries[key]
            return None
        return value

    def put(self, key: str, value: list) -> None:
        self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def run_adapter(adapter: SourceAdapter, timeout_seconds: float) -> AdapterRun:
    """Run ``adapter.fetch()`` on a worker thread, waiting at most the timeout.

    A timed-out fetch is abandoned, not interrupted: the daemon thread keeps
    running until its own network and browser timeouts release it.
    """
    result: dict[str, Any] = {}
    done = threading.Event()

    def _target() -> None:
        try:
            result["records"] = adapter.fetch()
        except Exception as exc:
            result["error"] = f"{type(exc).__name__}: {exc}"
        finally:
            done.set()

    started = time.monotonic()
    worker = threading.Thread(target=_target, name=f"adapter-{adapter.name}", daemon=True)
    worker.start()
    finished = done.wait(timeout_seconds)
    run = AdapterRun(name=adapter.name, duration_seconds=time.monotonic() - started)

    if not finished:
        logger.warning("%s: timed out after %.0fs", adapter.name, timeout_seconds)
        run.timed_out = True
        run.error = f"timed out after {timeout_seconds:.0f}s"
        return run
    if "error" in result:
        logger.warning("%s: raised %s", adapter.name, result["error"])
        run.error = result["error"]
        return run

    run.records = result.get("records")
    if not isinstance(run.records, list):
        run.error = f"returned {type(run.records).__name__}, expected list"
    return run


def run_adapters(
    adapters: list[SourceAdapter],
    *,
    default_timeout: float,
    delay_seconds: float = 0.0,
    cache: ResultCache | None = None,
) -> list[AdapterRun]:
    """Run adapters one after another with a pause between network runs."""
    runs: list[AdapterRun] = []
    hit_network = False
    for adapter in adapters:
        if cache is not None:
            cached = cache.get(adapter.name)
            if cached is not None:
                logger.info("%s: using cached result (%d items)", adapter.name, len(cached))
                runs.append(AdapterRun(name=adapter.name, records=cached, from_cache=True))
                continue

        if hit_network and delay_seconds > 0:
            time.sleep(delay_seconds)
        hit_network = True

        timeout = max(adapter.run_timeout or 0.0, default_timeout)
        logger.info("%s: running (timeout %.0fs)", adapter.name, timeout)
        run = run_adapter(adapter, timeout)
        if cache is not None and run.ok and run.records:
            cache.put(adapter.name, run.records)
        runs.append(run)
    return runs
