"""Tests for regwatch.runner — timeouts, pacing and caching."""

from __future__ import annotations

import threading
from unittest.mock import patch

from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.normalize import CandidateRecord
from regwatch.runner import ResultCache, run_adapter, run_adapters

RECORD = CandidateRecord(title="T", link="https://x/1", authority="FCA", summary="FCA: T")


class _FakeAdapter(SourceAdapter):
    def __init__(self, name, result=None, error=None, block: threading.Event | None = None):
        super().__init__()
        self._name = name
        self._result = [RECORD] if result is None else result
        self._error = error
        self._block = block
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    def build_strategies(self, fetcher):
        return []

    def fetch(self):
        self.calls += 1
        if self._block is not None:
            self._block.wait(5)
        if self._error is not None:
            raise self._error
        return self._result


class TestRunAdapter:
    def test_success(self):
        run = run_adapter(_FakeAdapter("a"), timeout_seconds=5)
        assert run.ok
        assert run.records == [RECORD]
        assert run.timed_out is False

    def test_timeout(self):
        release = threading.Event()
        try:
            run = run_adapter(_FakeAdapter("slow", block=release), timeout_seconds=0.05)
        finally:
            release.set()
        assert run.timed_out is True
        assert not run.ok
        assert "timed out" in run.error

    def test_exception_captured(self):
        run = run_adapter(_FakeAdapter("bad", error=RuntimeError("boom")), timeout_seconds=5)
        assert run.error == "RuntimeError: boom"
        assert not run.ok

    def test_non_list_result(self):
        run = run_adapter(_FakeAdapter("odd", result={"not": "a list"}), timeout_seconds=5)
        assert run.error == "returned dict, expected list"


class TestResultCache:
    def test_expiry(self):
        now = [100.0]
        cache = ResultCache(ttl_seconds=60, clock=lambda: now[0])
        cache.put("fca", [RECORD])
        now[0] = 159.0
        assert cache.get("fca") == [RECORD]
        now[0] = 161.0
        assert cache.get("fca") is None
        assert len(cache) == 0

    def test_clear(self):
        cache = ResultCache(ttl_seconds=60)
        cache.put("fca", [RECORD])
        cache.clear()
        assert cache.get("fca") is None


class TestRunAdapters:
    def test_sequential_with_delay(self):
        adapters = [_FakeAdapter("a"), _FakeAdapter("b"), _FakeAdapter("c")]
        with patch("regwatch.runner.time.sleep") as mock_sleep:
            runs = run_adapters(adapters, default_timeout=5, delay_seconds=2.0)
        assert [r.name for r in runs] == ["a", "b", "c"]
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(2.0)

    def test_failure_does_not_stop_others(self):
        adapters = [_FakeAdapter("a", error=RuntimeError("boom")), _FakeAdapter("b")]
        runs = run_adapters(adapters, default_timeout=5)
        assert [r.ok for r in runs] == [False, True]

    def test_adapter_timeout_override(self):
        adapter = _FakeAdapter("a")
        adapter.run_timeout = 123.0
        with patch("regwatch.runner.run_adapter", wraps=run_adapter) as mock_run:
            run_adapters([adapter], default_timeout=5)
        assert mock_run.call_args.args[1] == 123.0

    def test_override_never_shortens_default(self):
        adapter = _FakeAdapter("a")
        adapter.run_timeout = 3.0
        with patch("regwatch.runner.run_adapter", wraps=run_adapter) as mock_run:
            run_adapters([adapter], default_timeout=5)
        assert mock_run.call_args.args[1] == 5

    def test_cache_hit_skips_fetch(self):
        cache = ResultCache(ttl_seconds=60)
        adapter = _FakeAdapter("a")
        run_adapters([adapter], default_timeout=5, cache=cache)
        runs = run_adapters([adapter], default_timeout=5, cache=cache)
        assert adapter.calls == 1
        assert runs[0].from_cache is True
        assert runs[0].records == [RECORD]

    def test_empty_result_not_cached(self):
        cache = ResultCache(ttl_seconds=60)
        adapter = _FakeAdapter("a", result=[])
        run_adapters([adapter], default_timeout=5, cache=cache)
        run_adapters([adapter], default_timeout=5, cache=cache)
        assert adapter.calls == 2
