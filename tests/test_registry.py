"""Tests for regwatch.ingestion.registry — adapter registry."""

from __future__ import annotations

import pytest

import regwatch.ingestion  # noqa: F401
from regwatch.ingestion.adapter import SourceAdapter
from regwatch.ingestion.http import FetchSettings
from regwatch.ingestion.registry import (
    _REGISTRY,
    build_adapters,
    get_adapter_class,
    register_adapter,
    registered_types,
)
from regwatch.ingestion.sources import BANK_CONFIGS, BankNewsAdapter, FCAAdapter


class _DummyAdapter(SourceAdapter):
    @property
    def name(self) -> str:
        return "dummy"

    def build_strategies(self, fetcher):
        return []


class TestRegistry:
    def setup_method(self):
        self._saved = dict(_REGISTRY)

    def teardown_method(self):
        _REGISTRY.clear()
        _REGISTRY.update(self._saved)

    def test_register_and_lookup(self):
        register_adapter("dummy", _DummyAdapter)
        assert get_adapter_class("dummy") is _DummyAdapter

    def test_lookup_unknown_returns_none(self):
        assert get_adapter_class("nonexistent") is None

    def test_registered_types_sorted(self):
        register_adapter("zzz", _DummyAdapter)
        register_adapter("aaa", _DummyAdapter)
        types = registered_types()
        assert types[0] == "aaa"
        assert "zzz" in types

    def test_named_sources_registered_by_default(self):
        for name in (
            "fca", "boe", "pra", "eba", "esma", "fatf", "ico", "frc", "fos", "tpr", "sfo",
            "ofcom", "jmlsg", "consob", "bank_of_italy", "cnmv", "sebi", "lse", "aquis", "payuk",
        ):
            assert get_adapter_class(name) is not None, name

    def test_every_bank_registered(self):
        for key in BANK_CONFIGS:
            assert get_adapter_class(f"bank:{key.lower()}") is not None

    def test_registered_name_matches_adapter_name(self):
        for type_name in registered_types():
            assert _REGISTRY[type_name]().name == type_name


class TestBuildAdapters:
    def setup_method(self):
        self._saved = dict(_REGISTRY)

    def teardown_method(self):
        _REGISTRY.clear()
        _REGISTRY.update(self._saved)

    def test_named_subset_with_settings(self):
        settings = FetchSettings(timeout_seconds=5.0)
        adapters = build_adapters(settings, names=["fca", "bank:hsbc"])
        assert isinstance(adapters[0], FCAAdapter)
        assert isinstance(adapters[1], BankNewsAdapter)
        assert adapters[0].settings is settings
        assert adapters[1].name == "bank:hsbc"

    def test_all_by_default(self):
        assert len(build_adapters()) == len(registered_types())

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="nope"):
            build_adapters(names=["fca", "nope"])

    def test_overrides_applied(self):
        adapters = build_adapters(names=["fca"], overrides={"fca": {"max_items": 5}})
        assert adapters[0].max_items == 5

    def test_disabled_source_skipped(self):
        adapters = build_adapters(names=["fca", "boe"], overrides={"boe": {"enabled": False}})
        assert [a.name for a in adapters] == ["fca"]
