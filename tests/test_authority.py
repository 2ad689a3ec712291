"""Tests for regwatch.ingestion.authority — regulator label canonicalization."""

from __future__ import annotations

import pytest

from regwatch.ingestion.authority import (
    AUTHORITY_REGISTRY,
    LEGACY_ALIASES,
    authority_display_name,
    authority_tags,
    normalize_authority,
    resolve_authority,
)


class TestNormalizeAuthority:
    @pytest.mark.parametrize("record", AUTHORITY_REGISTRY, ids=lambda r: r.code)
    def test_code_maps_to_itself(self, record):
        assert normalize_authority(record.code) == record.code

    @pytest.mark.parametrize("record", AUTHORITY_REGISTRY, ids=lambda r: r.code)
    def test_idempotent(self, record):
        once = normalize_authority(record.name)
        assert normalize_authority(once) == once

    def test_full_name(self):
        assert normalize_authority("Financial Conduct Authority") == "FCA"

    def test_case_and_whitespace_insensitive(self):
        assert normalize_authority("  financial   conduct AUTHORITY ") == "FCA"

    def test_alias(self):
        assert normalize_authority("Banca d'Italia") == "BdI"
        assert normalize_authority("Pay UK") == "Pay.UK"

    def test_legacy_labels(self):
        assert normalize_authority("Bank of England") == "BoE"
        assert normalize_authority("Prudential Regulation Authority (PRA)") == "PRA"
        assert normalize_authority("CNMV Spain") == "CNMV"

    def test_unknown_label_passes_through_stripped(self):
        assert normalize_authority("  Some Local Council ") == "Some Local Council"

    def test_empty(self):
        assert normalize_authority(None) == ""
        assert normalize_authority("") == ""

    def test_legacy_targets_are_registry_codes(self):
        codes = {record.code for record in AUTHORITY_REGISTRY}
        assert set(LEGACY_ALIASES.values()) <= codes

    def test_codes_unique_case_insensitively(self):
        codes = [record.code.lower() for record in AUTHORITY_REGISTRY]
        assert len(codes) == len(set(codes))


class TestAuthorityLookups:
    def test_resolve(self):
        record = resolve_authority("ESMA")
        assert record is not None
        assert record.name == "European Securities and Markets Authority"

    def test_resolve_unknown(self):
        assert resolve_authority("Nobody") is None

    def test_display_name(self):
        assert authority_display_name("FCA") == "FCA - Financial Conduct Authority"
        assert authority_display_name("HSBC") == "HSBC"
        assert authority_display_name("Nobody") == "Nobody"

    def test_tags(self):
        assert authority_tags("CONSOB") == ("Italy", "Europe")
        assert authority_tags("FATF") == ("International", "Global")
        assert authority_tags("Nobody") == (None, None)
