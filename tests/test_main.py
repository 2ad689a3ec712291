"""Tests for regwatch.main — the smoke-test command."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from regwatch.ingestion.normalize import CandidateRecord
from regwatch.main import main
from regwatch.runner import AdapterRun

RECORD = CandidateRecord(
    title="FCA fines firm",
    link="https://www.fca.org.uk/news/1",
    authority="FCA",
    summary="The FCA has fined a firm.",
    published_at=datetime(2025, 6, 1, tzinfo=timezone.utc),
)


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    monkeypatch.setattr("regwatch.config.load_dotenv", lambda *a, **kw: None)
    monkeypatch.setattr("regwatch.main._setup_logging", lambda *a, **kw: None)
    monkeypatch.setenv("SOURCES_CONFIG_PATH", str(tmp_path / "sources.json"))
    monkeypatch.setenv("SMOKE_TIMEOUT_MS", "45000")
    monkeypatch.setenv("SMOKE_DELAY_MS", "0")


def test_json_report(capsys):
    with patch("regwatch.main.run_adapters", return_value=[AdapterRun(name="fca", records=[RECORD])]) as mock_run:
        code = main(["--source", "fca", "--json"])
    assert code == 0
    adapters = mock_run.call_args.args[0]
    assert [a.name for a in adapters] == ["fca"]
    assert mock_run.call_args.kwargs["default_timeout"] == 45.0
    data = json.loads(capsys.readouterr().out)
    assert data[0]["name"] == "fca"
    assert data[0]["status"] == "pass"


def test_failure_sets_exit_code(capsys):
    runs = [
        AdapterRun(name="fca", records=[RECORD]),
        AdapterRun(name="fatf", timed_out=True, error="timed out after 45s"),
    ]
    with patch("regwatch.main.run_adapters", return_value=runs):
        code = main(["--source", "fca", "--source", "fatf"])
    assert code == 1
    out = capsys.readouterr().out
    assert "1 passed, 0 warned, 1 failed" in out


def test_unknown_source():
    with patch("regwatch.main.run_adapters") as mock_run:
        assert main(["--source", "nope"]) == 2
    mock_run.assert_not_called()


def test_list_sources(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out.split()
    assert "fca" in out
    assert "bank:hsbc" in out
