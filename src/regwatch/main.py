"""Smoke-test entry point. Runs every configured source once and reports."""

from __future__ import annotations

import argparse
import json
import logging
import sys

import regwatch.ingestion  # noqa: F401  registers adapters
from regwatch.config import load_config, load_source_overrides
from regwatch.ingestion.registry import build_adapters, registered_types
from regwatch.runner import run_adapters
from regwatch.smoke import evaluate_run, exit_code, render_report

logger = logging.getLogger("regwatch")


def _setup_logging(log_level: str, log_format: str) -> None:
    """Configure root logger based on config."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps(
                {
                    "time": "%(asctime)s",
                    "level": "%(levelname)s",
                    "logger": "%(name)s",
                    "message": "%(message)s",
                }
            )
        )
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="regwatch-smoke",
        description="Run each source adapter once and report which ones work.",
    )
    parser.add_argument(
        "--source",
        action="append",
        dest="sources",
        metavar="NAME",
        help="Only run this source (repeatable). Defaults to all registered sources.",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    parser.add_argument("--list", action="store_true", help="List registered sources and exit.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the smoke harness. Returns the process exit code."""
    args = _parse_args(argv)
    if args.list:
        print("\n".join(registered_types()))
        return 0

    config = load_config()
    _setup_logging(config.log_level, config.log_format)

    overrides = load_source_overrides(config.sources_config_path)
    try:
        adapters = build_adapters(config.fetch_settings(), names=args.sources, overrides=overrides)
    except KeyError as exc:
        logger.error("%s", exc.args[0])
        return 2

    logger.info("Smoke-testing %d sources", len(adapters))
    runs = run_adapters(
        adapters,
        default_timeout=config.adapter_timeout_ms / 1000,
        delay_seconds=config.adapter_delay_ms / 1000,
    )
    reports = [evaluate_run(run) for run in runs]

    if args.json:
        print(json.dumps([r.to_dict() for r in reports], indent=2))
    else:
        print(render_report(reports))
    return exit_code(reports)


if __name__ == "__main__":
    sys.exit(main())
