"""Smoke-test reporting over adapter runs.

A source fails when it raised, timed out, returned something other than a
list, returned nothing, or returned items missing a title or link. It warns
when any optional field (date, summary, authority) is missing on some items.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from regwatch.ingestion.authority import authority_display_name
from regwatch.ingestion.normalize import CandidateRecord
from regwatch.runner import AdapterRun

PASS = "pass"
WARN = "warn"
FAIL = "fail"

REQUIRED_FIELDS = ("title", "link")
OPTIONAL_FIELDS = ("published_at", "summary", "authority")


@dataclass
class SourceReport:
    name: str
    status: str
    item_count: int = 0
    presence: dict[str, float] = field(default_factory=dict)
    sample: dict | None = None
    reason: str = ""
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status,
            "item_count": self.item_count,
            "presence": self.presence,
            "sample": self.sample,
            "reason": self.reason,
            "duration_seconds": round(self.duration_seconds, 2),
        }


def _present(record, field_name: str) -> bool:
    value = getattr(record, field_name, None)
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None


def presence_rates(records: list[CandidateRecord]) -> dict[str, float]:
    """Fraction of records carrying each required and optional field."""
    total = len(records)
    return {
        name: (sum(1 for r in records if _present(r, name)) / total if total else 0.0)
        for name in REQUIRED_FIELDS + OPTIONAL_FIELDS
    }


def evaluate_run(run: AdapterRun) -> SourceReport:
    report = SourceReport(name=run.name, status=FAIL, duration_seconds=run.duration_seconds)
    if run.timed_out:
        report.reason = run.error or "timed out"
        return report
    if run.error is not None:
        report.reason = run.error
        return report
    if not isinstance(run.records, list):
        report.reason = f"returned {type(run.records).__name__}, expected list"
        return report

    records = run.records
    report.item_count = len(records)
    if not records:
        report.reason = "returned no items"
        return report

    report.presence = presence_rates(records)
    first = records[0]
    report.sample = first.to_dict() if hasattr(first, "to_dict") else {"value": repr(first)}

    missing_required = [f for f in REQUIRED_FIELDS if report.presence[f] < 1.0]
    if missing_required:
        report.reason = f"missing required field(s): {', '.join(missing_required)}"
        return report

    missing_optional = [f for f in OPTIONAL_FIELDS if report.presence[f] < 1.0]
    if missing_optional:
        report.status = WARN
        report.reason = "incomplete optional field(s): " + ", ".join(
            f"{f} {report.presence[f]:.0%}" for f in missing_optional
        )
        return report

    report.status = PASS
    return report


def summary_counts(reports: list[SourceReport]) -> dict[str, int]:
    counts = {PASS: 0, WARN: 0, FAIL: 0}
    for report in reports:
        counts[report.status] += 1
    return counts


def exit_code(reports: list[SourceReport]) -> int:
    """0 when no source failed, 1 otherwise."""
    return 1 if any(r.status == FAIL for r in reports) else 0


def render_report(reports: list[SourceReport]) -> str:
    """Human-readable report: one row per source, then details."""
    name_width = max([len(r.name) for r in reports] + [6])
    lines = [
        f"{'SOURCE'.ljust(name_width)}  STATUS  ITEMS  DATE  SUMMARY  TIME",
        "-" * (name_width + 38),
    ]
    for r in reports:
        date_rate = f"{r.presence.get('published_at', 0.0):.0%}" if r.presence else "-"
        summary_rate = f"{r.presence.get('summary', 0.0):.0%}" if r.presence else "-"
        lines.append(
            f"{r.name.ljust(name_width)}  {r.status.upper():<6}  {r.item_count:>5}  "
            f"{date_rate:>4}  {summary_rate:>7}  {r.duration_seconds:5.1f}s"
        )

    counts = summary_counts(reports)
    lines.append("")
    lines.append(f"{counts[PASS]} passed, {counts[WARN]} warned, {counts[FAIL]} failed")

    failed = [r for r in reports if r.status == FAIL]
    if failed:
        lines.append("")
        lines.append("Failures:")
        lines.extend(f"  {r.name}: {r.reason}" for r in failed)
    warned = [r for r in reports if r.status == WARN]
    if warned:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"  {r.name}: {r.reason}" for r in warned)
    sampled = [r for r in reports if r.sample]
    if sampled:
        lines.append("")
        lines.append("Samples:")
        for r in sampled:
            authority = authority_display_name(r.sample.get("authority"))
            lines.append(f"  {r.name}: [{authority}] {r.sample.get('title')} <{r.sample.get('link')}>")
    return "\n".join(lines)
