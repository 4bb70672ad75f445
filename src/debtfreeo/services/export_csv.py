"""CSV export helpers for payoff projections."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from typing import Iterable

from .amortization import AmortizationEntry
from .timeline import TimelineResult

SCHEDULE_HEADERS = [
    "date",
    "starting_balance",
    "payment",
    "principal",
    "interest",
    "funding",
    "ending_balance",
]

TIMELINE_HEADERS = [
    "month",
    "date",
    "baseline_balance",
    "accelerated_balance",
    "baseline_interest",
    "accelerated_interest",
    "funding",
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _write_rows(output_path: Path, headers: list[str], rows: Iterable[dict]) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=headers, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for row in rows:
            writer.writerow({k: _serialize_value(row.get(k)) for k in headers})
    return output_path


def export_schedule_csv(*, entries: Iterable[AmortizationEntry], output_path: Path) -> Path:
    """Write a single-debt schedule to ``output_path`` and return the path."""

    rows = (
        {
            "date": e.date,
            "starting_balance": e.starting_balance,
            "payment": e.payment,
            "principal": e.principal,
            "interest": e.interest,
            "funding": e.funding,
            "ending_balance": e.ending_balance,
        }
        for e in entries
    )
    return _write_rows(output_path, SCHEDULE_HEADERS, rows)


def export_timeline_csv(*, result: TimelineResult, output_path: Path) -> Path:
    """Write month-by-month baseline and accelerated totals side by side.

    Months past a scenario's payoff show a zero balance for that scenario.
    """

    baseline = result.baseline.timeline if result.baseline else []
    accelerated = result.accelerated.timeline if result.accelerated else []
    longest = baseline if len(baseline) >= len(accelerated) else accelerated

    rows = []
    for index, snapshot in enumerate(longest):
        base = baseline[index] if index < len(baseline) else None
        accel = accelerated[index] if index < len(accelerated) else None
        rows.append(
            {
                "month": snapshot.month,
                "date": snapshot.date,
                "baseline_balance": base.total_balance if base else 0.0,
                "accelerated_balance": accel.total_balance if accel else 0.0,
                "baseline_interest": base.interest if base else 0.0,
                "accelerated_interest": accel.interest if accel else 0.0,
                "funding": accel.funding if accel else 0.0,
            }
        )
    return _write_rows(output_path, TIMELINE_HEADERS, rows)
