"""Calendar helpers for month-by-month projections."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime


def add_months(value: date, months: int) -> date:
    """Return ``value`` shifted by ``months``, clamping the day to the month's length."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, monthrange(year, month)[1])
    return date(year, month, day)


def same_month(first: date, second: date) -> bool:
    """True when both dates fall in the same calendar month of the same year."""

    return first.year == second.year and first.month == second.month


def coerce_date(value: date | datetime | str) -> date:
    """Normalise ISO strings and datetimes to a plain ``date``."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value!r}") from exc
