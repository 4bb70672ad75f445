"""Helpers for matching one-time fundings to simulated months."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from ..models.funding import OneTimeFunding
from .dates import coerce_date, same_month
from .interest import ensure_precision


def get_monthly_fundings(
    fundings: Iterable[OneTimeFunding], current: date
) -> list[OneTimeFunding]:
    """Return fundings whose payment date falls in ``current``'s month and year."""

    return [f for f in fundings if same_month(coerce_date(f.payment_date), current)]


def calculate_total_funding(fundings: Iterable[OneTimeFunding]) -> float:
    """Sum funding amounts."""

    return ensure_precision(sum(float(f.amount) for f in fundings))


def funding_for_month(fundings: Iterable[OneTimeFunding], current: date) -> float:
    """Total lump sum available in ``current``'s month."""

    return calculate_total_funding(get_monthly_fundings(fundings, current))


def sort_fundings_by_date(fundings: Iterable[OneTimeFunding]) -> list[OneTimeFunding]:
    """Return fundings ordered by payment date, earliest first."""

    return sorted(fundings, key=lambda f: coerce_date(f.payment_date))
