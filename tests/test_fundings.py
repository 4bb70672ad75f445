"""Tests for one-time funding month matching."""

from __future__ import annotations

from datetime import date

from debtfreeo.services.fundings import (
    calculate_total_funding,
    funding_for_month,
    get_monthly_fundings,
    sort_fundings_by_date,
)


def test_get_monthly_fundings_matches_month_and_year(funding_factory):
    march = funding_factory(amount=100.0, payment_date=date(2025, 3, 28))
    next_march = funding_factory(amount=200.0, payment_date=date(2026, 3, 1))
    april = funding_factory(amount=300.0, payment_date=date(2025, 4, 1))

    matched = get_monthly_fundings([march, next_march, april], date(2025, 3, 1))

    assert matched == [march]


def test_string_payment_dates_are_accepted(funding_factory):
    funding = funding_factory(amount=150.0, payment_date="2025-06-15T10:30:00")

    assert funding_for_month([funding], date(2025, 6, 1)) == 150.0
    assert funding_for_month([funding], date(2025, 7, 1)) == 0.0


def test_total_funding_is_rounded(funding_factory):
    fundings = [funding_factory(amount=0.1), funding_factory(amount=0.2)]

    assert calculate_total_funding(fundings) == 0.3
    assert calculate_total_funding([]) == 0.0


def test_sort_fundings_by_date(funding_factory):
    late = funding_factory(payment_date=date(2025, 9, 1))
    early = funding_factory(payment_date=date(2025, 2, 1))
    middle = funding_factory(payment_date=date(2025, 5, 1))

    assert sort_fundings_by_date([late, early, middle]) == [early, middle, late]
