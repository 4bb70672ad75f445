"""Apply a single month's payment to a single debt."""

from __future__ import annotations

from .interest import ensure_precision

PAID_OFF_EPSILON = 0.01


def process_monthly_payment(balance: float, payment: float, interest: float) -> float:
    """Return the new balance, floored at zero.

    Overpayment is not tracked here; callers clamp payments upstream when the
    excess matters.
    """

    return ensure_precision(max(0.0, balance + interest - payment))


def is_debt_paid_off(balance: float) -> bool:
    """A balance within one cent of zero counts as paid off."""

    return balance <= PAID_OFF_EPSILON
