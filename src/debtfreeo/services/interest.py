"""Interest and rounding primitives shared by every payoff calculation."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

TOTAL_INTEREST_MONTH_CAP = 600

# Significant digits needed to quantize any finite float to cents.
_DECIMAL_PRECISION = 340


def ensure_precision(value: float, precision: int = 2) -> float:
    """Round ``value`` half-up to ``precision`` decimal places.

    Called after every arithmetic step so float drift cannot compound across
    long simulations. Non-finite values are returned unchanged, so a balance
    that overflows never reads as paid off and the caller's month cap applies.
    """

    if not math.isfinite(value):
        return float(value)
    quantum = Decimal(1).scaleb(-precision)
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION + precision
        rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def calculate_monthly_interest(balance: float, annual_rate: float) -> float:
    """Return one month of interest on ``balance`` for an APR given in percent."""

    return ensure_precision(balance * annual_rate / 1200)


def calculate_remaining_balance(balance: float, payment: float, interest: float) -> float:
    """Return the balance after ``payment``; unpaid interest is capitalised."""

    if payment < interest:
        return ensure_precision(balance + (interest - payment))
    return ensure_precision(balance - (payment - interest))


def calculate_principal_from_total(
    total_amount: float,
    annual_rate: float,
    monthly_payment: float,
    term_months: int,
) -> float:
    """Back out the principal of a loan whose stated amount includes future interest.

    Solves the annuity present value ``PV = PMT * (1 - (1 + r) ** -n) / r``
    with ``r`` the monthly rate. Returns ``total_amount`` unchanged when the
    rate, term, or payment is not positive.
    """

    if annual_rate <= 0 or term_months <= 0 or monthly_payment <= 0:
        return total_amount

    monthly_rate = annual_rate / 1200
    present_value = monthly_payment * (1 - (1 + monthly_rate) ** -term_months) / monthly_rate
    return ensure_precision(present_value)


def calculate_total_interest(principal: float, annual_rate: float, monthly_payment: float) -> float:
    """Return the interest paid over the life of a single loan.

    Stops after 50 years; a payment that never covers interest therefore
    yields the interest accrued over that horizon.
    """

    if annual_rate == 0:
        return 0.0

    balance = principal
    total_interest = 0.0
    months = 0
    while balance > 0 and months < TOTAL_INTEREST_MONTH_CAP:
        interest = calculate_monthly_interest(balance, annual_rate)
        total_interest = ensure_precision(total_interest + interest)
        payment = min(monthly_payment, balance + interest)
        balance = ensure_precision(max(0.0, balance + interest - payment))
        months += 1

    return ensure_precision(total_interest)
