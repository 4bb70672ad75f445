"""Single-debt amortization schedules and payoff utilities.

These back the per-debt detail views. They share the interest and payment
primitives with the multi-debt scenario simulator, so a single debt
projected here and in :mod:`debtfreeo.services.scenario` produces the same
month-by-month figures.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable

from ..logging_config import get_logger
from ..models.debt import Debt
from ..models.funding import OneTimeFunding
from .dates import add_months, same_month
from .fundings import funding_for_month
from .interest import (
    calculate_monthly_interest,
    calculate_principal_from_total,
    calculate_remaining_balance,
    ensure_precision,
)
from .payments import PAID_OFF_EPSILON, is_debt_paid_off
from .scenario import MAX_MONTHS

logger = get_logger(__name__)


class GoldLoanConfigurationError(ValueError):
    """Raised when a gold loan lacks the term or maturity date it needs."""


@dataclass(frozen=True, slots=True)
class AmortizationEntry:
    """One row of a per-debt payment schedule."""

    date: date
    starting_balance: float
    payment: float
    principal: float
    interest: float
    ending_balance: float
    funding: float = 0.0

    @property
    def remaining_balance(self) -> float:
        return self.ending_balance

    @property
    def is_last_payment(self) -> bool:
        return self.ending_balance == 0


@dataclass(frozen=True, slots=True)
class PayoffDetails:
    """Months, interest, and date at which one debt is cleared."""

    months: int
    total_interest: float
    payoff_date: date
    converged: bool = True


@dataclass(frozen=True, slots=True)
class PayoffProgress:
    """Closed-form payoff estimate used for debt cards."""

    months: int
    formatted_time: str
    progress_percentage: float


def validate_gold_loan(debt: Debt) -> None:
    """Raise :class:`GoldLoanConfigurationError` for an incomplete gold loan."""

    if not debt.is_gold_loan:
        return
    if not debt.loan_term_months or debt.loan_term_months <= 0:
        raise GoldLoanConfigurationError(
            f"Gold loan {debt.id!r} requires a positive loan_term_months."
        )
    if debt.final_payment_date is None:
        raise GoldLoanConfigurationError(f"Gold loan {debt.id!r} requires a final_payment_date.")


def resolve_effective_principal(debt: Debt) -> tuple[float, float]:
    """Return ``(principal, annual_rate)`` to amortize ``debt`` with.

    Debts entered as "total I'll owe" (``interest_included``) have their true
    principal backed out with the annuity formula first.
    """

    if debt.interest_included and debt.remaining_months:
        rate = debt.original_rate or debt.interest_rate
        principal = calculate_principal_from_total(
            debt.balance, rate, debt.minimum_payment, debt.remaining_months
        )
        logger.debug(
            "Back-calculated principal for included-interest debt",
            extra={"debt_id": debt.id, "total": debt.balance, "principal": principal},
        )
        return principal, rate
    return ensure_precision(debt.balance), debt.interest_rate


def _gold_loan_schedule(
    debt: Debt,
    maturity: date,
    fundings: list[OneTimeFunding],
    start: date,
    max_months: int,
) -> list[AmortizationEntry]:
    """Interest-only rows until the maturity month, then a balloon payment.

    Fundings reduce principal in any month, which lowers later interest.
    """

    balance = ensure_precision(debt.balance)
    schedule: list[AmortizationEntry] = []

    for month in range(max_months):
        if is_debt_paid_off(balance):
            break
        row_date = add_months(start, month)
        interest = calculate_monthly_interest(balance, debt.interest_rate)
        funding = funding_for_month(fundings, row_date)

        if same_month(row_date, maturity) or row_date > maturity:
            principal = balance
        else:
            principal = ensure_precision(min(funding, balance))

        ending = ensure_precision(balance - principal)
        if is_debt_paid_off(ending):
            ending = 0.0
        schedule.append(
            AmortizationEntry(
                date=row_date,
                starting_balance=balance,
                payment=ensure_precision(interest + principal),
                principal=principal,
                interest=interest,
                ending_balance=ending,
                funding=funding,
            )
        )
        balance = ending

    return schedule


def _settle_stated_total(
    schedule: list[AmortizationEntry], stated_total: float
) -> AmortizationEntry:
    """Fold cent-rounding drift into the final row of an included-interest schedule.

    Backing out the principal and rounding interest every month leaves the
    payments a few cents off the stated total; the last row absorbs the
    difference as interest. Larger gaps mean the stated total, payment and
    term disagree, and are left alone.
    """

    last = schedule[-1]
    paid = ensure_precision(sum(row.payment for row in schedule))
    residual = ensure_precision(stated_total - paid)
    if residual == 0 or abs(residual) > PAID_OFF_EPSILON * len(schedule):
        return last
    interest = ensure_precision(last.interest + residual)
    if interest < 0:
        return last
    return replace(last, payment=ensure_precision(last.payment + residual), interest=interest)


def calculate_amortization_schedule(
    debt: Debt,
    monthly_payment: float | None = None,
    one_time_fundings: Iterable[OneTimeFunding] = (),
    *,
    start_date: date | None = None,
    max_months: int = MAX_MONTHS,
) -> list[AmortizationEntry]:
    """Build the full payment schedule for one debt.

    ``monthly_payment`` defaults to the debt's minimum. One-time fundings are
    paid as extra principal in their month. Gold loans are validated and use
    the interest-only schedule; included-interest debts are amortized from
    their backed-out principal. Rows stop once the balance reaches zero or
    after ``max_months``.
    """

    fundings = list(one_time_fundings)
    start = start_date or debt.next_payment_date or date.today()

    if debt.is_gold_loan:
        validate_gold_loan(debt)
        return _gold_loan_schedule(debt, debt.final_payment_date, fundings, start, max_months)

    payment_amount = debt.minimum_payment if monthly_payment is None else monthly_payment
    balance, rate = resolve_effective_principal(debt)
    schedule: list[AmortizationEntry] = []

    for month in range(max_months):
        if is_debt_paid_off(balance):
            break
        row_date = add_months(start, month)
        interest = calculate_monthly_interest(balance, rate)
        funding = funding_for_month(fundings, row_date)
        payment = ensure_precision(min(payment_amount + funding, balance + interest))
        principal = ensure_precision(payment - interest)
        ending = max(0.0, calculate_remaining_balance(balance, payment, interest))
        if is_debt_paid_off(ending):
            ending = 0.0

        schedule.append(
            AmortizationEntry(
                date=row_date,
                starting_balance=balance,
                payment=payment,
                principal=principal,
                interest=interest,
                ending_balance=ending,
                funding=funding,
            )
        )
        balance = ending

    if (
        debt.interest_included
        and debt.remaining_months
        and payment_amount == debt.minimum_payment
        and schedule
        and schedule[-1].ending_balance == 0
        and not any(row.funding for row in schedule)
    ):
        schedule[-1] = _settle_stated_total(schedule, debt.balance)

    return schedule


def calculate_single_debt_payoff(
    debt: Debt,
    monthly_payment: float,
    *,
    start_date: date | None = None,
) -> PayoffDetails:
    """Months and interest to clear one debt paying ``monthly_payment`` a month."""

    start = start_date or date.today()

    if debt.interest_included and debt.remaining_months:
        principal, _ = resolve_effective_principal(debt)
        return PayoffDetails(
            months=debt.remaining_months,
            total_interest=ensure_precision(debt.balance - principal),
            payoff_date=add_months(start, debt.remaining_months),
        )

    schedule = calculate_amortization_schedule(debt, monthly_payment, start_date=start)
    months = len(schedule)
    converged = not schedule or schedule[-1].ending_balance == 0
    return PayoffDetails(
        months=months,
        total_interest=ensure_precision(sum(row.interest for row in schedule)),
        payoff_date=add_months(start, months),
        converged=converged,
    )


def calculate_payoff_time(
    debt: Debt, monthly_payment: float, *, today: date | None = None
) -> float:
    """Months to clear ``debt``; ``math.inf`` when the payment never gets there.

    Gold loans are cleared at maturity regardless of the payment.
    """

    if monthly_payment <= 0:
        return math.inf

    if debt.is_gold_loan and debt.final_payment_date is not None:
        current = today or date.today()
        maturity = debt.final_payment_date
        months_diff = (maturity.year - current.year) * 12 + (maturity.month - current.month)
        return max(0, months_diff)

    balance = debt.balance
    months = 0
    while not is_debt_paid_off(balance) and months < MAX_MONTHS:
        interest = calculate_monthly_interest(balance, debt.interest_rate)
        if monthly_payment <= interest:
            logger.debug(
                "Payment cannot cover monthly interest",
                extra={"debt_id": debt.id, "payment": monthly_payment, "interest": interest},
            )
            return math.inf
        principal = min(monthly_payment - interest, balance)
        balance = ensure_precision(max(0.0, balance - principal))
        months += 1

    return math.inf if months >= MAX_MONTHS else months


def format_payoff_time(months: int) -> str:
    """Render a month count as e.g. ``"2 years and 3 months"``."""

    years, remaining = divmod(months, 12)
    month_text = f"{remaining} month{'s' if remaining != 1 else ''}"
    if years == 0:
        return month_text
    return f"{years} year{'s' if years != 1 else ''} and {month_text}"


def calculate_payoff_details(debt: Debt, total_paid: float) -> PayoffProgress:
    """Closed-form months-to-payoff plus progress given ``total_paid`` so far."""

    never = PayoffProgress(months=0, formatted_time="Never", progress_percentage=0.0)
    effective_balance = debt.balance

    if debt.interest_included:
        if debt.minimum_payment <= 0:
            return never
        months = math.ceil(debt.balance / debt.minimum_payment)
        rate = debt.original_rate or debt.interest_rate
        principal = calculate_principal_from_total(
            debt.balance, rate, debt.minimum_payment, debt.remaining_months or months
        )
        effective_balance = principal if principal > 0 else debt.balance
    elif debt.interest_rate == 0:
        if debt.minimum_payment <= 0:
            return never
        months = math.ceil(debt.balance / debt.minimum_payment)
    else:
        monthly_rate = debt.interest_rate / 1200
        payment = debt.minimum_payment
        if payment <= debt.balance * monthly_rate:
            return never
        months = math.ceil(
            math.log(payment / (payment - debt.balance * monthly_rate)) / math.log(1 + monthly_rate)
        )

    original_balance = effective_balance + total_paid
    progress = (total_paid / original_balance) * 100 if original_balance > 0 else 0.0
    return PayoffProgress(
        months=months,
        formatted_time=format_payoff_time(months),
        progress_percentage=ensure_precision(progress, 1),
    )


def is_debt_payable(debt: Debt) -> bool:
    """True when the minimum payment outpaces the first month's interest."""

    if debt.interest_rate == 0:
        return debt.minimum_payment > 0
    return debt.minimum_payment > calculate_monthly_interest(debt.balance, debt.interest_rate)


def get_minimum_viable_payment(debt: Debt) -> float:
    """Smallest whole payment that reduces principal every month."""

    if debt.interest_rate == 0:
        return max(debt.minimum_payment, 1.0)
    interest = calculate_monthly_interest(debt.balance, debt.interest_rate)
    return float(math.ceil(interest + 1))
