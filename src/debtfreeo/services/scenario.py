"""Month-by-month simulation of one payoff scenario across many debts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from ..logging_config import get_logger
from ..models.debt import Debt
from ..models.funding import OneTimeFunding
from .dates import add_months
from .fundings import funding_for_month
from .interest import calculate_monthly_interest, calculate_remaining_balance, ensure_precision
from .payments import is_debt_paid_off, process_monthly_payment

logger = get_logger(__name__)

# 100 years; guards against budgets that never cover the interest.
MAX_MONTHS = 1200


@dataclass(frozen=True, slots=True)
class MonthlyPayment:
    """Amount paid toward one debt in the first simulated month."""

    debt_id: str
    amount: float


@dataclass(frozen=True, slots=True)
class MonthSnapshot:
    """State of every open debt at the end of one simulated month."""

    month: int
    date: date
    balances: dict[str, float]
    payments: dict[str, float]
    interest: float
    principal: float
    funding: float = 0.0
    paid_off: tuple[str, ...] = ()

    @property
    def total_balance(self) -> float:
        return ensure_precision(sum(self.balances.values()))

    @property
    def total_payment(self) -> float:
        return ensure_precision(sum(self.payments.values()))


@dataclass(frozen=True, slots=True)
class ScenarioResult:
    """Outcome of a single scenario run."""

    months: int
    total_interest: float
    final_payoff_date: date
    payments: list[MonthlyPayment] = field(default_factory=list)
    converged: bool = True
    timeline: list[MonthSnapshot] = field(default_factory=list)


def calculate_scenario(
    debts: Sequence[Debt],
    monthly_payment: float,
    one_time_fundings: Iterable[OneTimeFunding],
    is_accelerated: bool,
    *,
    start_date: date | None = None,
    max_months: int = MAX_MONTHS,
) -> ScenarioResult:
    """Simulate paying ``debts`` down with a flat ``monthly_payment`` budget.

    ``debts`` must already be in priority order; the extra-payment pass always
    targets the first debt still open. The baseline scenario
    (``is_accelerated=False``) pays minimums only and ignores fundings.

    A debt whose minimum cannot be covered is skipped for the month and its
    interest is capitalised. When the loop hits ``max_months`` with debts
    still open the result is returned with ``converged=False``.
    """

    if max_months <= 0:
        raise ValueError("max_months must be positive.")

    start = start_date or date.today()
    fundings = list(one_time_fundings) if is_accelerated else []
    balances: dict[str, float] = {d.id: ensure_precision(d.balance) for d in debts}
    remaining: list[Debt] = list(debts)
    current_month = 0
    total_interest = 0.0
    released_payments = 0.0
    first_month_payments: dict[str, float] = {}
    timeline: list[MonthSnapshot] = []

    while remaining and current_month < max_months:
        current_date = add_months(start, current_month)
        available = ensure_precision(monthly_payment + released_payments)
        released_payments = 0.0

        funding = 0.0
        if is_accelerated and fundings:
            funding = funding_for_month(fundings, current_date)
            available = ensure_precision(available + funding)

        opening_total = sum(balances[d.id] for d in remaining)
        month_interest = 0.0
        month_payments: dict[str, float] = {}

        # Minimum payments, in priority order.
        for debt in remaining:
            balance = balances[debt.id]
            interest = calculate_monthly_interest(balance, debt.interest_rate)
            total_interest = ensure_precision(total_interest + interest)
            month_interest = ensure_precision(month_interest + interest)

            min_payment = ensure_precision(min(debt.minimum_payment, balance + interest))
            if available >= min_payment:
                balances[debt.id] = process_monthly_payment(balance, min_payment, interest)
                available = ensure_precision(available - min_payment)
                month_payments[debt.id] = min_payment
            else:
                balances[debt.id] = calculate_remaining_balance(balance, 0.0, interest)
                logger.debug(
                    "Minimum payment skipped",
                    extra={"debt_id": debt.id, "month": current_month + 1, "available": available},
                )

        # Whatever is left goes to the highest-priority open debt.
        if is_accelerated and available > 0 and remaining:
            target = remaining[0]
            balance = balances[target.id]
            extra = min(available, balance)
            if extra > 0:
                balances[target.id] = ensure_precision(max(0.0, balance - extra))
                month_payments[target.id] = ensure_precision(
                    month_payments.get(target.id, 0.0) + extra
                )
                available = ensure_precision(available - extra)

        # Paid-off debts free their minimum for next month's budget.
        paid_off: list[str] = []
        still_open: list[Debt] = []
        for debt in remaining:
            if is_debt_paid_off(balances[debt.id]):
                balances[debt.id] = 0.0
                released_payments = ensure_precision(released_payments + debt.minimum_payment)
                paid_off.append(debt.id)
            else:
                still_open.append(debt)

        closing_total = sum(balances[d.id] for d in remaining)
        timeline.append(
            MonthSnapshot(
                month=current_month + 1,
                date=current_date,
                balances={d.id: balances[d.id] for d in remaining},
                payments=month_payments,
                interest=month_interest,
                principal=ensure_precision(opening_total - closing_total),
                funding=funding,
                paid_off=tuple(paid_off),
            )
        )
        if current_month == 0:
            first_month_payments = dict(month_payments)
        if paid_off:
            logger.debug(
                "Debts paid off",
                extra={
                    "month": current_month + 1,
                    "debt_ids": paid_off,
                    "released": released_payments,
                },
            )

        remaining = still_open
        current_month += 1

    converged = not remaining
    if not converged:
        logger.warning(
            "Scenario did not converge",
            extra={
                "max_months": max_months,
                "open_debts": [d.id for d in remaining],
                "accelerated": is_accelerated,
            },
        )

    return ScenarioResult(
        months=current_month,
        total_interest=ensure_precision(total_interest),
        final_payoff_date=add_months(start, current_month),
        payments=[MonthlyPayment(debt_id=k, amount=v) for k, v in first_month_payments.items()],
        converged=converged,
        timeline=timeline,
    )
