"""Baseline versus accelerated payoff comparison."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from ..logging_config import get_logger
from ..models.debt import Debt
from ..models.funding import OneTimeFunding
from .interest import ensure_precision
from .scenario import MAX_MONTHS, MonthlyPayment, ScenarioResult, calculate_scenario
from .strategies import Strategy

logger = get_logger(__name__)

DEFAULT_CURRENCY = "£"


@dataclass(frozen=True, slots=True)
class TimelineResult:
    """Differential metrics between the minimum-only and the strategy plan."""

    baseline_months: int
    accelerated_months: int
    baseline_interest: float
    accelerated_interest: float
    months_saved: int
    interest_saved: float
    payoff_date: date
    monthly_payments: list[MonthlyPayment] = field(default_factory=list)
    original_currency: str = DEFAULT_CURRENCY
    baseline: ScenarioResult | None = None
    accelerated: ScenarioResult | None = None

    @property
    def converged(self) -> bool:
        """False when either scenario stopped at the month cap with debt left."""

        return all(s.converged for s in (self.baseline, self.accelerated) if s is not None)


def total_minimum_payment(debts: Iterable[Debt]) -> float:
    """Sum of contractual minimum payments."""

    return ensure_precision(sum(d.minimum_payment for d in debts))


def calculate_timeline(
    debts: Sequence[Debt],
    monthly_payment: float,
    strategy: Strategy,
    one_time_fundings: Iterable[OneTimeFunding] = (),
    *,
    start_date: date | None = None,
    max_months: int = MAX_MONTHS,
    default_currency: str = DEFAULT_CURRENCY,
) -> TimelineResult:
    """Run the baseline and accelerated scenarios and compare them.

    The baseline keeps the input order, pays only the summed minimums and
    ignores fundings. The accelerated run uses ``strategy``'s ordering, the
    full ``monthly_payment`` and every funding. Savings are floored at zero.
    The reported currency is the first debt's, or ``default_currency`` when
    there are no debts.
    """

    start = start_date or date.today()
    debt_list = list(debts)
    fundings = list(one_time_fundings)

    logger.info(
        "Starting standardized calculation",
        extra={
            "total_debts": len(debt_list),
            "monthly_payment": monthly_payment,
            "strategy": getattr(strategy, "name", type(strategy).__name__),
            "one_time_fundings": len(fundings),
        },
    )

    baseline = calculate_scenario(
        list(debt_list),
        total_minimum_payment(debt_list),
        [],
        False,
        start_date=start,
        max_months=max_months,
    )
    accelerated = calculate_scenario(
        strategy.calculate(list(debt_list)),
        monthly_payment,
        fundings,
        True,
        start_date=start,
        max_months=max_months,
    )

    months_saved = max(0, baseline.months - accelerated.months)
    interest_saved = max(0.0, ensure_precision(baseline.total_interest - accelerated.total_interest))

    return TimelineResult(
        baseline_months=baseline.months,
        accelerated_months=accelerated.months,
        baseline_interest=ensure_precision(baseline.total_interest),
        accelerated_interest=ensure_precision(accelerated.total_interest),
        months_saved=months_saved,
        interest_saved=interest_saved,
        payoff_date=accelerated.final_payoff_date,
        monthly_payments=accelerated.payments,
        original_currency=debt_list[0].currency_symbol if debt_list else default_currency,
        baseline=baseline,
        accelerated=accelerated,
    )
