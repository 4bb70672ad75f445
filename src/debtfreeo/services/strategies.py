"""Debt prioritisation strategies (snowball, avalanche, balance ratio)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Protocol

from ..models.debt import Debt

SortKey = Callable[[Debt], float]


class Strategy(Protocol):
    """Reorders debts by priority for extra-payment allocation."""

    id: str
    name: str
    description: str

    def calculate(self, debts: Iterable[Debt]) -> list[Debt]:  # pragma: no cover - interface
        ...


@dataclass(frozen=True, slots=True)
class SortStrategy:
    """Strategy defined by one sort key for gold loans and one for regular loans.

    Gold loans always come first; each group is ordered by its own key with a
    stable sort, so ties keep their input order.
    """

    id: str
    name: str
    description: str
    regular_key: SortKey
    gold_key: SortKey | None = None

    def calculate(self, debts: Iterable[Debt]) -> list[Debt]:
        debt_list = list(debts)
        gold_loans = [d for d in debt_list if d.is_gold_loan]
        regular_loans = [d for d in debt_list if not d.is_gold_loan]
        gold_key = self.gold_key or self.regular_key
        return sorted(gold_loans, key=gold_key) + sorted(regular_loans, key=self.regular_key)


def _highest_rate(debt: Debt) -> float:
    return -debt.interest_rate


def _smallest_balance(debt: Debt) -> float:
    return debt.balance


def _rate_to_balance(debt: Debt) -> float:
    if debt.balance <= 0:
        return float("-inf")
    return -(debt.interest_rate / debt.balance)


def _gold_loan_pressure(debt: Debt) -> float:
    # rate weighted by how many minimum payments the balance represents
    if debt.minimum_payment <= 0:
        return float("-inf")
    return -(debt.interest_rate * (debt.balance / debt.minimum_payment))


AVALANCHE = SortStrategy(
    id="avalanche",
    name="Avalanche Method",
    description="Pay off debts with highest interest rate first",
    regular_key=_highest_rate,
)

SNOWBALL = SortStrategy(
    id="snowball",
    name="Snowball Method",
    description="Pay off smallest debts first",
    regular_key=_smallest_balance,
)

BALANCE_RATIO = SortStrategy(
    id="balance-ratio",
    name="Balance Ratio",
    description="Balance between interest rate and debt size",
    regular_key=_rate_to_balance,
    gold_key=_gold_loan_pressure,
)

STRATEGIES: dict[str, SortStrategy] = {
    strategy.id: strategy for strategy in (AVALANCHE, SNOWBALL, BALANCE_RATIO)
}


def get_strategy(strategy_id: str) -> SortStrategy:
    """Return the registered strategy for ``strategy_id``."""

    try:
        return STRATEGIES[strategy_id.strip().lower()]
    except KeyError:
        raise ValueError("Invalid debt payoff strategy.") from None
