"""CSV ingestion of debts and one-time fundings."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Callable, Iterable, Mapping, TypeVar

import pandas as pd

from ..models.debt import Debt
from ..models.funding import OneTimeFunding
from .dates import coerce_date

T = TypeVar("T")

DEBT_REQUIRED_COLUMNS = ("id", "balance", "interest_rate", "minimum_payment")
FUNDING_REQUIRED_COLUMNS = ("amount", "payment_date")

DEFAULT_CURRENCY = "£"

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}


class DebtImportError(ValueError):
    """Raised when an input file cannot be turned into debts or fundings."""


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file as strings with stripped, lower-cased headers."""

    try:
        frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DebtImportError(f"Could not read {file_path}: {exc}") from exc
    frame.columns = [c.strip().lower() for c in frame.columns]
    return frame


def _require_columns(frame: pd.DataFrame, required: Iterable[str], file_path: Path) -> None:
    missing = [c for c in required if c not in frame.columns]
    if missing:
        raise DebtImportError(f"{file_path} is missing required columns: {', '.join(missing)}")


def _text(row: Mapping[str, str], key: str) -> str | None:
    value = row.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _optional(row: Mapping[str, str], key: str, convert: Callable[[str], T]) -> T | None:
    value = _text(row, key)
    if value is None:
        return None
    try:
        return convert(value)
    except ValueError as exc:
        raise DebtImportError(f"Invalid {key}: {value!r}") from exc


def _number(row: Mapping[str, str], key: str, *, default: float | None = None) -> float:
    value = _optional(row, key, _finite)
    if value is None:
        if default is None:
            raise DebtImportError(f"Missing value for {key}")
        return default
    return value


def _finite(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(value)
    return number


def _flag(row: Mapping[str, str], key: str) -> bool:
    value = _text(row, key)
    return value is not None and value.lower() in _TRUE_VALUES


def parse_debt_rows(
    rows: Iterable[Mapping[str, str]], *, default_currency: str = DEFAULT_CURRENCY
) -> list[Debt]:
    """Convert dict-like rows into :class:`Debt` models, rejecting invalid amounts.

    Rows without a ``currency_symbol`` get ``default_currency``.
    """

    debts: list[Debt] = []
    for row in rows:
        debt_id = _text(row, "id")
        if debt_id is None:
            raise DebtImportError("Every debt row needs an id")
        balance = _number(row, "balance")
        rate = _number(row, "interest_rate")
        minimum = _number(row, "minimum_payment", default=0.0)
        if balance < 0 or rate < 0 or minimum < 0:
            raise DebtImportError(f"Debt {debt_id!r} has a negative balance, rate, or payment")

        debts.append(
            Debt(
                id=debt_id,
                user_id=_text(row, "user_id"),
                name=_text(row, "name") or debt_id,
                banker_name=_text(row, "banker_name") or "",
                balance=balance,
                interest_rate=rate,
                minimum_payment=minimum,
                currency_symbol=_text(row, "currency_symbol") or default_currency,
                next_payment_date=_optional(row, "next_payment_date", coerce_date),
                category=_text(row, "category"),
                status=_text(row, "status") or "active",
                is_gold_loan=_flag(row, "is_gold_loan"),
                loan_term_months=_optional(row, "loan_term_months", int),
                final_payment_date=_optional(row, "final_payment_date", coerce_date),
                interest_included=_flag(row, "interest_included"),
                remaining_months=_optional(row, "remaining_months", int),
                original_rate=_optional(row, "original_rate", _finite),
            )
        )
    return debts


def parse_funding_rows(rows: Iterable[Mapping[str, str]]) -> list[OneTimeFunding]:
    """Convert dict-like rows into :class:`OneTimeFunding` models."""

    fundings: list[OneTimeFunding] = []
    for row in rows:
        amount = _number(row, "amount")
        if amount <= 0:
            raise DebtImportError(f"Funding amount must be positive, got {amount}")
        payment_date = _optional(row, "payment_date", coerce_date)
        if payment_date is None:
            raise DebtImportError("Every funding row needs a payment_date")
        fundings.append(
            OneTimeFunding(
                id=_optional(row, "id", int),
                user_id=_text(row, "user_id"),
                amount=amount,
                payment_date=payment_date,
                notes=_text(row, "notes"),
                is_applied=_flag(row, "is_applied"),
                currency_symbol=_text(row, "currency_symbol"),
            )
        )
    return fundings


def _frame_rows(frame: pd.DataFrame) -> list[dict[str, str]]:
    return [{c: r[c] for c in frame.columns} for _, r in frame.iterrows()]


def load_debts_csv(file_path: Path, *, default_currency: str = DEFAULT_CURRENCY) -> list[Debt]:
    """Read debts from a CSV file with at least id, balance, interest_rate, minimum_payment."""

    frame = normalize_frame(file_path=file_path)
    _require_columns(frame, DEBT_REQUIRED_COLUMNS, file_path)
    return parse_debt_rows(_frame_rows(frame), default_currency=default_currency)


def load_fundings_csv(file_path: Path) -> list[OneTimeFunding]:
    """Read one-time fundings from a CSV file with amount and payment_date columns."""

    frame = normalize_frame(file_path=file_path)
    _require_columns(frame, FUNDING_REQUIRED_COLUMNS, file_path)
    return parse_funding_rows(_frame_rows(frame))
