"""Debt entities consumed by the payoff engine."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Debt(SQLModel, table=True):
    """Installment, revolving, or gold-loan debt tracked in Debtfreeo.

    The payoff engine only reads these attributes; rows are supplied by the
    persistence layer and never mutated during a simulation.
    """

    __tablename__: ClassVar[str] = "debt"

    id: str = Field(primary_key=True, max_length=64)
    user_id: Optional[str] = Field(default=None, index=True)
    name: str = Field(default="", max_length=120)
    banker_name: str = Field(default="", max_length=120)
    balance: float = Field(default=0.0, nullable=False)
    interest_rate: float = Field(default=0.0, nullable=False)  # APR in percent
    minimum_payment: float = Field(default=0.0, nullable=False)
    currency_symbol: str = Field(default="£", max_length=8)
    next_payment_date: Optional[date] = Field(default=None)
    category: Optional[str] = Field(default=None, max_length=64)
    status: str = Field(default="active", max_length=16)

    # Gold loans pay interest only until a single balloon payment at maturity.
    is_gold_loan: bool = Field(default=False)
    loan_term_months: Optional[int] = Field(default=None)
    final_payment_date: Optional[date] = Field(default=None)

    # When set, ``balance`` is the total still owed including future interest.
    interest_included: bool = Field(default=False)
    remaining_months: Optional[int] = Field(default=None)
    original_rate: Optional[float] = Field(default=None)
