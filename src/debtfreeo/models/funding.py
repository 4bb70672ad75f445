"""One-time lump-sum payments scheduled against the debt plan."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class OneTimeFunding(SQLModel, table=True):
    """A lump sum added to the payment budget in the month of ``payment_date``."""

    __tablename__: ClassVar[str] = "one_time_funding"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[str] = Field(default=None, index=True)
    amount: float = Field(nullable=False)
    payment_date: date = Field(nullable=False, index=True)
    notes: Optional[str] = Field(default=None, max_length=255)
    is_applied: bool = Field(default=False)
    currency_symbol: Optional[str] = Field(default=None, max_length=8)
