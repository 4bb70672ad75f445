"""SQLModel table exports."""

from .debt import Debt
from .funding import OneTimeFunding

__all__ = [
    "Debt",
    "OneTimeFunding",
]
