"""Pytest configuration and shared fixtures for Debtfreeo tests.

Provides debt/funding factories, a fixed simulation start date, an isolated
SQLite engine for model tests, and float comparison helpers.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from debtfreeo.models import Debt, OneTimeFunding

# Every simulation in the suite starts here so funding months are deterministic.
START = date(2025, 1, 1)


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Point DEBTFREEO_DATA_DIR at a per-test directory so logs stay out of the repo."""

    data_dir = tmp_path / "data"
    monkeypatch.setenv("DEBTFREEO_DATA_DIR", str(data_dir))
    monkeypatch.delenv("DEBTFREEO_MAX_MONTHS", raising=False)
    monkeypatch.delenv("DEBTFREEO_CURRENCY", raising=False)
    return data_dir


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database with the debt tables.

    Yields:
        Engine: SQLModel engine connected to a throwaway database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def debt_factory():
    """Build :class:`Debt` rows with sensible defaults.

    Example:
        debt = debt_factory(balance=1200, interest_rate=12, minimum_payment=110)
    """
    counter = {"n": 0}

    def factory(**overrides) -> Debt:
        counter["n"] += 1
        values = {
            "id": f"debt-{counter['n']}",
            "name": f"Debt {counter['n']}",
            "balance": 1000.0,
            "interest_rate": 12.0,
            "minimum_payment": 50.0,
            "currency_symbol": "£",
        }
        values.update(overrides)
        return Debt(**values)

    return factory


@pytest.fixture
def funding_factory():
    """Build :class:`OneTimeFunding` rows dated in the first simulated month by default."""

    def factory(amount: float = 500.0, payment_date: date = START, **overrides) -> OneTimeFunding:
        return OneTimeFunding(amount=amount, payment_date=payment_date, **overrides)

    return factory


@pytest.fixture
def reset_package_logger():
    """Detach handlers added by setup_logging so tests do not leak streams."""

    yield
    logger = logging.getLogger("debtfreeo")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Helpers
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two money amounts are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) <= tolerance
    ), f"Expected {expected}, got {actual} (difference: {abs(actual - expected)})"
