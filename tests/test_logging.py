"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from debtfreeo.config import TestConfig
from debtfreeo.logging_config import JSONFormatter, get_logger, setup_logging
from debtfreeo.services.scenario import calculate_scenario
from tests.conftest import START

pytestmark = pytest.mark.usefixtures("reset_package_logger")


def _record(**kwargs) -> logging.LogRecord:
    values = {
        "name": "test.logger",
        "level": logging.INFO,
        "pathname": "test.py",
        "lineno": 42,
        "msg": "Test message",
        "args": (),
        "exc_info": None,
    }
    values.update(kwargs)
    record = logging.LogRecord(**values)
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def _read_entries(log_file):
    return [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]


def test_json_formatter():
    """JSONFormatter emits the core record fields."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    """JSONFormatter serialises exception details."""
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info))
    )

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_with_extra_fields():
    """Fields passed through ``extra`` land under an ``extra`` key."""
    record = _record()
    record.debt_id = "card"
    record.month = 3

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"debt_id": "card", "month": 3}


def test_setup_logging(tmp_path):
    """setup_logging writes JSON lines to a rotating file under DATA_DIR/logs."""
    config = TestConfig(data_dir=tmp_path)

    logger = setup_logging(config)

    assert logger.name == "debtfreeo"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "debtfreeo.log"
    assert log_file.exists()

    logger.warning("Test warning message")
    for handler in logger.handlers:
        handler.flush()

    entries = _read_entries(log_file)
    assert entries[0]["message"] == "Logging initialized"
    assert entries[0]["extra"]["max_months"] == config.MAX_MONTHS
    assert entries[-1]["message"] == "Test warning message"
    assert entries[-1]["level"] == "WARNING"


def test_setup_logging_is_idempotent(tmp_path):
    """Repeated setup replaces handlers instead of stacking them."""
    config = TestConfig(data_dir=tmp_path)

    setup_logging(config)
    logger = setup_logging(config, level=logging.DEBUG)

    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG


def test_get_logger():
    """Module loggers nest under the package logger."""
    assert get_logger("services.scenario").name == "debtfreeo.services.scenario"
    assert get_logger("debtfreeo.cli").name == "debtfreeo.cli"
    assert get_logger("debtfreeo").name == "debtfreeo"


def test_unconverged_scenario_logs_warning(tmp_path, debt_factory):
    """Hitting the month cap is recorded in the structured log."""
    logger = setup_logging(TestConfig(data_dir=tmp_path))
    debt = debt_factory(id="big", balance=10000.0, interest_rate=12.0, minimum_payment=50.0)

    calculate_scenario([debt], 50.0, [], False, start_date=START, max_months=12)
    for handler in logger.handlers:
        handler.flush()

    warnings = [
        e for e in _read_entries(tmp_path / "logs" / "debtfreeo.log")
        if e["message"] == "Scenario did not converge"
    ]
    assert len(warnings) == 1
    assert warnings[0]["extra"]["open_debts"] == ["big"]
    assert warnings[0]["extra"]["max_months"] == 12
