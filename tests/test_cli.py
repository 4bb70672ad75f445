"""Tests for the click command line interface."""

from __future__ import annotations

import csv
from pathlib import Path

import pytest
from click.testing import CliRunner

from debtfreeo.cli import cli

pytestmark = pytest.mark.usefixtures("reset_package_logger")


@pytest.fixture
def debts_csv(tmp_path) -> Path:
    path = tmp_path / "debts.csv"
    path.write_text(
        "id,name,balance,interest_rate,minimum_payment\n"
        "card,Visa,1000,20,50\n"
        "loan,Car loan,2000,15,75\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_strategies_lists_registry(runner):
    result = runner.invoke(cli, ["strategies"])

    assert result.exit_code == 0, result.output
    assert "avalanche" in result.output
    assert "snowball" in result.output
    assert "balance-ratio" in result.output


def test_timeline_prints_comparison(runner, debts_csv):
    result = runner.invoke(
        cli, ["timeline", str(debts_csv), "--payment", "200", "--start", "2025-01-01"]
    )

    assert result.exit_code == 0, result.output
    assert "Avalanche Method" in result.output
    assert "Baseline months:" in result.output
    assert "Months saved:" in result.output
    assert "Interest saved:       £" in result.output
    assert "Warning" not in result.output


def test_timeline_with_fundings_and_export(runner, debts_csv, tmp_path):
    fundings = tmp_path / "fundings.csv"
    fundings.write_text("amount,payment_date\n500,2025-03-01\n", encoding="utf-8")
    export_path = tmp_path / "out" / "timeline.csv"

    result = runner.invoke(
        cli,
        [
            "timeline",
            str(debts_csv),
            "--payment",
            "200",
            "--strategy",
            "snowball",
            "--fundings",
            str(fundings),
            "--start",
            "2025-01-01",
            "--export",
            str(export_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Snowball Method" in result.output
    assert "Timeline written:" in result.output
    with export_path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert rows[2]["funding"] == "500.00"


def test_timeline_warns_on_low_payment(runner, debts_csv):
    result = runner.invoke(cli, ["timeline", str(debts_csv), "--payment", "100"])

    assert result.exit_code == 0, result.output
    assert "below the total minimum payments (125.00)" in result.output


def test_timeline_warns_on_unpayable_debt(runner, tmp_path):
    path = tmp_path / "debts.csv"
    path.write_text(
        "id,name,balance,interest_rate,minimum_payment\nbad,Payday,10000,24,100\n",
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["timeline", str(path), "--payment", "100"])

    assert result.exit_code == 0, result.output
    assert "minimum payment for Payday does not cover its interest" in result.output
    assert "month cap" in result.output


def test_timeline_rejects_invalid_csv(runner, tmp_path):
    path = tmp_path / "debts.csv"
    path.write_text("id,balance\na,100\n", encoding="utf-8")

    result = runner.invoke(cli, ["timeline", str(path), "--payment", "100"])

    assert result.exit_code == 1
    assert "missing required columns" in result.output


def test_timeline_rejects_unknown_strategy(runner, debts_csv):
    result = runner.invoke(
        cli, ["timeline", str(debts_csv), "--payment", "200", "--strategy", "tsunami"]
    )

    assert result.exit_code == 2


def test_schedule_prints_rows_and_exports(runner, debts_csv, tmp_path):
    export_path = tmp_path / "schedule.csv"

    result = runner.invoke(
        cli,
        [
            "schedule",
            str(debts_csv),
            "card",
            "--payment",
            "500",
            "--start",
            "2025-01-01",
            "--export",
            str(export_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "2025-01-01" in result.output
    assert "2025-03-01" in result.output
    assert "Schedule written:" in result.output
    assert export_path.exists()


def test_schedule_unknown_debt(runner, debts_csv):
    result = runner.invoke(cli, ["schedule", str(debts_csv), "nope"])

    assert result.exit_code == 1
    assert "Unknown debt id: nope" in result.output


def test_schedule_rejects_incomplete_gold_loan(runner, tmp_path):
    path = tmp_path / "debts.csv"
    path.write_text(
        "id,balance,interest_rate,minimum_payment,is_gold_loan,loan_term_months\n"
        "gold,10000,12,100,true,12\n",
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["schedule", str(path), "gold"])

    assert result.exit_code == 1
    assert "final_payment_date" in result.output


def test_max_months_from_environment(runner, tmp_path, monkeypatch):
    monkeypatch.setenv("DEBTFREEO_MAX_MONTHS", "24")
    path = tmp_path / "debts.csv"
    path.write_text(
        "id,balance,interest_rate,minimum_payment\nbig,10000,12,50\n", encoding="utf-8"
    )

    result = runner.invoke(cli, ["timeline", str(path), "--payment", "50"])

    assert result.exit_code == 0, result.output
    assert "Baseline months:      24" in result.output


def test_currency_setting_applies_to_debts_without_symbol(runner, debts_csv, monkeypatch):
    monkeypatch.setenv("DEBTFREEO_CURRENCY", "$")

    timeline = runner.invoke(
        cli, ["timeline", str(debts_csv), "--payment", "200", "--start", "2025-01-01"]
    )
    schedule = runner.invoke(
        cli, ["schedule", str(debts_csv), "card", "--payment", "500", "--start", "2025-01-01"]
    )

    assert timeline.exit_code == 0, timeline.output
    assert "Interest saved:       $" in timeline.output
    assert "£" not in timeline.output
    assert schedule.exit_code == 0, schedule.output
    assert "$500.00" in schedule.output
