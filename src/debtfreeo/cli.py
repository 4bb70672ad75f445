"""Command line entry points for Debtfreeo projections."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import click

from .config import BaseConfig
from .logging_config import setup_logging
from .services.amortization import (
    GoldLoanConfigurationError,
    calculate_amortization_schedule,
    is_debt_payable,
)
from .services.export_csv import export_schedule_csv, export_timeline_csv
from .services.import_csv import DebtImportError, load_debts_csv, load_fundings_csv
from .services.strategies import STRATEGIES, get_strategy
from .services.timeline import calculate_timeline, total_minimum_payment

_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _money(amount: float, symbol: str) -> str:
    return f"{symbol}{amount:,.2f}"


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Log per-month simulation traces.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Simulate debt payoff plans."""

    config = BaseConfig()
    setup_logging(config, level=logging.DEBUG if verbose else logging.INFO)
    ctx.obj = config


@cli.command("strategies")
def list_strategies() -> None:
    """List the available prioritisation strategies."""

    for strategy in STRATEGIES.values():
        click.echo(f"{strategy.id:<14} {strategy.name}: {strategy.description}")


@cli.command("timeline")
@click.argument("debts_csv", type=_FILE)
@click.option("--payment", type=float, required=True, help="Total monthly budget.")
@click.option(
    "--strategy",
    "strategy_id",
    type=click.Choice(sorted(STRATEGIES)),
    default="avalanche",
    show_default=True,
)
@click.option("--fundings", "fundings_csv", type=_FILE, default=None, help="One-time fundings CSV.")
@click.option("--start", "start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--export", "export_path", type=click.Path(path_type=Path), default=None)
@click.pass_obj
def timeline_command(
    config: BaseConfig,
    debts_csv: Path,
    payment: float,
    strategy_id: str,
    fundings_csv: Path | None,
    start,
    export_path: Path | None,
) -> None:
    """Compare minimum-only payoff with the chosen strategy."""

    try:
        debts = load_debts_csv(debts_csv, default_currency=config.CURRENCY_SYMBOL)
        fundings = load_fundings_csv(fundings_csv) if fundings_csv else []
    except DebtImportError as exc:
        raise click.ClickException(str(exc)) from exc

    if not debts:
        raise click.ClickException("No debts found.")

    minimums = total_minimum_payment(debts)
    if payment < minimums:
        click.echo(f"Warning: payment is below the total minimum payments ({minimums:,.2f}).")
    for debt in debts:
        if not debt.is_gold_loan and not is_debt_payable(debt):
            click.echo(f"Warning: minimum payment for {debt.name} does not cover its interest.")

    result = calculate_timeline(
        debts,
        payment,
        get_strategy(strategy_id),
        fundings,
        start_date=start.date() if start else None,
        max_months=config.MAX_MONTHS,
        default_currency=config.CURRENCY_SYMBOL,
    )
    symbol = result.original_currency

    click.echo(f"Strategy:             {get_strategy(strategy_id).name}")
    click.echo(f"Baseline months:      {result.baseline_months}")
    click.echo(f"Accelerated months:   {result.accelerated_months}")
    click.echo(f"Baseline interest:    {_money(result.baseline_interest, symbol)}")
    click.echo(f"Accelerated interest: {_money(result.accelerated_interest, symbol)}")
    click.echo(f"Months saved:         {result.months_saved}")
    click.echo(f"Interest saved:       {_money(result.interest_saved, symbol)}")
    click.echo(f"Debt-free by:         {result.payoff_date.isoformat()}")
    if not result.converged:
        click.echo("Warning: a scenario hit the month cap before every debt was paid off.")

    if export_path is not None:
        path = export_timeline_csv(result=result, output_path=export_path)
        click.echo(f"Timeline written: {path}")


@cli.command("schedule")
@click.argument("debts_csv", type=_FILE)
@click.argument("debt_id")
@click.option("--payment", type=float, default=None, help="Monthly payment (defaults to minimum).")
@click.option("--fundings", "fundings_csv", type=_FILE, default=None, help="One-time fundings CSV.")
@click.option("--start", "start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--export", "export_path", type=click.Path(path_type=Path), default=None)
@click.pass_obj
def schedule_command(
    config: BaseConfig,
    debts_csv: Path,
    debt_id: str,
    payment: float | None,
    fundings_csv: Path | None,
    start,
    export_path: Path | None,
) -> None:
    """Print the amortization schedule for one debt."""

    try:
        debts = {
            d.id: d
            for d in load_debts_csv(debts_csv, default_currency=config.CURRENCY_SYMBOL)
        }
        fundings = load_fundings_csv(fundings_csv) if fundings_csv else []
    except DebtImportError as exc:
        raise click.ClickException(str(exc)) from exc

    debt = debts.get(debt_id)
    if debt is None:
        raise click.ClickException(f"Unknown debt id: {debt_id}")

    start_date: date | None = start.date() if start else None
    try:
        entries = calculate_amortization_schedule(
            debt, payment, fundings, start_date=start_date, max_months=config.MAX_MONTHS
        )
    except GoldLoanConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    symbol = debt.currency_symbol
    click.echo(f"{'Date':<12}{'Payment':>14}{'Principal':>14}{'Interest':>12}{'Balance':>14}")
    for entry in entries:
        click.echo(
            f"{entry.date.isoformat():<12}"
            f"{_money(entry.payment, symbol):>14}"
            f"{_money(entry.principal, symbol):>14}"
            f"{_money(entry.interest, symbol):>12}"
            f"{_money(entry.ending_balance, symbol):>14}"
        )

    if export_path is not None:
        path = export_schedule_csv(entries=entries, output_path=export_path)
        click.echo(f"Schedule written: {path}")


def main() -> None:  # pragma: no cover - console script
    cli()
