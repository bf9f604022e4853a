"""Typer CLI for the PTO ledger and day-off optimizer."""

from __future__ import annotations

import calendar
import datetime
import enum
import json
import pathlib
import sys

import typer
from pydantic import ValidationError

from ptoledger.config import configure_logging
from ptoledger.engine import PTOEngine
from ptoledger.errors import ConfigurationError
from ptoledger.models import AccrualFrequency, CarryoverOptions, PtoConfig, Unit
from ptoledger.optimizer import (
    STRATEGY_DESCRIPTIONS,
    DayOffOptimizer,
    Plan,
    Strategy,
    parse_strategy,
)
from ptoledger.report import format_calendar_view, format_ledger_summary, format_plan
from ptoledger.selection import add_days
from ptoledger.state import PlannerState

app = typer.Typer(
    name="ptoledger",
    help="Track accrual and usage of paid time off, and get "
    "suggestions for which days to take off.",
    add_completion=False,
)

STRATEGY_CHOICES = [s.value for s in Strategy if s is not Strategy.NONE]


class LogLevel(str, enum.Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def _parse_date(value: str) -> datetime.date:
    """Parse a YYYY-MM-DD date string."""
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date format {value!r}. Use YYYY-MM-DD.") from None


def _load_state(path: str, *, sunday_weekdays: bool = False) -> PlannerState:
    """Load and validate a planner state file."""
    p = pathlib.Path(path)
    if not p.exists():
        typer.echo(f"Error: State file not found: {path}", err=True)
        raise typer.Exit(code=1)

    try:
        return PlannerState.from_json(p.read_text(), sunday_weekdays=sunday_weekdays)
    except json.JSONDecodeError as exc:
        typer.echo(f"Error: Invalid JSON in state file: {exc}", err=True)
        raise typer.Exit(code=1) from None
    except ValidationError as exc:
        typer.echo(f"Error: Invalid state file: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.callback()
def main_options(
    log_level: LogLevel | None = typer.Option(
        None,
        "--log-level",
        case_sensitive=False,
        help="Log level. Defaults to PTOLEDGER_LOG_LEVEL.",
    ),
) -> None:
    """Track PTO balances and plan days off."""
    configure_logging(level=log_level.value if log_level else None)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def init(
    state: str = typer.Option(..., "--state", help="Path of the state file to create."),
    balance: float = typer.Option(0.0, "--balance", "-b", help="Balance on the as-of date."),
    as_of: str = typer.Option(None, "--as-of", help="Date the balance applies to (YYYY-MM-DD)."),
    unit: Unit = typer.Option(Unit.DAYS, "--unit", help="Unit of the balance."),
    rate: float = typer.Option(0.0, "--rate", "-r", help="Amount accrued per pay period."),
    rate_unit: Unit = typer.Option(Unit.DAYS, "--rate-unit", help="Unit of the accrual rate."),
    frequency: AccrualFrequency = typer.Option(
        AccrualFrequency.MONTHLY, "--frequency", "-f", help="Accrual frequency."
    ),
    year: list[int] | None = typer.Option(  # noqa: B008
        None, "--year", "-y", help="Visible year. Repeatable. Defaults to the current year."
    ),
    max_carryover: float | None = typer.Option(
        None, "--max-carryover", help="Enable carryover capped at this many days."
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing state file."),
) -> None:
    """Create a new planner state file."""
    p = pathlib.Path(state)
    if p.exists() and not force:
        typer.echo(
            f"Error: State file already exists: {state}. Use --force to overwrite.", err=True
        )
        raise typer.Exit(code=1)

    as_of_date = _parse_date(as_of) if as_of else datetime.date.today()
    try:
        config = PtoConfig(
            initial_balance=balance,
            balance_unit=unit,
            as_of_date=as_of_date,
            accrual_rate=rate,
            accrual_unit=rate_unit,
            accrual_frequency=frequency,
            visible_years=tuple(year) if year else (as_of_date.year,),
            carryover=CarryoverOptions(enabled=max_carryover is not None, max_days=max_carryover),
        )
    except ValidationError as exc:
        typer.echo(f"Error: Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1) from None

    planner = PlannerState.from_data({"config": config.model_dump(by_alias=True, mode="json")})
    p.write_text(planner.to_json())
    typer.echo(f"Wrote {state}")


@app.command("import")
def import_state(
    source: str = typer.Argument(..., help="State JSON that numbers weekdays from Sunday = 0."),
    state: str = typer.Option(..., "--state", help="Path of the state file to write."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing state file."),
) -> None:
    """Convert a state file saved with Sunday-based weekday numbers."""
    p = pathlib.Path(state)
    if p.exists() and not force:
        typer.echo(
            f"Error: State file already exists: {state}. Use --force to overwrite.", err=True
        )
        raise typer.Exit(code=1)

    planner = _load_state(source, sunday_weekdays=True)
    p.write_text(planner.to_json())
    typer.echo(f"Wrote {state} (weekend days: {list(planner.weekend_days)})")


@app.command()
def ledger(
    state: str = typer.Option(..., "--state", help="Path to the planner state JSON file."),
    on: str | None = typer.Option(None, "--on", help="Show the balance on this date (YYYY-MM-DD)."),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON."),
) -> None:
    """Show the computed balance history."""
    planner = _load_state(state)
    engine = PTOEngine(planner.config)
    result = engine.build_ledger(planner.selected_days)
    on_date = _parse_date(on) if on else None

    if output_json:
        _print_ledger_json(result, engine, on_date)
        return

    typer.echo(format_ledger_summary(result, engine))
    if on_date is not None:
        typer.echo()
        typer.echo(
            f"  Balance on {on_date.isoformat()}: "
            f"{engine.balance_on(result, on_date):.2f} {planner.config.balance_unit.value}"
        )


def _print_ledger_json(result: dict, engine: PTOEngine, on_date: datetime.date | None) -> None:
    config = engine.config
    month_ends = [
        datetime.date(y, m, calendar.monthrange(y, m)[1])
        for y in config.visible_years
        for m in range(1, 13)
    ]
    output: dict[str, object] = {
        "balanceUnit": config.balance_unit.value,
        "asOfDate": config.as_of_date.isoformat(),
        "days": len(result),
        "yearEndBalances": {str(y): b for y, b in engine.year_end_balances(result).items()},
        "monthEndBalances": [
            {"date": d.isoformat(), "balance": engine.balance_on(result, d)} for d in month_ends
        ],
        "transactions": [
            {
                "date": tx.date.isoformat(),
                "type": tx.type.value,
                "amount": tx.amount,
                "note": tx.note,
            }
            for entry in result.values()
            for tx in entry.transactions
        ],
    }
    if on_date is not None:
        output["balanceOn"] = {
            "date": on_date.isoformat(),
            "balance": engine.balance_on(result, on_date),
        }
    json.dump(output, sys.stdout, indent=2)
    typer.echo()


@app.command()
def suggest(
    state: str = typer.Option(..., "--state", help="Path to the planner state JSON file."),
    strategy: str = typer.Option(
        "balanced",
        "--strategy",
        "-s",
        help=f"Strategy to run: all, {', '.join(STRATEGY_CHOICES)}.",
    ),
    year: int = typer.Option(
        None,
        "--year",
        "-y",
        help="Target year. Defaults to the first visible year.",
    ),
    holiday: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--holiday",
        "-H",
        help="Additional holiday date (YYYY-MM-DD). Repeatable.",
    ),
    show_calendar: bool = typer.Option(
        False,
        "--calendar/--no-calendar",
        help="Show month-by-month calendar view.",
    ),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON."),
    apply: bool = typer.Option(
        False,
        "--apply",
        help="Add the suggested days to the state file's selection (single strategy only).",
    ),
) -> None:
    """Suggest days to take off, checked against the ledger balance."""
    if strategy != "all":
        try:
            parse_strategy(strategy)
        except ConfigurationError:
            typer.echo(
                f"Error: Invalid strategy {strategy!r}. "
                f"Choose from: all, {', '.join(STRATEGY_CHOICES)}",
                err=True,
            )
            raise typer.Exit(code=1) from None
    if apply and strategy == "all":
        typer.echo("Error: --apply needs a single --strategy.", err=True)
        raise typer.Exit(code=1)

    planner = _load_state(state)
    resolved_year = year if year is not None else planner.config.visible_years[0]
    holidays = set(planner.holidays)
    holidays.update(_parse_date(h) for h in holiday or [])

    engine = PTOEngine(planner.config)
    result = engine.build_ledger(planner.selected_days)
    strategy_input = engine.strategy_input(
        result, resolved_year, holidays=holidays, weekend_days=planner.weekend_days
    )
    optimizer = DayOffOptimizer(strategy_input, engine.balance_oracle(result))

    strategies = STRATEGY_CHOICES if strategy == "all" else [strategy]
    plans = [optimizer.make_plan(s) for s in strategies]

    if output_json:
        _print_plans_json(plans, strategy_input.pto_balance, resolved_year)
    else:
        for plan in plans:
            typer.echo(format_plan(plan, strategy_input.pto_balance))
            if show_calendar:
                typer.echo(
                    format_calendar_view(plan, optimizer.calendar, frozenset(planner.selected_days))
                )
        typer.echo()
        typer.echo("=" * 64)
        typer.echo(f"  Generated {len(plans)} suggestion{'s' if len(plans) != 1 else ''}.")
        typer.echo("=" * 64)

    if apply:
        selection, rejected = add_days(planner.selected_days, plans[0].pto_dates, planner.config)
        updated = planner.model_copy(update={"selected_days": selection})
        pathlib.Path(state).write_text(updated.to_json())
        if not output_json:
            typer.echo(f"  Added {len(selection) - len(planner.selected_days)} day(s) to {state}.")
            for d in rejected:
                typer.echo(f"  Skipped {d.isoformat()}: not enough PTO.")


def _print_plans_json(plans: list[Plan], budget: float, year: int) -> None:
    def _serialize_plan(plan: Plan) -> dict[str, object]:
        return {
            "name": plan.name,
            "description": plan.description,
            "pto_dates": [d.isoformat() for d in plan.pto_dates],
            "blocks": [
                {
                    "start_date": b.start_date.isoformat(),
                    "end_date": b.end_date.isoformat(),
                    "total_days": b.total_days,
                    "pto_days": b.pto_days,
                    "holidays": b.holidays,
                    "weekend_days": b.weekend_days,
                }
                for b in plan.blocks
            ],
            "summary": {
                "total_vacation_days": sum(b.total_days for b in plan.blocks),
                "total_pto_used": len(plan.pto_dates),
            },
        }

    output = {
        "year": year,
        "pto_budget": budget,
        "plans": [_serialize_plan(p) for p in plans],
    }
    json.dump(output, sys.stdout, indent=2)
    typer.echo()


@app.command()
def strategies() -> None:
    """List the available suggestion strategies."""
    for desc in STRATEGY_DESCRIPTIONS:
        if desc.id is Strategy.NONE:
            continue
        typer.echo(f"  {desc.id.value:<14} {desc.name}")
        typer.echo(f"  {'':<14} {desc.description}")


def main() -> None:
    """Entry point for the CLI."""
    app()
