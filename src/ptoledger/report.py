"""Plain-text rendering of ledgers and suggestion plans."""

from __future__ import annotations

import calendar
import datetime

from ptoledger.analysis import VacationBlock, YearCalendar
from ptoledger.engine import PTOEngine
from ptoledger.models import Ledger, TransactionType
from ptoledger.optimizer import Plan

WIDTH = 64


def format_ledger_summary(ledger: Ledger, engine: PTOEngine) -> str:
    """Month-end balances for every visible year, plus the year's usage."""
    config = engine.config
    unit = config.balance_unit.value
    lines: list[str] = [
        "=" * WIDTH,
        "  PTO LEDGER",
        "=" * WIDTH,
        f"  Initial balance:  {config.initial_balance:g} {unit} "
        f"as of {config.as_of_date.isoformat()}",
        f"  Accrual:          {config.accrual_rate:g} {config.accrual_unit.value} "
        f"{config.accrual_frequency.value}",
    ]
    if config.carryover.enabled:
        cap = "unlimited" if config.carryover.unbounded else f"{config.carryover.max_days:g} days"
        lines.append(f"  Carryover cap:    {cap}")

    for year in config.visible_years:
        lines.append("")
        lines.append(f"  {year}")
        lines.append("  " + "-" * (WIDTH - 4))
        for month in range(1, 13):
            month_end = datetime.date(year, month, calendar.monthrange(year, month)[1])
            balance = engine.balance_on(ledger, month_end)
            used = sum(
                1
                for key, entry in ledger.items()
                if key.startswith(f"{year}-{month:02d}-")
                for tx in entry.transactions
                if tx.type is TransactionType.USAGE
            )
            used_label = f"  ({used} used)" if used else ""
            lines.append(f"    {calendar.month_abbr[month]:<4} {balance:>8.2f} {unit}{used_label}")

    return "\n".join(lines)


def _block_line(block: VacationBlock) -> str:
    if block.start_date == block.end_date:
        span = f"{block.start_date:%a %b %d}"
    else:
        span = f"{block.start_date:%a %b %d} to {block.end_date:%a %b %d}"
    mix = f"{block.pto_days} PTO, {block.holidays} holiday, {block.weekend_days} weekend"
    return f"    {span:<26} {block.total_days:>3} off  [{mix}]"


def _requests_by_month(pto_dates: list[datetime.date]) -> list[str]:
    by_month: dict[tuple[int, int], list[datetime.date]] = {}
    for day in sorted(pto_dates):
        by_month.setdefault((day.year, day.month), []).append(day)
    return [
        f"    {calendar.month_abbr[month]} {year}: " + ", ".join(f"{d.day:>2}" for d in days)
        for (year, month), days in by_month.items()
    ]


def format_plan(plan: Plan, budget: float) -> str:
    """Summarize a plan: PTO spent against the budget, its blocks, and the days to request.

    ``budget`` is the PTO balance the optimizer was given, in days.
    """
    total_off = sum(b.total_days for b in plan.blocks)
    spent = len(plan.pto_dates)

    lines: list[str] = [
        "",
        "=" * WIDTH,
        f"  {plan.name}: {plan.description}",
        "=" * WIDTH,
        f"  PTO spent:           {spent} of {budget:g} day(s)",
        f"  PTO left after plan: {budget - spent:g} day(s)",
        f"  Days off in blocks:  {total_off}",
    ]
    if spent:
        lines.append(f"  Days off per PTO:    {total_off / spent:.2f}")

    if plan.blocks:
        lines.append("")
        lines.append(f"  Blocks ({len(plan.blocks)})")
        lines.extend(_block_line(block) for block in plan.blocks)

    lines.append("")
    if plan.pto_dates:
        lines.append("  Request off")
        lines.extend(_requests_by_month(plan.pto_dates))
    else:
        lines.append("  Nothing to request: no workday fits the balance.")

    return "\n".join(lines)


def format_calendar_view(
    plan: Plan,
    year_calendar: YearCalendar,
    selected_days: frozenset[datetime.date] = frozenset(),
) -> str:
    """Month-by-month calendar marking suggested (S), selected (P) and holiday (H) days."""
    suggested = set(plan.pto_dates)
    year = year_calendar.year
    holidays = year_calendar.holidays

    marked = suggested | set(selected_days) | set(holidays)
    active_months = {d.month for d in marked if d.year == year}
    if not active_months:
        return ""

    lines: list[str] = [
        "",
        f"  Calendar View {year}",
        "  Legend: S=Suggested  P=Selected PTO  H=Holiday",
        "",
    ]

    cal = calendar.Calendar(firstweekday=0)

    for month in sorted(active_months):
        lines.append(f"  {calendar.month_name[month]} {year}")
        lines.append("  Mo  Tu  We  Th  Fr  Sa  Su")

        row = ""
        for day_num, weekday in cal.itermonthdays2(year, month):
            if day_num == 0:
                row += "    "
            else:
                d = datetime.date(year, month, day_num)
                if d in suggested:
                    cell = f" {day_num:>2}S"
                elif d in selected_days:
                    cell = f" {day_num:>2}P"
                elif d in holidays:
                    cell = f" {day_num:>2}H"
                else:
                    cell = f"  {day_num:>2}"
                row += cell

            if weekday == 6:
                lines.append(row)
                row = ""

        if row.strip():
            lines.append(row)
        lines.append("")

    return "\n".join(lines)
