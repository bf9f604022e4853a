"""Editing the set of selected PTO days.

Selections are immutable tuples of calendar days; every edit returns a new
tuple.  Adding a day is guarded by a balance check against the ledger built
*before* the edit, so a day is only accepted when at least one full day of
PTO is available on it.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable

from ptoledger.config import get_logger
from ptoledger.dates import to_date
from ptoledger.engine import DateLike, PTOEngine
from ptoledger.errors import InsufficientBalanceError
from ptoledger.models import Ledger, PtoConfig
from ptoledger.transactions import unique_days

logger = get_logger(__name__)


def normalize_selection(days: Iterable[DateLike]) -> tuple[datetime.date, ...]:
    return tuple(unique_days(days))


def is_selected(selected: Iterable[DateLike], day: DateLike) -> bool:
    target = to_date(day)
    return any(to_date(d) == target for d in selected)


def toggle_day(
    selected: Iterable[DateLike],
    day: DateLike,
    ledger: Ledger,
    config: PtoConfig,
) -> tuple[datetime.date, ...]:
    """Remove *day* if selected, otherwise add it when the balance allows.

    Raises ``InsufficientBalanceError`` (leaving *selected* untouched) when
    the ledger shows less than one day available on *day*.
    """
    current = normalize_selection(selected)
    target = to_date(day)
    if target in current:
        logger.debug("day_deselected", day=target.isoformat())
        return tuple(d for d in current if d != target)

    available = PTOEngine(config).days_available_on(ledger, target)
    if available < 1:
        logger.warning(
            "day_rejected_insufficient_balance", day=target.isoformat(), available=available
        )
        raise InsufficientBalanceError(target, available)

    logger.debug("day_selected", day=target.isoformat(), available=available)
    return tuple(sorted((*current, target)))


def add_days(
    selected: Iterable[DateLike],
    days: Iterable[DateLike],
    config: PtoConfig,
) -> tuple[tuple[datetime.date, ...], list[datetime.date]]:
    """Add *days* one at a time, rebuilding the ledger after each acceptance.

    Returns the new selection and the days that were rejected for lack of
    balance.  Used to apply optimizer suggestions.
    """
    engine = PTOEngine(config)
    current = normalize_selection(selected)
    rejected: list[datetime.date] = []
    for day in unique_days(days):
        if day in current:
            continue
        ledger = engine.build_ledger(current)
        try:
            current = toggle_day(current, day, ledger, config)
        except InsufficientBalanceError:
            rejected.append(day)
    return current, rejected
