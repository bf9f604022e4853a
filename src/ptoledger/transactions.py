"""Turn a configuration and a set of selected days into ledger transactions.

Carryover corrections are computed separately (see ``ptoledger.carryover``)
because they depend on a provisional ledger built from these transactions.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable

from ptoledger.accrual import AccrualSchedule
from ptoledger.config import get_logger
from ptoledger.dates import to_date
from ptoledger.errors import ConfigurationError
from ptoledger.models import PtoConfig, Transaction, TransactionType, Unit

logger = get_logger(__name__)


def initial_balance_transaction(config: PtoConfig) -> Transaction:
    return Transaction(
        date=config.as_of_date,
        type=TransactionType.ADJUSTMENT,
        amount=config.initial_balance,
        note="Initial balance",
    )


def accrual_transactions(config: PtoConfig) -> list[Transaction]:
    """One accrual per schedule date in ``[as_of_date, range_end]``.

    An accrual that falls on the as-of date is already part of the stated
    initial balance, so it is recorded with a zero amount.  An unsupported
    template frequency yields no accruals.
    """
    template = config.resolved_template()
    try:
        schedule = AccrualSchedule(template)
    except ConfigurationError as exc:
        logger.warning(
            "unsupported_accrual_frequency", frequency=template.frequency, error=str(exc)
        )
        return []

    amount = config.normalize(config.accrual_rate, config.accrual_unit)
    note = f"Regular {schedule.frequency.value} accrual"
    result: list[Transaction] = []
    for d in schedule.dates(config.as_of_date, config.range_end):
        if d == config.as_of_date:
            result.append(
                Transaction(d, TransactionType.ACCRUAL, 0.0, "Accrual included in initial balance")
            )
        else:
            result.append(Transaction(d, TransactionType.ACCRUAL, amount, note))

    logger.debug(
        "accruals_generated",
        count=len(result),
        amount=amount,
        unit=config.balance_unit.value,
        frequency=schedule.frequency.value,
    )
    return result


def unique_days(days: Iterable[datetime.date | datetime.datetime | str]) -> list[datetime.date]:
    """Deduplicate *days* by calendar day and return them sorted."""
    return sorted({to_date(d) for d in days})


def usage_transactions(
    config: PtoConfig,
    selected_days: Iterable[datetime.date | datetime.datetime | str],
) -> list[Transaction]:
    """One debit of a full day per selected day on or after the as-of date."""
    amount = -abs(config.normalize(1, Unit.DAYS))
    result: list[Transaction] = []
    for d in unique_days(selected_days):
        if d < config.as_of_date:
            logger.warning(
                "usage_before_as_of_date",
                day=d.isoformat(),
                as_of_date=config.as_of_date.isoformat(),
            )
            continue
        result.append(Transaction(d, TransactionType.USAGE, amount, "PTO used"))
    return result


def base_transactions(
    config: PtoConfig,
    selected_days: Iterable[datetime.date | datetime.datetime | str] = (),
) -> list[Transaction]:
    """Adjustment, accrual and usage transactions (unsorted, no carryover)."""
    return [
        initial_balance_transaction(config),
        *accrual_transactions(config),
        *usage_transactions(config, selected_days),
    ]
