"""Day-by-day balance history built from a list of transactions."""

from __future__ import annotations

import bisect
import datetime
from collections.abc import Iterable, Mapping

from ptoledger.config import get_logger
from ptoledger.dates import ONE_DAY, date_key, iter_days, to_date
from ptoledger.models import DailyLedgerEntry, Ledger, PtoConfig, Transaction, TransactionType

logger = get_logger(__name__)


def sort_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Order by date, then adjustment < accrual < carryover < usage."""
    return sorted(transactions, key=lambda tx: tx.sort_key)


def build_daily_ledger(config: PtoConfig, transactions: Iterable[Transaction]) -> Ledger:
    """Apply *transactions* chronologically over the configured visible range.

    Transactions dated before the first day of the range are folded into the
    opening balance.  Days of the range that precede the first transaction
    get a zero balance.  The running balance never goes below zero: a debit
    larger than the balance consumes it down to zero.
    """
    ordered = sort_transactions(transactions)
    range_start, range_end = config.range_start, config.range_end
    ledger: Ledger = {}

    window_start = max(ordered[0].date, range_start) if ordered else range_end + ONE_DAY
    for d in iter_days(range_start, min(window_start - ONE_DAY, range_end)):
        ledger[date_key(d)] = DailyLedgerEntry(0.0)

    balance = max(0.0, sum(tx.amount for tx in ordered if tx.date < window_start))
    i = bisect.bisect_left([tx.date for tx in ordered], window_start)

    for d in iter_days(window_start, range_end):
        applied: list[Transaction] = []
        while i < len(ordered) and ordered[i].date == d:
            tx = ordered[i]
            before = balance
            balance += tx.amount
            if balance < 0:
                if tx.type is TransactionType.USAGE:
                    logger.warning(
                        "usage_exceeds_balance",
                        day=d.isoformat(),
                        requested=abs(tx.amount),
                        available=before,
                    )
                balance = 0.0
            applied.append(tx)
            i += 1
        ledger[date_key(d)] = DailyLedgerEntry(balance, tuple(applied))

    return ledger


def get_balance_on_date(
    ledger: Mapping[str, DailyLedgerEntry],
    date: datetime.date | datetime.datetime | str,
    config: PtoConfig | None = None,
) -> float:
    """Balance at the end of *date*.

    Dates after the ledger carry the last balance forward.  Dates before it
    are 0, except the as-of date itself which reports the initial balance
    (requires *config*).
    """
    day = to_date(date)
    key = day.isoformat()
    entry = ledger.get(key)
    if entry is not None:
        return entry.balance

    if not ledger:
        if config is not None and day >= config.as_of_date:
            return config.initial_balance
        return 0.0

    keys = sorted(ledger)
    if key < keys[0]:
        if config is not None and day == config.as_of_date:
            return config.initial_balance
        return 0.0
    if key > keys[-1]:
        return ledger[keys[-1]].balance
    return ledger[keys[bisect.bisect_right(keys, key) - 1]].balance
