"""Year-end carryover corrections."""

from __future__ import annotations

import datetime
from collections.abc import Sequence

from ptoledger.config import get_logger
from ptoledger.ledger import build_daily_ledger, get_balance_on_date
from ptoledger.models import PtoConfig, Transaction, TransactionType, Unit

logger = get_logger(__name__)


def carryover_transactions(
    config: PtoConfig, transactions: Sequence[Transaction]
) -> list[Transaction]:
    """Forfeit the part of each year-end balance that exceeds the carryover cap.

    Year-end balances come from a provisional ledger built from
    *transactions* only (no carryover), so earlier corrections never feed
    back into later ones.  Emits at most one transaction per visible year
    except the last, dated Jan 1 of the following year.
    """
    options = config.carryover
    if not options.enabled or options.unbounded:
        return []

    cap = config.normalize(options.max_days, Unit.DAYS)
    provisional = build_daily_ledger(config, transactions)
    result: list[Transaction] = []

    for year in config.visible_years[:-1]:
        year_end = get_balance_on_date(provisional, datetime.date(year, 12, 31), config)
        if year_end <= cap:
            logger.debug("carryover_within_cap", year=year, balance=year_end, cap=cap)
            continue
        excess = year_end - cap
        result.append(
            Transaction(
                date=datetime.date(year + 1, 1, 1),
                type=TransactionType.CARRYOVER,
                amount=-excess,
                note=f"Carryover adjustment: exceeded max {cap:g}. Reduced by {excess:g}.",
            )
        )
        logger.info("carryover_forfeited", year=year, balance=year_end, cap=cap, forfeited=excess)

    return result
