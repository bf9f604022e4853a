"""PTO ledger engine.

Builds the full balance history for a configuration and a set of selected
PTO days:

  1. adjustment, accrual and usage transactions are generated;
  2. a provisional ledger built from them yields year-end balances, from
     which carryover corrections are derived;
  3. all transactions are sorted and replayed into the final ledger.

The ledger is recomputed from scratch on every call, so it is always a pure
function of ``(config, selected_days)``.
"""

from __future__ import annotations

import datetime
from collections.abc import Collection, Iterable

from ptoledger.carryover import carryover_transactions
from ptoledger.config import get_logger
from ptoledger.dates import DEFAULT_WEEKEND_DAYS, to_date
from ptoledger.ledger import build_daily_ledger, get_balance_on_date, sort_transactions
from ptoledger.models import Ledger, PtoConfig, StrategyInput, Transaction
from ptoledger.optimizer import BalanceOracle
from ptoledger.transactions import base_transactions

logger = get_logger(__name__)

DateLike = datetime.date | datetime.datetime | str


class PTOEngine:
    """Computes ledgers and balance lookups for one configuration."""

    def __init__(self, config: PtoConfig):
        self.config = config

    # ------------------------------------------------------------------
    # Ledger construction
    # ------------------------------------------------------------------

    def build_transactions(self, selected_days: Iterable[DateLike] = ()) -> list[Transaction]:
        """All transactions of a build, carryover included, in application order."""
        base = base_transactions(self.config, selected_days)
        carryover = carryover_transactions(self.config, base)
        return sort_transactions([*base, *carryover])

    def build_ledger(self, selected_days: Iterable[DateLike] = ()) -> Ledger:
        transactions = self.build_transactions(selected_days)
        ledger = build_daily_ledger(self.config, transactions)
        logger.debug(
            "ledger_built",
            transactions=len(transactions),
            days=len(ledger),
            start=self.config.range_start.isoformat(),
            end=self.config.range_end.isoformat(),
        )
        return ledger

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def balance_on(self, ledger: Ledger, date: DateLike) -> float:
        """Balance on *date* in the configured balance unit."""
        return get_balance_on_date(ledger, date, self.config)

    def days_available_on(self, ledger: Ledger, date: DateLike) -> float:
        """Balance on *date* expressed in days."""
        return self.config.to_days(self.balance_on(ledger, date))

    def balance_oracle(self, ledger: Ledger) -> BalanceOracle:
        """Per-day balance lookup (in days) for the optimizer."""

        def oracle(day: datetime.date) -> float:
            return self.days_available_on(ledger, day)

        return oracle

    def current_balance(self, ledger: Ledger, today: DateLike | None = None) -> float:
        day = datetime.date.today() if today is None else to_date(today)
        return self.balance_on(ledger, day)

    def year_end_balances(self, ledger: Ledger) -> dict[int, float]:
        """Closing balance on Dec 31 of every visible year."""
        return {
            year: self.balance_on(ledger, datetime.date(year, 12, 31))
            for year in self.config.visible_years
        }

    def strategy_input(
        self,
        ledger: Ledger,
        year: int,
        holidays: Iterable[DateLike] = (),
        weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS,
    ) -> StrategyInput:
        """Calendar snapshot for the optimizer.

        The day budget is the balance left at the end of *year*, so proposals
        never exceed what the ledger can still absorb that year.
        """
        return StrategyInput(
            year=year,
            holidays=tuple(sorted({to_date(h) for h in holidays})),
            weekends=frozenset(weekend_days),
            pto_balance=self.days_available_on(ledger, datetime.date(year, 12, 31)),
            accrual_rate=self.config.accrual_rate,
            accrual_frequency=self.config.accrual_frequency,
        )


def build_ledger(config: PtoConfig, selected_days: Iterable[DateLike] = ()) -> Ledger:
    """Build the ledger for *config* with *selected_days* taken off."""
    return PTOEngine(config).build_ledger(selected_days)
