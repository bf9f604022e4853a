"""Day-off optimizer.

Suggests workdays to take off so that PTO bridges weekends and holidays
into longer breaks.  Every strategy is the same greedy loop over ranked
gaps; strategies differ in how gaps are discovered and ranked and in how
many days each gap may absorb:

  balanced       gaps of up to 4 workdays, up to 4 days each
  long-weekends  gaps of up to 2 workdays, up to 2 days each
  mini-breaks    gaps of up to 3 workdays, up to 3 days each
  week-long      cluster buffers, largest first, walked back from the end
  extended       the 2 largest clusters, up to 10 days each

A day is only proposed when the balance oracle reports at least one day of
PTO available on it.  Suggestions are never applied to the ledger.
"""

from __future__ import annotations

import datetime
import enum
import math
from collections.abc import Callable, Iterable
from typing import NamedTuple

from ptoledger.analysis import FillDirection, Gap, VacationBlock, YearCalendar
from ptoledger.config import get_logger
from ptoledger.dates import ONE_DAY
from ptoledger.errors import ConfigurationError
from ptoledger.models import StrategyInput

logger = get_logger(__name__)

BalanceOracle = Callable[[datetime.date], float]
"""Signature: oracle(day) -> PTO available on *day*, in days."""

MIN_DAYS_AVAILABLE = 1.0
EXTENDED_MAX_DAYS_PER_CLUSTER = 10
EXTENDED_CLUSTER_COUNT = 2

# ---------------------------------------------------------------------------
# Strategy registry
# ---------------------------------------------------------------------------


class Strategy(str, enum.Enum):
    NONE = "none"
    BALANCED = "balanced"
    LONG_WEEKENDS = "long-weekends"
    MINI_BREAKS = "mini-breaks"
    WEEK_LONG = "week-long"
    EXTENDED = "extended"


class StrategyDescription(NamedTuple):
    id: Strategy
    name: str
    description: str


STRATEGY_DESCRIPTIONS: tuple[StrategyDescription, ...] = (
    StrategyDescription(Strategy.NONE, "No Strategy", "No PTO strategy selected"),
    StrategyDescription(
        Strategy.BALANCED,
        "Balanced Mix",
        "A balanced mix of short and medium breaks throughout the year",
    ),
    StrategyDescription(
        Strategy.LONG_WEEKENDS,
        "Long Weekends",
        "Extend weekends by taking 1-2 days off around existing holidays or weekends",
    ),
    StrategyDescription(
        Strategy.MINI_BREAKS,
        "Mini Breaks",
        "Create multiple 5-6 day breaks spread throughout the year",
    ),
    StrategyDescription(
        Strategy.WEEK_LONG,
        "Week-Long Breaks",
        "Organize your PTO to create 7-9 day vacation periods",
    ),
    StrategyDescription(
        Strategy.EXTENDED,
        "Extended Vacations",
        "Plan for one or two extended 10-15 day vacation periods",
    ),
)

# Gap-discovery threshold and per-gap cap for the gap-based strategies.
MAX_DAYS_PER_GAP: dict[Strategy, int] = {
    Strategy.LONG_WEEKENDS: 2,
    Strategy.MINI_BREAKS: 3,
    Strategy.BALANCED: 4,
}


def parse_strategy(value: str | Strategy) -> Strategy:
    try:
        return Strategy(value)
    except ValueError:
        supported = ", ".join(s.value for s in Strategy)
        raise ConfigurationError(f"Unknown strategy {value!r}. Supported: {supported}") from None


def describe(strategy: str | Strategy) -> StrategyDescription:
    strategy = parse_strategy(strategy)
    return next(d for d in STRATEGY_DESCRIPTIONS if d.id is strategy)


class Plan(NamedTuple):
    """Suggested days for one strategy and the vacation blocks they create."""

    name: str
    description: str
    blocks: list[VacationBlock]
    pto_dates: list[datetime.date]


# ---------------------------------------------------------------------------
# Optimizer
# ---------------------------------------------------------------------------


class DayOffOptimizer:
    """Greedy PTO placement for one year, checked against a balance oracle."""

    def __init__(
        self,
        strategy_input: StrategyInput,
        balance_oracle: BalanceOracle,
        *,
        min_days_available: float = MIN_DAYS_AVAILABLE,
    ):
        self.input = strategy_input
        self.balance_oracle = balance_oracle
        self.min_days_available = min_days_available
        self.calendar = YearCalendar(
            strategy_input.year,
            holidays=strategy_input.holidays,
            weekend_days=strategy_input.weekends,
        )
        # Fractional balances cannot buy a whole day off.
        self.budget = max(0, math.floor(strategy_input.pto_balance))

    # ------------------------------------------------------------------
    # Core allocation
    # ------------------------------------------------------------------

    def has_enough_balance(self, day: datetime.date) -> bool:
        available = self.balance_oracle(day)
        if available < self.min_days_available:
            logger.debug(
                "insufficient_balance_for_suggestion",
                day=day.isoformat(),
                available=available,
            )
            return False
        return True

    def _walk(self, gap: Gap, positions: int) -> list[datetime.date]:
        """The first *positions* calendar days of *gap* in fill order.

        Off-days are included; they occupy a position but are never claimed.
        """
        if gap.fill_from is FillDirection.END:
            anchor, step = gap.end, -ONE_DAY
        else:
            anchor, step = gap.start, ONE_DAY
        return [anchor + i * step for i in range(positions)]

    def _allocate(self, ranked_gaps: Iterable[Gap], max_per_gap: int | None) -> list[datetime.date]:
        selected: list[datetime.date] = []
        chosen: set[datetime.date] = set()
        remaining = self.budget

        for gap in ranked_gaps:
            if remaining <= 0:
                break
            cap = gap.gap_length if max_per_gap is None else max_per_gap
            days_to_use = min(cap, gap.gap_length, remaining)
            for day in self._walk(gap, days_to_use):
                if self.calendar.is_off_day(day) or day in chosen:
                    continue
                if not self.has_enough_balance(day):
                    continue
                selected.append(day)
                chosen.add(day)
                remaining -= 1
                if remaining <= 0:
                    break

        return selected

    def _gap_strategy(self, strategy: Strategy) -> list[datetime.date]:
        max_per_gap = MAX_DAYS_PER_GAP[strategy]
        gaps = self.calendar.find_gaps(max_gap_length=max_per_gap)
        ranked = self.calendar.rank_gaps_by_efficiency(gaps)
        return self._allocate(ranked, max_per_gap)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def balanced(self) -> list[datetime.date]:
        """Short and medium breaks spread through the year."""
        return self._gap_strategy(Strategy.BALANCED)

    def long_weekends(self) -> list[datetime.date]:
        """One or two days next to weekends and holidays."""
        return self._gap_strategy(Strategy.LONG_WEEKENDS)

    def mini_breaks(self) -> list[datetime.date]:
        return self._gap_strategy(Strategy.MINI_BREAKS)

    def week_long(self) -> list[datetime.date]:
        """Walk back from the end of each cluster buffer, biggest buffers first."""
        clusters = self.calendar.find_clusters()
        gaps = self.calendar.gaps_around_clusters(clusters)
        return self._allocate(self.calendar.rank_gaps_by_length(gaps), None)

    def extended(
        self, max_days_per_cluster: int = EXTENDED_MAX_DAYS_PER_CLUSTER
    ) -> list[datetime.date]:
        """One or two long vacations built on the clusters with the most days off.

        Ties in days off keep calendar order.  A day shared by two overlapping
        buffers is claimed once.
        """
        clusters = sorted(self.calendar.find_clusters(), key=lambda c: -c.days_off_count)
        selected: list[datetime.date] = []
        remaining = self.budget

        for cluster in clusters[:EXTENDED_CLUSTER_COUNT]:
            if remaining <= 0:
                break
            workdays = self.calendar.workdays_in_range(cluster.start, cluster.end)
            days_to_use = min(max_days_per_cluster, remaining, len(workdays))
            for day in workdays[:days_to_use]:
                if day in selected or not self.has_enough_balance(day):
                    continue
                selected.append(day)
                remaining -= 1

        return selected

    def suggest(self, strategy: str | Strategy) -> list[datetime.date]:
        strategy = parse_strategy(strategy)
        if strategy is Strategy.NONE:
            return []
        runner = {
            Strategy.BALANCED: self.balanced,
            Strategy.LONG_WEEKENDS: self.long_weekends,
            Strategy.MINI_BREAKS: self.mini_breaks,
            Strategy.WEEK_LONG: self.week_long,
            Strategy.EXTENDED: self.extended,
        }[strategy]
        days = runner()
        logger.debug(
            "strategy_suggested", strategy=strategy.value, days=len(days), budget=self.budget
        )
        return days

    def make_plan(self, strategy: str | Strategy) -> Plan:
        description = describe(strategy)
        days = self.suggest(description.id)
        return Plan(
            name=description.name,
            description=description.description,
            blocks=self.calendar.extract_blocks(days),
            pto_dates=days,
        )


# ---------------------------------------------------------------------------
# Functional entry points
# ---------------------------------------------------------------------------


def suggest_days(
    strategy: str | Strategy,
    strategy_input: StrategyInput,
    balance_oracle: BalanceOracle,
) -> list[datetime.date]:
    """Suggested off-days for *strategy*; empty for ``none``."""
    return DayOffOptimizer(strategy_input, balance_oracle).suggest(strategy)


def balanced_mix_days(
    strategy_input: StrategyInput, balance_oracle: BalanceOracle
) -> list[datetime.date]:
    return DayOffOptimizer(strategy_input, balance_oracle).balanced()


def long_weekend_days(
    strategy_input: StrategyInput, balance_oracle: BalanceOracle
) -> list[datetime.date]:
    return DayOffOptimizer(strategy_input, balance_oracle).long_weekends()


def mini_break_days(
    strategy_input: StrategyInput, balance_oracle: BalanceOracle
) -> list[datetime.date]:
    return DayOffOptimizer(strategy_input, balance_oracle).mini_breaks()


def week_long_break_days(
    strategy_input: StrategyInput, balance_oracle: BalanceOracle
) -> list[datetime.date]:
    return DayOffOptimizer(strategy_input, balance_oracle).week_long()


def extended_vacation_days(
    strategy_input: StrategyInput, balance_oracle: BalanceOracle
) -> list[datetime.date]:
    return DayOffOptimizer(strategy_input, balance_oracle).extended()
