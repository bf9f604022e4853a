"""Gap and cluster discovery over one calendar year.

A *gap* is a run of workdays sandwiched between days that are already off
(weekends or holidays).  A *cluster* is a run of off-days, padded with a
short buffer on each side so it can be extended with PTO.
"""

from __future__ import annotations

import datetime
import enum
from collections.abc import Collection, Iterable
from typing import NamedTuple

from ptoledger.dates import DEFAULT_WEEKEND_DAYS, ONE_DAY, is_off_day, iter_days, year_bounds

DEFAULT_GAP_THRESHOLD = 5
CLUSTER_BUFFER_DAYS = 2

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class FillDirection(str, enum.Enum):
    """Where PTO placement starts inside a gap."""

    START = "start"  # walk forward from the first day
    END = "end"  # walk backward from the last day


class Gap(NamedTuple):
    """A span of days that PTO can be placed into."""

    start: datetime.date
    end: datetime.date
    gap_length: int
    chain_length: int = 0
    workdays_used: int = 0
    fill_from: FillDirection = FillDirection.START
    days_off_count: int = 0


class Cluster(NamedTuple):
    """Consecutive off-days plus buffer; *start*/*end* include the buffer."""

    start: datetime.date
    end: datetime.date
    days_off_count: int


class VacationBlock(NamedTuple):
    """A contiguous block of days off that includes at least one PTO day."""

    start_date: datetime.date
    end_date: datetime.date
    total_days: int
    pto_days: int
    holidays: int
    weekend_days: int


# ---------------------------------------------------------------------------
# Year calendar
# ---------------------------------------------------------------------------


class YearCalendar:
    """Off-day lookups for one year given a weekend set and holiday list."""

    def __init__(
        self,
        year: int,
        holidays: Iterable[datetime.date] = (),
        weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS,
    ):
        self.year = year
        self.holidays = frozenset(holidays)
        self.weekend_days = frozenset(weekend_days)
        self.start_date, self.end_date = year_bounds(year)
        self.num_days = (self.end_date - self.start_date).days + 1
        self.dates: list[datetime.date] = list(iter_days(self.start_date, self.end_date))

    def is_off_day(self, d: datetime.date) -> bool:
        return is_off_day(d, self.weekend_days, self.holidays)

    def is_workday(self, d: datetime.date) -> bool:
        return not self.is_off_day(d)

    def workdays_in_range(self, start: datetime.date, end: datetime.date) -> list[datetime.date]:
        return [d for d in iter_days(start, end) if self.is_workday(d)]

    # ------------------------------------------------------------------
    # Gaps
    # ------------------------------------------------------------------

    def find_gaps(self, max_gap_length: int = DEFAULT_GAP_THRESHOLD) -> list[Gap]:
        """Workday runs of at most *max_gap_length* days closed by an off-day.

        A run still open on Dec 31 is not a gap.
        """
        gaps: list[Gap] = []
        gap_start: datetime.date | None = None
        for d in self.dates:
            if self.is_workday(d):
                if gap_start is None:
                    gap_start = d
            elif gap_start is not None:
                length = (d - gap_start).days
                if 0 < length <= max_gap_length:
                    gaps.append(Gap(gap_start, d - ONE_DAY, length))
                gap_start = None
        return gaps

    def chain(self, anchor: datetime.date, gap_length: int, step: int) -> tuple[int, int]:
        """Length of the off-chain reached by filling a gap from *anchor*.

        Returns ``(chain_length, workdays_used)``: the gap plus every
        consecutive off-day beyond *anchor* in direction *step* (+1/-1), and
        how many workdays lie in the *gap_length* days walked from *anchor*.
        """
        delta = datetime.timedelta(days=step)
        chain_length = gap_length
        d = anchor + delta
        for _ in range(self.num_days):
            if not self.is_off_day(d):
                break
            chain_length += 1
            d += delta
        used = sum(1 for i in range(gap_length) if self.is_workday(anchor + i * delta))
        return chain_length, used

    def rank_gaps_by_efficiency(self, gaps: Iterable[Gap]) -> list[Gap]:
        """Pick each gap's better fill direction, then rank the gaps.

        Filling from the end wins when the chain after the gap is longer, or
        as long while using no more workdays.  Ranking: longest chain first,
        then shortest gap, then fewest workdays used.
        """
        ranked: list[Gap] = []
        for gap in gaps:
            back_chain, back_used = self.chain(gap.start, gap.gap_length, -1)
            fwd_chain, fwd_used = self.chain(gap.end, gap.gap_length, 1)
            if fwd_chain > back_chain or (fwd_chain == back_chain and fwd_used <= back_used):
                chain_length, used, fill_from = fwd_chain, fwd_used, FillDirection.END
            else:
                chain_length, used, fill_from = back_chain, back_used, FillDirection.START
            ranked.append(
                gap._replace(chain_length=chain_length, workdays_used=used, fill_from=fill_from)
            )
        ranked.sort(key=lambda g: (-g.chain_length, g.gap_length, g.workdays_used))
        return ranked

    # ------------------------------------------------------------------
    # Clusters
    # ------------------------------------------------------------------

    def find_clusters(self) -> list[Cluster]:
        """Runs of off-days, each padded by the buffer and clamped to the year."""
        clusters: list[Cluster] = []
        run_start: datetime.date | None = None
        count = 0
        buffer = datetime.timedelta(days=CLUSTER_BUFFER_DAYS)

        for d in self.dates:
            if self.is_off_day(d):
                if run_start is None:
                    run_start = d
                count += 1
            elif run_start is not None:
                clusters.append(self._make_cluster(run_start - buffer, d - ONE_DAY + buffer, count))
                run_start = None
                count = 0

        if run_start is not None:
            clusters.append(self._make_cluster(run_start - buffer, self.end_date, count))
        return clusters

    def _make_cluster(self, start: datetime.date, end: datetime.date, count: int) -> Cluster:
        return Cluster(max(start, self.start_date), min(end, self.end_date), count)

    def gaps_around_clusters(self, clusters: Iterable[Cluster]) -> list[Gap]:
        """Convert each cluster into a gap made of its buffer workdays."""
        gaps: list[Gap] = []
        for cluster in clusters:
            workdays = self.workdays_in_range(cluster.start, cluster.end)
            if workdays:
                gaps.append(
                    Gap(
                        start=cluster.start,
                        end=cluster.end,
                        gap_length=len(workdays),
                        fill_from=FillDirection.END,
                        days_off_count=cluster.days_off_count,
                    )
                )
        return gaps

    @staticmethod
    def rank_gaps_by_length(gaps: Iterable[Gap]) -> list[Gap]:
        return sorted(gaps, key=lambda g: -g.gap_length)

    # ------------------------------------------------------------------
    # Vacation blocks
    # ------------------------------------------------------------------

    def extract_blocks(self, pto_dates: Iterable[datetime.date]) -> list[VacationBlock]:
        """Contiguous off-blocks of the year that contain at least one PTO day."""
        pto_set = {d for d in pto_dates if self.start_date <= d <= self.end_date}
        blocks: list[VacationBlock] = []
        start: datetime.date | None = None

        for d in self.dates:
            if self.is_off_day(d) or d in pto_set:
                if start is None:
                    start = d
            elif start is not None:
                blocks.append(self._make_block(start, d - ONE_DAY, pto_set))
                start = None
        if start is not None:
            blocks.append(self._make_block(start, self.end_date, pto_set))

        return [b for b in blocks if b.pto_days > 0]

    def _make_block(
        self,
        start: datetime.date,
        end: datetime.date,
        pto_set: set[datetime.date],
    ) -> VacationBlock:
        rng = list(iter_days(start, end))
        return VacationBlock(
            start_date=start,
            end_date=end,
            total_days=len(rng),
            pto_days=sum(1 for d in rng if d in pto_set and self.is_workday(d)),
            holidays=sum(1 for d in rng if d in self.holidays),
            weekend_days=sum(1 for d in rng if d.weekday() in self.weekend_days),
        )
