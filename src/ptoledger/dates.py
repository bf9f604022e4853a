"""Calendar helpers shared by the ledger engine and the optimizer.

All helpers are pure and work on ``datetime.date`` values.  Weekdays follow the
``datetime`` convention: 0 = Monday … 6 = Sunday.
"""

from __future__ import annotations

import calendar
import datetime
from collections.abc import Collection, Iterator

ONE_DAY = datetime.timedelta(days=1)

DEFAULT_WEEKEND_DAYS: frozenset[int] = frozenset({5, 6})


def to_date(value: datetime.date | datetime.datetime | str) -> datetime.date:
    """Normalize *value* to a calendar day, dropping any time component."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if "T" in text or " " in text:
            return datetime.datetime.fromisoformat(text).date()
        return datetime.date.fromisoformat(text)
    raise TypeError(f"Cannot interpret {value!r} as a date")


def date_key(value: datetime.date | datetime.datetime | str) -> str:
    """Return the ``YYYY-MM-DD`` key used to index ledger entries."""
    return to_date(value).isoformat()


def same_day(a: datetime.date | datetime.datetime, b: datetime.date | datetime.datetime) -> bool:
    return to_date(a) == to_date(b)


def is_weekend(d: datetime.date, weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS) -> bool:
    return d.weekday() in weekend_days


def is_holiday(d: datetime.date, holidays: Collection[datetime.date]) -> bool:
    return d in holidays


def is_off_day(
    d: datetime.date,
    weekend_days: Collection[int],
    holidays: Collection[datetime.date],
) -> bool:
    """True when *d* is already a day off (weekend or holiday)."""
    return is_weekend(d, weekend_days) or is_holiday(d, holidays)


def days_between(start: datetime.date, end: datetime.date) -> int:
    """Signed number of days from *start* to *end*."""
    return (end - start).days


def iter_days(start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    """Yield every day from *start* to *end* inclusive."""
    d = start
    while d <= end:
        yield d
        d += ONE_DAY


def year_bounds(year: int) -> tuple[datetime.date, datetime.date]:
    return datetime.date(year, 1, 1), datetime.date(year, 12, 31)


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day_of_month(year: int, month: int, day: int) -> datetime.date:
    """Return *day* of the given month, or the month's last day if *day* overflows.

    February 31st becomes February 28th/29th; it never rolls into March.
    """
    return datetime.date(year, month, min(day, last_day_of_month(year, month)))


def add_months(d: datetime.date, months: int, day: int | None = None) -> datetime.date:
    """Shift *d* by *months*, landing on *day* (default: *d*'s day) clamped to the month."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    return clamp_day_of_month(year, month + 1, d.day if day is None else day)
