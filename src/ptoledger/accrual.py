"""Accrual schedule generation from a pay-period template."""

from __future__ import annotations

import datetime
from collections.abc import Iterator

from ptoledger.config import get_logger
from ptoledger.dates import ONE_DAY, add_months, clamp_day_of_month
from ptoledger.errors import ConfigurationError
from ptoledger.models import (
    DEFAULT_ACCRUAL_WEEKDAY,
    DEFAULT_BIWEEKLY_ANCHOR,
    DEFAULT_DAY_OF_MONTH,
    AccrualFrequency,
    PayPeriodTemplate,
)

logger = get_logger(__name__)

MAX_SEARCH_DAYS = 366 * 2
"""Upper bound on the day-by-day scan for the first accrual date."""


class AccrualSchedule:
    """Produces the dates on which a pay-period template credits PTO.

    Monthly templates land on ``day_of_month`` (clamped to the last day of
    short months).  Weekly templates land on ``weekday`` every 7 days and
    bi-weekly templates every 14 days, in weeks that are an even number of
    weeks away from the template's anchor date.
    """

    def __init__(self, template: PayPeriodTemplate):
        try:
            self.frequency = AccrualFrequency(template.frequency)
        except ValueError:
            supported = ", ".join(f.value for f in AccrualFrequency)
            msg = f"Unsupported accrual frequency {template.frequency!r}. Supported: {supported}"
            raise ConfigurationError(msg) from None
        self.day_of_month = template.day_of_month or DEFAULT_DAY_OF_MONTH
        self.weekday = DEFAULT_ACCRUAL_WEEKDAY if template.weekday is None else template.weekday
        self.anchor = template.anchor_date or DEFAULT_BIWEEKLY_ANCHOR

    def matches(self, d: datetime.date) -> bool:
        """True when *d* is an accrual date under this template."""
        if self.frequency is AccrualFrequency.MONTHLY:
            return d == clamp_day_of_month(d.year, d.month, self.day_of_month)
        if d.weekday() != self.weekday:
            return False
        if self.frequency is AccrualFrequency.BIWEEKLY:
            return ((d - self.anchor).days // 7) % 2 == 0
        return True

    def first_accrual_date(self, start: datetime.date) -> datetime.date | None:
        """First accrual date on or after *start*, or None if the scan runs out."""
        d = start
        for _ in range(MAX_SEARCH_DAYS):
            if self.matches(d):
                return d
            d += ONE_DAY
        logger.warning(
            "accrual_search_exhausted",
            start=start.isoformat(),
            frequency=self.frequency.value,
            max_days=MAX_SEARCH_DAYS,
        )
        return None

    def next_accrual_date(self, current: datetime.date) -> datetime.date:
        """The accrual date following *current*."""
        if self.frequency is AccrualFrequency.MONTHLY:
            return add_months(current, 1, day=self.day_of_month)
        if self.frequency is AccrualFrequency.WEEKLY:
            return current + datetime.timedelta(days=7)
        return current + datetime.timedelta(days=14)

    def dates(self, start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
        """Yield every accrual date in ``[start, end]``."""
        current = self.first_accrual_date(start)
        while current is not None and current <= end:
            yield current
            current = self.next_accrual_date(current)
