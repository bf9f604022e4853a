"""Data types shared by the ledger engine and the day-off optimizer.

Configuration objects are frozen pydantic models so they can be validated
and round-tripped through JSON with the camelCase keys used by the stored
planner state.  Computed values (transactions, ledger entries) are plain
NamedTuples.
"""

from __future__ import annotations

import datetime
import enum
import math
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ptoledger.dates import DEFAULT_WEEKEND_DAYS, to_date

HOURS_PER_DAY = 8

DEFAULT_ACCRUAL_WEEKDAY = 4  # Friday
DEFAULT_DAY_OF_MONTH = 1
DEFAULT_BIWEEKLY_ANCHOR = datetime.date(2024, 1, 1)  # a Monday

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Unit(str, enum.Enum):
    """Unit a balance or an accrual rate is expressed in."""

    DAYS = "days"
    HOURS = "hours"


class AccrualFrequency(str, enum.Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "bi-weekly"
    MONTHLY = "monthly"


class TransactionType(str, enum.Enum):
    ADJUSTMENT = "adjustment"
    ACCRUAL = "accrual"
    CARRYOVER = "carryover"
    USAGE = "usage"

    @property
    def priority(self) -> int:
        """Same-day ordering: adjustments, then accruals, carryover, usage."""
        return _TYPE_PRIORITY[self]


_TYPE_PRIORITY: dict[TransactionType, int] = {
    TransactionType.ADJUSTMENT: 1,
    TransactionType.ACCRUAL: 2,
    TransactionType.CARRYOVER: 3,
    TransactionType.USAGE: 4,
}


def convert_amount(amount: float, from_unit: Unit, to_unit: Unit) -> float:
    """Convert *amount* between days and hours (8 hours = 1 day)."""
    from_unit, to_unit = Unit(from_unit), Unit(to_unit)
    if from_unit is to_unit:
        return amount
    if from_unit is Unit.HOURS:
        return amount / HOURS_PER_DAY
    return amount * HOURS_PER_DAY


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PayPeriodTemplate(CamelModel):
    """Rule that fixes the exact dates accruals land on.

    *frequency* is kept as free text so that an unsupported value reaches the
    accrual schedule, which reports it as a ``ConfigurationError`` instead of
    failing the whole configuration.  *anchor_date* sets the bi-weekly phase:
    accruals fall in weeks an even number of weeks away from it.
    """

    frequency: str
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    weekday: int | None = Field(default=None, ge=0, le=6)
    anchor_date: datetime.date | None = None

    @field_validator("frequency", mode="before")
    @classmethod
    def _frequency_text(cls, value: Any) -> Any:
        if isinstance(value, enum.Enum):
            return value.value
        return value


class CarryoverOptions(CamelModel):
    """Year-end carryover cap.  ``max_days=None`` means unbounded."""

    enabled: bool = False
    max_days: float | None = Field(default=None, ge=0)
    expiry_date: datetime.date | None = None

    @property
    def unbounded(self) -> bool:
        return self.max_days is None or math.isinf(self.max_days)


class PtoConfig(CamelModel):
    """Everything the ledger engine needs to compute a balance history.

    The balance is defined to equal *initial_balance* exactly on
    *as_of_date*.  The ledger covers Jan 1 of the first visible year through
    Dec 31 of the last one.
    """

    initial_balance: float = 0.0
    balance_unit: Unit = Unit.DAYS
    as_of_date: datetime.date
    accrual_rate: float = 0.0
    accrual_unit: Unit = Unit.DAYS
    accrual_frequency: AccrualFrequency = AccrualFrequency.MONTHLY
    visible_years: tuple[int, ...]
    carryover: CarryoverOptions = Field(default_factory=CarryoverOptions)
    pay_period_template: PayPeriodTemplate | None = None

    @field_validator("as_of_date", mode="before")
    @classmethod
    def _as_of_midnight(cls, value: Any) -> Any:
        if isinstance(value, (datetime.date, str)):
            return to_date(value)
        return value

    @field_validator("visible_years")
    @classmethod
    def _sorted_years(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value:
            raise ValueError("visible_years must contain at least one year")
        return tuple(sorted(set(value)))

    @property
    def range_start(self) -> datetime.date:
        return datetime.date(self.visible_years[0], 1, 1)

    @property
    def range_end(self) -> datetime.date:
        return datetime.date(self.visible_years[-1], 12, 31)

    def resolved_template(self) -> PayPeriodTemplate:
        """The configured template, or a frequency-only default (day 1 / Friday)."""
        if self.pay_period_template is not None:
            return self.pay_period_template
        return PayPeriodTemplate(
            frequency=self.accrual_frequency.value,
            day_of_month=DEFAULT_DAY_OF_MONTH,
            weekday=DEFAULT_ACCRUAL_WEEKDAY,
        )

    def normalize(self, amount: float, unit: Unit) -> float:
        """Express *amount* (given in *unit*) in this configuration's balance unit."""
        return convert_amount(amount, unit, self.balance_unit)

    def to_days(self, amount: float) -> float:
        """Express a balance-unit *amount* in days."""
        return convert_amount(amount, self.balance_unit, Unit.DAYS)


# ---------------------------------------------------------------------------
# Ledger values
# ---------------------------------------------------------------------------


class Transaction(NamedTuple):
    """A dated, signed balance change (positive = credit)."""

    date: datetime.date
    type: TransactionType
    amount: float
    note: str = ""

    @property
    def sort_key(self) -> tuple[datetime.date, int]:
        return (self.date, self.type.priority)


class DailyLedgerEntry(NamedTuple):
    """Closing balance of one day and the transactions applied on it."""

    balance: float
    transactions: tuple[Transaction, ...] = ()


Ledger = dict[str, DailyLedgerEntry]
"""Ledger keyed by ``YYYY-MM-DD``; one entry per day, in date order."""


# ---------------------------------------------------------------------------
# Optimizer inputs
# ---------------------------------------------------------------------------


class StrategyInput(NamedTuple):
    """Calendar snapshot handed to the day-off optimizer.

    *pto_balance* is in days and caps how many days a strategy proposes;
    per-day feasibility is checked separately through a balance oracle.
    """

    year: int
    holidays: tuple[datetime.date, ...] = ()
    weekends: frozenset[int] = DEFAULT_WEEKEND_DAYS
    pto_balance: float = 0.0
    accrual_rate: float = 0.0
    accrual_frequency: AccrualFrequency = AccrualFrequency.MONTHLY
