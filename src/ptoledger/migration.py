"""Upgrade stored planner data to the current shape.

Older stored configurations only carry ``accrualFrequency``.  Before such a
configuration reaches the engine, a template is derived from it: monthly
accruals on the 1st, weekly and bi-weekly accruals on Fridays.

State written by JavaScript clients numbers weekdays with ``Date.getDay()``,
Sunday = 0 through Saturday = 6, so its Friday is 5 and its default weekend
is ``[0, 6]``.  This package uses ``datetime.date.weekday()`` numbering,
Monday = 0 through Sunday = 6.  :func:`convert_sunday_weekdays` rewrites
``weekendDays`` and the pay-period template's ``weekday``; it must run
before :func:`migrate_config_data`, whose defaults are already Monday-based.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ptoledger.config import get_logger
from ptoledger.models import (
    DEFAULT_ACCRUAL_WEEKDAY,
    DEFAULT_DAY_OF_MONTH,
    AccrualFrequency,
    PayPeriodTemplate,
)

logger = get_logger(__name__)

_TEMPLATE_KEYS = ("payPeriodTemplate", "pay_period_template")
_WEEKEND_KEYS = ("weekendDays", "weekend_days")


def default_pay_period_template(legacy_frequency: str | None = None) -> PayPeriodTemplate:
    """Template for a legacy frequency; anything unrecognized is treated as monthly."""
    try:
        frequency = AccrualFrequency(legacy_frequency)
    except ValueError:
        frequency = AccrualFrequency.MONTHLY
    if frequency is AccrualFrequency.MONTHLY:
        return PayPeriodTemplate(frequency=frequency.value, day_of_month=DEFAULT_DAY_OF_MONTH)
    return PayPeriodTemplate(frequency=frequency.value, weekday=DEFAULT_ACCRUAL_WEEKDAY)


def needs_migration(raw: Mapping[str, Any]) -> bool:
    return all(raw.get(key) is None for key in _TEMPLATE_KEYS)


def migrate_config_data(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *raw* with a pay-period template filled in if absent."""
    data = dict(raw)
    if not needs_migration(data):
        return data
    legacy = data.get("accrualFrequency", data.get("accrual_frequency"))
    template = default_pay_period_template(legacy)
    data["payPeriodTemplate"] = template.model_dump(by_alias=True, exclude_none=True)
    logger.info(
        "pay_period_template_migrated",
        legacy_frequency=legacy,
        template=data["payPeriodTemplate"],
    )
    return data


def from_sunday_weekday(day: int) -> int:
    """Map Sunday = 0 numbering onto Monday = 0 numbering."""
    return (day - 1) % 7


def _convert_template(template: Mapping[str, Any]) -> dict[str, Any]:
    converted = dict(template)
    if isinstance(converted.get("weekday"), int):
        converted["weekday"] = from_sunday_weekday(converted["weekday"])
    return converted


def convert_sunday_weekdays(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of a state document with Sunday-based weekdays renumbered.

    Only values that are present are touched; a template without a weekday
    and a missing weekend list pass through unchanged.
    """
    data = dict(raw)
    for key in _WEEKEND_KEYS:
        if isinstance(data.get(key), list):
            data[key] = [from_sunday_weekday(d) for d in data[key]]

    config = data.get("config")
    if isinstance(config, Mapping):
        config = dict(config)
        for key in _TEMPLATE_KEYS:
            if isinstance(config.get(key), Mapping):
                config[key] = _convert_template(config[key])
        data["config"] = config

    logger.info(
        "sunday_weekdays_converted",
        weekend_days=data.get("weekendDays", data.get("weekend_days")),
    )
    return data
