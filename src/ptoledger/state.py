"""Persisted planner state: configuration, selected days and calendar context.

The JSON shape uses camelCase keys and ISO ``YYYY-MM-DD`` dates; numbers are
written with full float precision so a load/save cycle is lossless.
"""

from __future__ import annotations

import datetime
import json
from typing import Any

from pydantic import field_validator

from ptoledger.dates import DEFAULT_WEEKEND_DAYS, to_date
from ptoledger.migration import convert_sunday_weekdays, migrate_config_data
from ptoledger.models import CamelModel, PtoConfig


class PlannerState(CamelModel):
    config: PtoConfig
    selected_days: tuple[datetime.date, ...] = ()
    weekend_days: tuple[int, ...] = tuple(sorted(DEFAULT_WEEKEND_DAYS))
    holidays: tuple[datetime.date, ...] = ()

    @field_validator("selected_days", "holidays", mode="before")
    @classmethod
    def _unique_days(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple, set, frozenset)):
            return tuple(sorted({to_date(v) for v in value}))
        return value

    @field_validator("weekend_days")
    @classmethod
    def _weekday_range(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if any(not 0 <= d <= 6 for d in value):
            raise ValueError("weekend days must be between 0 (Monday) and 6 (Sunday)")
        return tuple(sorted(set(value)))

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_data(cls, data: Any, *, sunday_weekdays: bool = False) -> PlannerState:
        """Validate parsed data, migrating a legacy configuration first.

        Pass ``sunday_weekdays=True`` for data that numbers weekdays from
        Sunday = 0; see :mod:`ptoledger.migration`.
        """
        if sunday_weekdays and isinstance(data, dict):
            data = convert_sunday_weekdays(data)
        if isinstance(data, dict) and isinstance(data.get("config"), dict):
            data = {**data, "config": migrate_config_data(data["config"])}
        return cls.model_validate(data)

    @classmethod
    def from_json(cls, text: str, *, sunday_weekdays: bool = False) -> PlannerState:
        return cls.from_data(json.loads(text), sunday_weekdays=sunday_weekdays)
