from __future__ import annotations

import datetime
import json

import pytest
from pydantic import ValidationError

from ptoledger.migration import (
    convert_sunday_weekdays,
    default_pay_period_template,
    from_sunday_weekday,
    migrate_config_data,
    needs_migration,
)
from ptoledger.models import CarryoverOptions, PtoConfig
from ptoledger.state import PlannerState

LEGACY_CONFIG = {
    "initialBalance": 5,
    "balanceUnit": "days",
    "asOfDate": "2024-01-01",
    "accrualRate": 4,
    "accrualUnit": "hours",
    "accrualFrequency": "bi-weekly",
    "visibleYears": [2024],
    "carryover": {"enabled": False},
}


class TestMigration:
    @pytest.mark.parametrize("frequency", ["weekly", "bi-weekly"])
    def test_weekly_templates_default_to_friday(self, frequency) -> None:
        template = default_pay_period_template(frequency)
        assert template.frequency == frequency
        assert template.weekday == 4
        assert template.day_of_month is None

    @pytest.mark.parametrize("frequency", ["monthly", "quarterly", None])
    def test_monthly_and_unknown_default_to_first(self, frequency) -> None:
        template = default_pay_period_template(frequency)
        assert template.frequency == "monthly"
        assert template.day_of_month == 1

    def test_adds_template_without_mutating_input(self) -> None:
        raw = dict(LEGACY_CONFIG)
        migrated = migrate_config_data(raw)
        assert migrated["payPeriodTemplate"] == {"frequency": "bi-weekly", "weekday": 4}
        assert "payPeriodTemplate" not in raw

    def test_existing_template_is_kept(self) -> None:
        raw = {**LEGACY_CONFIG, "payPeriodTemplate": {"frequency": "monthly", "dayOfMonth": 15}}
        assert not needs_migration(raw)
        assert migrate_config_data(raw) == raw


class TestSundayWeekdays:
    @pytest.mark.parametrize(("sunday_based", "expected"), [(0, 6), (1, 0), (5, 4), (6, 5)])
    def test_renumbering(self, sunday_based, expected) -> None:
        assert from_sunday_weekday(sunday_based) == expected

    def test_converts_weekend_and_template(self) -> None:
        raw = {
            "config": {**LEGACY_CONFIG, "payPeriodTemplate": {"frequency": "weekly", "weekday": 5}},
            "weekendDays": [0, 6],
        }
        converted = convert_sunday_weekdays(raw)
        assert converted["weekendDays"] == [6, 5]
        assert converted["config"]["payPeriodTemplate"]["weekday"] == 4
        assert raw["weekendDays"] == [0, 6]
        assert raw["config"]["payPeriodTemplate"]["weekday"] == 5

    def test_monthly_template_and_missing_weekend_pass_through(self) -> None:
        template = {"frequency": "monthly", "dayOfMonth": 15}
        converted = convert_sunday_weekdays({"config": {"payPeriodTemplate": template}})
        assert converted == {"config": {"payPeriodTemplate": template}}

    def test_state_loads_with_monday_based_weekdays(self) -> None:
        data = {
            "config": {**LEGACY_CONFIG, "payPeriodTemplate": {"frequency": "weekly", "weekday": 5}},
            "weekendDays": [0, 6],
        }
        state = PlannerState.from_data(data, sunday_weekdays=True)
        assert state.weekend_days == (5, 6)
        assert state.config.pay_period_template.weekday == 4

    def test_legacy_default_is_not_shifted(self) -> None:
        state = PlannerState.from_data({"config": LEGACY_CONFIG}, sunday_weekdays=True)
        assert state.config.pay_period_template.weekday == 4


class TestConfigValidation:
    def test_camel_and_snake_keys(self) -> None:
        a = PtoConfig.model_validate({"asOfDate": "2024-01-01", "visibleYears": [2024]})
        b = PtoConfig(as_of_date=datetime.date(2024, 1, 1), visible_years=(2024,))
        assert a == b

    def test_as_of_datetime_is_truncated(self) -> None:
        config = PtoConfig(as_of_date="2024-03-15T16:45:00", visible_years=[2024])
        assert config.as_of_date == datetime.date(2024, 3, 15)

    def test_years_sorted_and_unique(self) -> None:
        config = PtoConfig(as_of_date="2024-01-01", visible_years=[2025, 2024, 2025])
        assert config.visible_years == (2024, 2025)

    def test_years_required(self) -> None:
        with pytest.raises(ValidationError):
            PtoConfig(as_of_date="2024-01-01", visible_years=[])

    def test_negative_carryover_cap_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CarryoverOptions(enabled=True, max_days=-1)


class TestPlannerState:
    def test_round_trip(self, config) -> None:
        state = PlannerState(
            config=config,
            selected_days=[datetime.date(2024, 7, 5), datetime.date(2024, 3, 4)],
            holidays=[datetime.date(2024, 7, 4)],
        )
        restored = PlannerState.from_json(state.to_json())
        assert restored == state
        assert restored.selected_days == (datetime.date(2024, 3, 4), datetime.date(2024, 7, 5))

    def test_json_uses_camel_case_and_iso_dates(self, config) -> None:
        state = PlannerState(config=config, selected_days=["2024-03-04"])
        data = json.loads(state.to_json())
        assert data["selectedDays"] == ["2024-03-04"]
        assert data["config"]["asOfDate"] == "2024-01-01"
        assert data["config"]["payPeriodTemplate"]["dayOfMonth"] == 1
        assert data["weekendDays"] == [5, 6]

    def test_legacy_config_is_migrated_on_load(self) -> None:
        state = PlannerState.from_data({"config": LEGACY_CONFIG})
        template = state.config.pay_period_template
        assert template is not None
        assert template.frequency == "bi-weekly"
        assert template.weekday == 4

    def test_weekend_days_validated(self, config) -> None:
        with pytest.raises(ValidationError):
            PlannerState(config=config, weekend_days=(5, 7))
