from __future__ import annotations

import datetime

import pytest

from ptoledger.models import PayPeriodTemplate, PtoConfig


def _make_config(**overrides: object) -> PtoConfig:
    """Monthly accrual of 1 day on the 1st, 10 days as of 2024-01-01, 2024 visible."""
    values: dict[str, object] = {
        "initial_balance": 10,
        "as_of_date": datetime.date(2024, 1, 1),
        "accrual_rate": 1,
        "accrual_frequency": "monthly",
        "visible_years": (2024,),
        "pay_period_template": PayPeriodTemplate(frequency="monthly", day_of_month=1),
    }
    values.update(overrides)
    return PtoConfig(**values)


@pytest.fixture
def config() -> PtoConfig:
    return _make_config()


@pytest.fixture
def us_holidays_2025() -> list[datetime.date]:
    return [
        datetime.date(2025, 1, 1),
        datetime.date(2025, 1, 20),
        datetime.date(2025, 2, 17),
        datetime.date(2025, 5, 26),
        datetime.date(2025, 6, 19),
        datetime.date(2025, 7, 4),
        datetime.date(2025, 9, 1),
        datetime.date(2025, 11, 27),
        datetime.date(2025, 12, 25),
    ]


@pytest.fixture
def make_config():
    """Factory for configurations that differ from the default in a few fields."""
    return _make_config
