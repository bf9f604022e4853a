from __future__ import annotations

import datetime

from ptoledger.carryover import carryover_transactions
from ptoledger.engine import PTOEngine
from ptoledger.models import CarryoverOptions, TransactionType
from ptoledger.transactions import base_transactions


def _config(make_config, carryover: CarryoverOptions, **overrides):
    values = {
        "initial_balance": 20,
        "accrual_rate": 0,
        "visible_years": (2024, 2025),
        "carryover": carryover,
    }
    values.update(overrides)
    return make_config(**values)


class TestCarryover:
    def test_excess_is_forfeited_on_jan_1(self, make_config) -> None:
        config = _config(make_config, CarryoverOptions(enabled=True, max_days=5))
        engine = PTOEngine(config)
        ledger = engine.build_ledger()
        assert engine.balance_on(ledger, datetime.date(2024, 12, 31)) == 20
        assert engine.balance_on(ledger, datetime.date(2025, 1, 1)) == 5

        carry = [
            tx for tx in ledger["2025-01-01"].transactions if tx.type is TransactionType.CARRYOVER
        ]
        assert len(carry) == 1
        assert carry[0].amount == -15
        assert "exceeded max 5" in carry[0].note

    def test_disabled(self, make_config) -> None:
        config = _config(make_config, CarryoverOptions(enabled=False, max_days=5))
        assert carryover_transactions(config, base_transactions(config)) == []

    def test_unbounded(self, make_config) -> None:
        config = _config(make_config, CarryoverOptions(enabled=True))
        assert config.carryover.unbounded
        assert carryover_transactions(config, base_transactions(config)) == []

    def test_within_cap(self, make_config) -> None:
        config = _config(make_config, CarryoverOptions(enabled=True, max_days=25))
        assert carryover_transactions(config, base_transactions(config)) == []

    def test_single_year_has_no_carryover(self, make_config) -> None:
        config = _config(
            make_config, CarryoverOptions(enabled=True, max_days=5), visible_years=(2024,)
        )
        assert carryover_transactions(config, base_transactions(config)) == []

    def test_cap_is_converted_to_hours(self, make_config) -> None:
        config = _config(
            make_config,
            CarryoverOptions(enabled=True, max_days=5),
            initial_balance=160,
            balance_unit="hours",
        )
        (tx,) = carryover_transactions(config, base_transactions(config))
        assert tx.date == datetime.date(2025, 1, 1)
        assert tx.amount == -120

    def test_usage_reduces_year_end_before_cap(self, make_config) -> None:
        config = _config(make_config, CarryoverOptions(enabled=True, max_days=5))
        days = [datetime.date(2024, 12, d) for d in (2, 3, 4)]
        (tx,) = carryover_transactions(config, base_transactions(config, days))
        assert tx.amount == -12
