"""PTO Ledger.

Track accrual and consumption of paid time off as a day-by-day balance
history, and suggest which workdays to take off so that PTO bridges
weekends and holidays into longer breaks.
"""

from ptoledger.engine import PTOEngine, build_ledger
from ptoledger.errors import ConfigurationError, InsufficientBalanceError, PtoLedgerError
from ptoledger.ledger import get_balance_on_date
from ptoledger.models import (
    AccrualFrequency,
    CarryoverOptions,
    DailyLedgerEntry,
    PayPeriodTemplate,
    PtoConfig,
    StrategyInput,
    Transaction,
    TransactionType,
    Unit,
    convert_amount,
)
from ptoledger.optimizer import (
    STRATEGY_DESCRIPTIONS,
    DayOffOptimizer,
    Plan,
    Strategy,
    suggest_days,
)
from ptoledger.state import PlannerState

__all__ = [
    "STRATEGY_DESCRIPTIONS",
    "AccrualFrequency",
    "CarryoverOptions",
    "ConfigurationError",
    "DailyLedgerEntry",
    "DayOffOptimizer",
    "InsufficientBalanceError",
    "PTOEngine",
    "PayPeriodTemplate",
    "Plan",
    "PlannerState",
    "PtoConfig",
    "PtoLedgerError",
    "Strategy",
    "StrategyInput",
    "Transaction",
    "TransactionType",
    "Unit",
    "build_ledger",
    "convert_amount",
    "get_balance_on_date",
    "suggest_days",
]
