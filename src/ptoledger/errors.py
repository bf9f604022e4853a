"""Exceptions raised by the PTO ledger engine."""

from __future__ import annotations


class PtoLedgerError(Exception):
    """Base class for all ledger and optimizer errors."""


class ConfigurationError(PtoLedgerError, ValueError):
    """A configuration value cannot be interpreted (e.g. unknown frequency)."""


class InsufficientBalanceError(PtoLedgerError):
    """A day cannot be added because the ledger shows less than one day available."""

    def __init__(self, day: object, available: float) -> None:
        self.day = day
        self.available = available
        super().__init__(f"Not enough PTO for {day}: {available:.2f} day(s) available")
