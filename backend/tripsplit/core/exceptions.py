"""
Errors raised by the split, balance and settlement services.
"""
from decimal import Decimal
from typing import Any, Dict, Optional


class LedgerError(ValueError):
    """Base class for expected, user-correctable ledger errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidSplit(LedgerError):
    """Split input that cannot produce any split (bad amount, weights or participants)."""


class ImbalancedLedger(LedgerError):
    """Balances that do not sum to zero; the expense data must be re-checked."""

    def __init__(self, difference: Decimal):
        super().__init__(
            f"Balances do not add up (off by {difference}). Please re-check expenses.",
            {"difference": str(difference)}
        )
        self.difference = difference
