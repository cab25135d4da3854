"""
errors.py — Validation failures of the ledger

Every error is local and caller-correctable: the computation is pure, so the
caller fixes the input and calls again. Nothing here is retryable.

All errors derive from LedgerError, itself a ValueError.
"""

from __future__ import annotations
from typing import Any, Optional


class LedgerError(ValueError):
    """Base class for ledger and settlement validation failures."""


class UnknownCurrency(LedgerError):
    """A currency code is missing from the rate table."""

    def __init__(self, code: str, available: Optional[list[str]] = None):
        self.code = code
        self.available = available or []
        message = f"Unknown currency: {code!r}"
        if self.available:
            message += f" (rate table has: {', '.join(self.available)})"
        super().__init__(message)


class ShareSumMismatch(LedgerError):
    """Shares of an expense do not add up to its total."""

    def __init__(self, expected: Any, actual: Any, expense_id: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        self.expense_id = expense_id
        where = f" in expense {expense_id!r}" if expense_id else ""
        super().__init__(f"Shares sum to {actual}, expected {expected}{where}")


class UnknownParticipant(LedgerError):
    """An expense references a participant outside the trip."""

    def __init__(self, participant_id: str, expense_id: Optional[str] = None):
        self.participant_id = participant_id
        self.expense_id = expense_id
        where = f" referenced by expense {expense_id!r}" if expense_id else ""
        super().__init__(f"Unknown participant {participant_id!r}{where}")


class ZeroParticipants(LedgerError):
    """A split was requested over an empty participant set."""

    def __init__(self, message: str = "Cannot split an amount among zero participants"):
        super().__init__(message)
