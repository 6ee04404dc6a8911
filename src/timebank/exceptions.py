"""Custom exception hierarchy for the TimeBank package."""

from __future__ import annotations


class TimeBankError(Exception):
    """Base class for all TimeBank specific errors."""


class InvalidPolicyError(TimeBankError, ValueError):
    """Raised when interest or multiplier settings are malformed."""


class InsufficientBalanceError(TimeBankError):
    """Raised when a usage entry would spend more minutes than are saved."""


class ChildNotFoundError(TimeBankError):
    """Raised when a child lookup fails."""


class DuplicateChildError(TimeBankError):
    """Raised when attempting to register a child that already exists."""


class DuplicateTransactionError(TimeBankError):
    """Raised when a transaction id is already present in a ledger."""


class EncouragementError(TimeBankError):
    """Raised when an encouragement message could not be generated."""


class EncouragementAuthError(EncouragementError):
    """Raised when the message service rejects the configured credentials."""
