"""Retroactive interest accrual for unspent minutes.

Interest is paid once per elapsed day since the last payment (or since the
child's first transaction), provided no withdrawal happened in the trailing
threshold window before that day's boundary. Each payment compounds into the
balance used for the following day.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_FLOOR
from typing import Iterable, Tuple

from .clock import INTEREST_PERIOD_MS, hours_to_ms
from .ledger import compute_balance, transactions_for
from .models import Policy, Transaction, TransactionType


def interest_transaction_id(child_id: str, boundary: int) -> str:
    """Return the id of the interest payment for ``child_id`` at ``boundary``."""

    return f"interest-{child_id}-{boundary}"


def interest_for(balance: int, rate: float) -> int:
    """Return ``floor(balance * rate)`` for a positive ``balance``."""

    if balance <= 0:
        return 0
    amount = Decimal(balance) * Decimal(str(rate))
    return int(amount.to_integral_value(rounding=ROUND_FLOOR))


def last_checkpoint(transactions: Iterable[Transaction]) -> int | None:
    """Return the latest interest timestamp, else the earliest timestamp."""

    ordered = sorted(transactions, key=lambda tx: tx.timestamp)
    if not ordered:
        return None
    for tx in reversed(ordered):
        if tx.type is TransactionType.INTEREST:
            return tx.timestamp
    return ordered[0].timestamp


def compute_accruals(
    history: Iterable[Transaction],
    child_id: str,
    policy: Policy,
    now: int,
    *,
    note: str | None = None,
    message: str | None = None,
) -> Tuple[Transaction, ...]:
    """Return the interest transactions owed to ``child_id`` up to ``now``.

    ``history`` is not modified and may be unsorted. The result is ordered
    oldest first and contains no payment for a boundary already paid, since
    checking resumes one period after the latest interest entry.
    """

    policy.validate()
    transactions = transactions_for(history, child_id)
    checkpoint = last_checkpoint(transactions)
    if checkpoint is None:
        return tuple()

    window = hours_to_ms(policy.interest_threshold_hours)
    withdrawals = [tx.timestamp for tx in transactions if tx.type is TransactionType.WITHDRAW]
    running_balance = compute_balance(transactions, child_id)
    accrued: list[Transaction] = []

    cursor = checkpoint + INTEREST_PERIOD_MS
    while cursor <= now:
        threshold_start = cursor - window
        withdrew_recently = any(threshold_start < stamp <= cursor for stamp in withdrawals)
        if not withdrew_recently and running_balance > 0:
            amount = interest_for(running_balance, policy.interest_rate)
            if amount > 0:
                accrued.append(
                    Transaction(
                        id=interest_transaction_id(child_id, cursor),
                        child_id=child_id,
                        type=TransactionType.INTEREST,
                        amount=amount,
                        timestamp=cursor,
                        note=note,
                        message=message,
                    )
                )
                running_balance += amount
        cursor += INTEREST_PERIOD_MS

    return tuple(accrued)


__all__ = ["compute_accruals", "interest_for", "interest_transaction_id", "last_checkpoint"]
