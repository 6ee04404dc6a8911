"""Balance derivation and the append-only transaction ledger."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, Iterator, Tuple

from .clock import day_of
from .exceptions import DuplicateTransactionError
from .models import DailyActivity, LedgerStats, Transaction, TransactionType


def compute_balance(history: Iterable[Transaction], child_id: str) -> int:
    """Return the signed sum of ``child_id``'s transactions.

    Deposits and interest add their amount, withdrawals subtract it. The
    result does not depend on the order of ``history``.
    """

    return sum(tx.signed_amount for tx in history if tx.child_id == child_id)


def transactions_for(history: Iterable[Transaction], child_id: str) -> list[Transaction]:
    """Return ``child_id``'s transactions sorted by timestamp, oldest first."""

    return sorted((tx for tx in history if tx.child_id == child_id), key=lambda tx: tx.timestamp)


def compute_stats(history: Iterable[Transaction], child_id: str) -> LedgerStats:
    earned = spent = interest = 0
    for tx in history:
        if tx.child_id != child_id:
            continue
        if tx.type is TransactionType.WITHDRAW:
            spent += tx.amount
        else:
            earned += tx.amount
            if tx.type is TransactionType.INTEREST:
                interest += tx.amount
    return LedgerStats(earned=earned, spent=spent, interest=interest, balance=earned - spent)


def daily_activity(
    history: Iterable[Transaction],
    child_id: str,
    *,
    now: int,
    days: int = 5,
) -> Tuple[DailyActivity, ...]:
    """Bucket ``child_id``'s minutes into the ``days`` UTC days ending at ``now``."""

    if days <= 0:
        raise ValueError("days must be positive")
    today = day_of(now)
    buckets: Dict[date, DailyActivity] = {}
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        buckets[day] = DailyActivity(day=day)
    for tx in history:
        if tx.child_id != child_id:
            continue
        bucket = buckets.get(day_of(tx.timestamp))
        if bucket is None:
            continue
        if tx.type is TransactionType.WITHDRAW:
            bucket.used += tx.amount
        elif tx.type is TransactionType.INTEREST:
            bucket.interest += tx.amount
        else:
            bucket.studied += tx.amount
    return tuple(buckets.values())


class Ledger:
    """Append-only collection of transactions keyed by id."""

    __slots__ = ("_transactions", "_ids")

    def __init__(self, transactions: Iterable[Transaction] = ()) -> None:
        self._transactions: list[Transaction] = []
        self._ids: set[str] = set()
        for transaction in transactions:
            self.append(transaction)

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._transactions))

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._ids

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        """Return an immutable view of the history in insertion order."""

        return tuple(self._transactions)

    def append(self, transaction: Transaction) -> Transaction:
        if transaction.id in self._ids:
            raise DuplicateTransactionError(f"Transaction '{transaction.id}' is already recorded.")
        self._transactions.append(transaction)
        self._ids.add(transaction.id)
        return transaction

    def merge(self, transactions: Iterable[Transaction]) -> Tuple[Transaction, ...]:
        """Append every transaction whose id is not yet present and return those added."""

        added: list[Transaction] = []
        for transaction in transactions:
            if transaction.id in self._ids:
                continue
            added.append(self.append(transaction))
        return tuple(added)
