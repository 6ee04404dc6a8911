"""Storage contract for transaction history and settings."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .ledger import Ledger
from .models import Policy, Transaction


@runtime_checkable
class HistoryStore(Protocol):
    """Whatever currently holds the authoritative history and policy.

    ``append`` must ignore transactions whose id is already stored and return
    only the ones it added. Appends are expected to be serialised so that
    concurrent writers cannot record the same id twice.
    """

    def load_transactions(self) -> Sequence[Transaction]:
        ...

    def append(self, transactions: Iterable[Transaction]) -> Tuple[Transaction, ...]:
        ...

    def load_policy(self) -> Optional[Policy]:
        ...

    def save_policy(self, policy: Policy) -> None:
        ...

    def clear_policy(self) -> None:
        ...


class InMemoryStore:
    """Process-local store used by tests and embedded callers."""

    def __init__(self, transactions: Iterable[Transaction] = (), *, policy: Policy | None = None) -> None:
        self._ledger = Ledger(transactions)
        self._policy = policy

    def load_transactions(self) -> Sequence[Transaction]:
        return self._ledger.transactions

    def append(self, transactions: Iterable[Transaction]) -> Tuple[Transaction, ...]:
        return self._ledger.merge(transactions)

    def load_policy(self) -> Optional[Policy]:
        return self._policy

    def save_policy(self, policy: Policy) -> None:
        self._policy = policy

    def clear_policy(self) -> None:
        self._policy = None


__all__ = ["HistoryStore", "InMemoryStore"]
