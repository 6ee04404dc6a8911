"""Convert TimeBank data structures to JSON friendly dictionaries."""

from __future__ import annotations

from typing import Dict, Iterable, TYPE_CHECKING

from .clock import to_datetime
from .models import DailyActivity, LedgerStats, Policy, Transaction

if TYPE_CHECKING:  # pragma: no cover
    from .service import TimeBank


class ApiExporter:
    """Serialise children, transactions and settings for the web layer."""

    def child_snapshot(self, bank: "TimeBank", child_id: str, *, recent: int = 20) -> Dict[str, object]:
        child = bank.get_child(child_id)
        return {
            "child_id": child.child_id,
            "name": child.name,
            "emoji": child.emoji,
            "stats": self.stats(bank.stats(child_id)),
            "transactions": self.transactions(bank.history(child_id, limit=recent)),
            "activity": self.activity(bank.daily_activity(child_id)),
        }

    def stats(self, stats: LedgerStats) -> Dict[str, object]:
        return {
            "earned": stats.earned,
            "spent": stats.spent,
            "interest": stats.interest,
            "balance": stats.balance,
        }

    def transactions(self, transactions: Iterable[Transaction]) -> list[Dict[str, object]]:
        return [self._serialise_transaction(tx) for tx in transactions]

    def activity(self, days: Iterable[DailyActivity]) -> list[Dict[str, object]]:
        return [
            {
                "day": item.day.isoformat(),
                "studied": item.studied,
                "used": item.used,
                "interest": item.interest,
            }
            for item in days
        ]

    def policy(self, policy: Policy) -> Dict[str, object]:
        return policy.to_dict()

    def _serialise_transaction(self, transaction: Transaction) -> Dict[str, object]:
        payload = transaction.to_dict()
        payload["recorded_at"] = to_datetime(transaction.timestamp).isoformat()
        return payload


__all__ = ["ApiExporter"]
