"""High level service coordinating children, the ledger and interest."""

from __future__ import annotations

import threading
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple
from uuid import uuid4

from .clock import now_ms
from .encouragement import CannedEncouragement, EncouragementProvider, fallback_message
from .exceptions import (
    ChildNotFoundError,
    DuplicateChildError,
    EncouragementAuthError,
    EncouragementError,
    InsufficientBalanceError,
)
from .i18n import Translator
from .interest import compute_accruals
from .ledger import compute_balance, compute_stats, daily_activity, transactions_for
from .minutes import MinutesLike, apply_multiplier, format_minutes, require_positive, to_minutes
from .models import (
    DEFAULT_POLICY,
    ActivityReceipt,
    ChildProfile,
    DailyActivity,
    LedgerStats,
    Policy,
    StudyCategory,
    Transaction,
    TransactionType,
    UsageCategory,
)
from .ops import StructuredLogger
from .store import HistoryStore, InMemoryStore


class TimeBank:
    """Track study deposits, screen-time withdrawals and interest for children."""

    __slots__ = (
        "_store",
        "_children",
        "_clock",
        "_encouragement",
        "_translator",
        "_logger",
        "_auto_accrue",
        "_lock",
    )

    def __init__(
        self,
        *,
        store: HistoryStore | None = None,
        children: Iterable[ChildProfile] = (),
        clock: Callable[[], int] = now_ms,
        encouragement: EncouragementProvider | None = None,
        translator: Translator | None = None,
        logger: StructuredLogger | None = None,
        auto_accrue: bool = True,
    ) -> None:
        self._store: HistoryStore = store if store is not None else InMemoryStore()
        self._children: Dict[str, ChildProfile] = {}
        self._clock = clock
        self._translator = translator or Translator()
        self._encouragement = encouragement or CannedEncouragement(self._translator)
        self._logger = logger or StructuredLogger()
        self._auto_accrue = auto_accrue
        self._lock = threading.RLock()
        for child in children:
            self._register(child)

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------
    def add_child(self, child_id: str, name: str, emoji: str = "") -> ChildProfile:
        child = ChildProfile(child_id=child_id, name=name, emoji=emoji)
        self._register(child)
        self._logger.log("child_added", child=child_id)
        return child

    def _register(self, child: ChildProfile) -> None:
        if child.child_id in self._children:
            raise DuplicateChildError(f"Child '{child.child_id}' already exists.")
        self._children[child.child_id] = child

    def get_child(self, child_id: str) -> ChildProfile:
        try:
            return self._children[child_id]
        except KeyError as exc:
            raise ChildNotFoundError(f"Child '{child_id}' does not exist.") from exc

    def children(self) -> Tuple[ChildProfile, ...]:
        return tuple(self._children.values())

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    @property
    def policy(self) -> Policy:
        return self._store.load_policy() or DEFAULT_POLICY

    @property
    def translator(self) -> Translator:
        return self._translator

    @property
    def logger(self) -> StructuredLogger:
        return self._logger

    def update_policy(self, policy: Policy) -> Policy:
        policy.validate()
        self._store.save_policy(policy)
        self._logger.log("policy_updated", **policy.to_dict())
        return policy

    def set_multiplier(self, category: StudyCategory | UsageCategory, value: float) -> Policy:
        return self.update_policy(self.policy.with_multiplier(category, value))

    def reset_policy(self) -> Policy:
        self._store.clear_policy()
        self._logger.log("policy_reset")
        return DEFAULT_POLICY

    # ------------------------------------------------------------------
    # Activity logging
    # ------------------------------------------------------------------
    def log_study(
        self,
        child_id: str,
        category: StudyCategory | str,
        minutes: MinutesLike,
        *,
        note: str | None = None,
    ) -> ActivityReceipt:
        child = self.get_child(child_id)
        study = StudyCategory(category)
        base = require_positive(to_minutes(minutes))
        multiplier = self.policy.multiplier_for(study)
        amount = apply_multiplier(base, multiplier)
        message, credentials_required = self._encourage(child, base, TransactionType.DEPOSIT)
        transaction = self._record(
            child_id,
            TransactionType.DEPOSIT,
            amount,
            category=study.value,
            base_amount=base,
            multiplier=multiplier,
            note=note or self._translator.translate(f"study.{study.value}"),
            message=message,
        )
        self._logger.log("study_logged", child=child_id, category=study.value, base=base, amount=amount)
        return ActivityReceipt(transaction=transaction, message=message, credentials_required=credentials_required)

    def log_usage(
        self,
        child_id: str,
        category: UsageCategory | str,
        minutes: MinutesLike,
        *,
        note: str | None = None,
    ) -> ActivityReceipt:
        child = self.get_child(child_id)
        usage = UsageCategory(category)
        base = require_positive(to_minutes(minutes))
        multiplier = self.policy.multiplier_for(usage)
        amount = apply_multiplier(base, multiplier)
        self._ensure_funds(child, max(base, amount))
        message, credentials_required = self._encourage(child, base, TransactionType.WITHDRAW)
        with self._lock:
            # The balance may have moved while the message was generated.
            self._ensure_funds(child, max(base, amount))
            transaction = self._record(
                child_id,
                TransactionType.WITHDRAW,
                amount,
                category=usage.value,
                base_amount=base,
                multiplier=multiplier,
                note=note or self._translator.translate(f"usage.{usage.value}"),
                message=message,
            )
        self._logger.log("usage_logged", child=child_id, category=usage.value, base=base, amount=amount)
        return ActivityReceipt(transaction=transaction, message=message, credentials_required=credentials_required)

    def _ensure_funds(self, child: ChildProfile, needed: int) -> None:
        current = self.balance(child.child_id)
        if needed > current:
            raise InsufficientBalanceError(
                f"'{child.name}' has {format_minutes(current)} saved but needs {format_minutes(needed)}."
            )

    def _encourage(self, child: ChildProfile, amount: int, kind: TransactionType) -> tuple[str, bool]:
        try:
            return self._encouragement.get_encouragement(child.name, amount, kind), False
        except EncouragementAuthError as exc:
            self._logger.log("encouragement_auth_issue", child=child.child_id, error=str(exc))
            return fallback_message(self._translator, child.name, kind), True
        except EncouragementError as exc:
            self._logger.log("encouragement_failed", child=child.child_id, error=str(exc))
            return fallback_message(self._translator, child.name, kind), False
        except Exception as exc:
            self._logger.log("encouragement_failed", child=child.child_id, error=repr(exc))
            return fallback_message(self._translator, child.name, kind), False

    def _record(self, child_id: str, kind: TransactionType, amount: int, **details: object) -> Transaction:
        transaction = Transaction(
            id=uuid4().hex,
            child_id=child_id,
            type=kind,
            amount=amount,
            timestamp=self._clock(),
            **details,  # type: ignore[arg-type]
        )
        with self._lock:
            self._store.append((transaction,))
        return transaction

    # ------------------------------------------------------------------
    # Interest
    # ------------------------------------------------------------------
    def process_interest(self, child_id: str | None = None) -> Tuple[Transaction, ...]:
        """Append every interest payment owed up to now and return the new entries."""

        targets: Sequence[str] = [self.get_child(child_id).child_id] if child_id is not None else list(self._children)
        with self._lock:
            return self._accrue(targets)

    def _accrue(self, targets: Sequence[str]) -> Tuple[Transaction, ...]:
        policy = self.policy
        now = self._clock()
        history = self._store.load_transactions()
        note = self._translator.translate(
            "interest.note",
            hours=f"{policy.interest_threshold_hours:g}",
            percent=f"{policy.interest_rate * 100:g}",
        )
        message = self._translator.translate("interest.message")
        added: list[Transaction] = []
        for target in targets:
            owed = compute_accruals(history, target, policy, now, note=note, message=message)
            if not owed:
                continue
            stored = self._store.append(owed)
            added.extend(stored)
            if stored:
                self._logger.log(
                    "interest_accrued",
                    child=target,
                    payments=len(stored),
                    minutes=sum(tx.amount for tx in stored),
                )
        return tuple(added)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def _refresh(self, child_id: str) -> Sequence[Transaction]:
        self.get_child(child_id)
        if self._auto_accrue:
            self.process_interest(child_id)
        return self._store.load_transactions()

    def balance(self, child_id: str) -> int:
        return compute_balance(self._refresh(child_id), child_id)

    def stats(self, child_id: str) -> LedgerStats:
        return compute_stats(self._refresh(child_id), child_id)

    def history(self, child_id: str, *, limit: Optional[int] = None) -> Tuple[Transaction, ...]:
        """Return ``child_id``'s transactions newest first."""

        ordered = list(reversed(transactions_for(self._refresh(child_id), child_id)))
        if limit is not None:
            if limit < 0:
                raise ValueError("limit must not be negative")
            ordered = ordered[:limit]
        return tuple(ordered)

    def daily_activity(self, child_id: str, *, days: int = 5) -> Tuple[DailyActivity, ...]:
        return daily_activity(self._refresh(child_id), child_id, now=self._clock(), days=days)

    def summary(self) -> str:
        if not self._children:
            return "No children have been added yet."
        lines = ["TimeBank summary:"]
        for child in self._children.values():
            lines.append(f"- {child.name}: {format_minutes(self.balance(child.child_id))}")
        return "\n".join(lines)


__all__ = ["TimeBank"]
