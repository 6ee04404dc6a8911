"""Domain models used by the TimeBank package."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .exceptions import InvalidPolicyError


class TransactionType(str, Enum):
    """Enumerates the supported kinds of ledger entries."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    INTEREST = "interest"

    @property
    def sign(self) -> int:
        return -1 if self is TransactionType.WITHDRAW else 1


class StudyCategory(str, Enum):
    """Study activities that earn minutes."""

    WORKBOOK = "workbook"
    BOOK = "book"
    VIDEO = "video"


class UsageCategory(str, Enum):
    """Screen activities that spend minutes."""

    YOUTUBE_GAME = "youtube_game"
    TV_WATCH = "tv_watch"


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single immutable ledger entry for one child."""

    id: str
    child_id: str
    type: TransactionType
    amount: int
    timestamp: int
    category: Optional[str] = None
    base_amount: Optional[int] = None
    multiplier: Optional[float] = None
    note: Optional[str] = None
    message: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", TransactionType(self.type))
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError("amount must be an integer number of minutes")
        if self.amount < 0:
            raise ValueError("amount cannot be negative")
        object.__setattr__(self, "timestamp", int(self.timestamp))

    @property
    def signed_amount(self) -> int:
        """Return the effect of this entry on the balance."""

        return self.type.sign * self.amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "child_id": self.child_id,
            "type": self.type.value,
            "amount": self.amount,
            "timestamp": self.timestamp,
            "category": self.category,
            "base_amount": self.base_amount,
            "multiplier": self.multiplier,
            "note": self.note,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Transaction":
        return cls(
            id=str(payload["id"]),
            child_id=str(payload["child_id"]),
            type=TransactionType(payload["type"]),
            amount=int(payload["amount"]),
            timestamp=int(payload["timestamp"]),
            category=payload.get("category"),
            base_amount=payload.get("base_amount"),
            multiplier=payload.get("multiplier"),
            note=payload.get("note"),
            message=payload.get("message"),
        )


@dataclass(frozen=True, slots=True)
class ChildProfile:
    """A child whose minutes are tracked by the bank."""

    child_id: str
    name: str
    emoji: str = ""

    def __post_init__(self) -> None:
        if not self.child_id.strip():
            raise ValueError("child_id cannot be blank")
        if not self.name.strip():
            raise ValueError("name cannot be blank")


def _default_study_multipliers() -> Dict[str, float]:
    return {
        StudyCategory.WORKBOOK.value: 2.0,
        StudyCategory.BOOK.value: 1.5,
        StudyCategory.VIDEO.value: 1.2,
    }


def _default_usage_multipliers() -> Dict[str, float]:
    return {
        UsageCategory.YOUTUBE_GAME.value: 1.2,
        UsageCategory.TV_WATCH.value: 1.0,
    }


def _normalise_table(
    raw: Mapping[Any, Any], allowed: type[Enum], label: str
) -> Mapping[str, float]:
    if not isinstance(raw, Mapping):
        raise InvalidPolicyError(f"{label} multipliers must be a mapping")
    table: Dict[str, float] = {}
    for key, value in raw.items():
        try:
            category = allowed(key).value
        except ValueError as exc:
            raise InvalidPolicyError(f"Unknown {label} category: {key!r}") from exc
        try:
            multiplier = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidPolicyError(f"{label} multiplier for {category} is not a number") from exc
        if not math.isfinite(multiplier) or multiplier <= 0:
            raise InvalidPolicyError(f"{label} multiplier for {category} must be positive")
        table[category] = multiplier
    missing = [member.value for member in allowed if member.value not in table]
    if missing:
        raise InvalidPolicyError(f"Missing {label} multipliers: {', '.join(missing)}")
    return MappingProxyType(table)


@dataclass(frozen=True)
class Policy:
    """Interest and multiplier settings shared by every child."""

    study_multipliers: Mapping[str, float] = field(default_factory=_default_study_multipliers)
    usage_multipliers: Mapping[str, float] = field(default_factory=_default_usage_multipliers)
    interest_rate: float = 0.05
    interest_threshold_hours: float = 48

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "study_multipliers", _normalise_table(self.study_multipliers, StudyCategory, "study")
        )
        object.__setattr__(
            self, "usage_multipliers", _normalise_table(self.usage_multipliers, UsageCategory, "usage")
        )
        self.validate()

    def validate(self) -> None:
        """Raise :class:`InvalidPolicyError` when rate or threshold are unusable."""

        for name in ("interest_rate", "interest_threshold_hours"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidPolicyError(f"{name} must be a number")
            if not math.isfinite(value):
                raise InvalidPolicyError(f"{name} must be finite")
            if value < 0:
                raise InvalidPolicyError(f"{name} cannot be negative")

    def multiplier_for(self, category: StudyCategory | UsageCategory) -> float:
        if isinstance(category, StudyCategory):
            return self.study_multipliers[category.value]
        return self.usage_multipliers[category.value]

    def with_multiplier(self, category: StudyCategory | UsageCategory, value: float) -> "Policy":
        """Return a copy with one multiplier table entry changed."""

        if isinstance(category, StudyCategory):
            table = dict(self.study_multipliers)
            table[category.value] = value
            return self.replace(study_multipliers=table)
        table = dict(self.usage_multipliers)
        table[category.value] = value
        return self.replace(usage_multipliers=table)

    def replace(self, **changes: Any) -> "Policy":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "study_multipliers": dict(self.study_multipliers),
            "usage_multipliers": dict(self.usage_multipliers),
            "interest_rate": self.interest_rate,
            "interest_threshold_hours": self.interest_threshold_hours,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Policy":
        defaults = cls()
        return cls(
            study_multipliers=payload.get("study_multipliers", defaults.study_multipliers),
            usage_multipliers=payload.get("usage_multipliers", defaults.usage_multipliers),
            interest_rate=payload.get("interest_rate", defaults.interest_rate),
            interest_threshold_hours=payload.get("interest_threshold_hours", defaults.interest_threshold_hours),
        )


DEFAULT_POLICY = Policy()


@dataclass(slots=True)
class LedgerStats:
    """Totals shown on the parent dashboard."""

    earned: int
    spent: int
    interest: int
    balance: int


@dataclass(slots=True)
class DailyActivity:
    """Minutes studied and used on a single day."""

    day: date
    studied: int = 0
    used: int = 0
    interest: int = 0


@dataclass(slots=True)
class ActivityReceipt:
    """Result of logging a study or usage entry."""

    transaction: Transaction
    message: str
    credentials_required: bool = False
