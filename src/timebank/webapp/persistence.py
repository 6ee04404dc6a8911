"""Persistence and SQLModel definitions for the TimeBank web service."""
from __future__ import annotations

import json
import threading
from typing import Iterable, Optional, Sequence, Tuple

from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, create_engine, select

from ..exceptions import InvalidPolicyError
from ..models import Policy, Transaction, TransactionType
from .config import SQLITE_FILE_NAME

POLICY_KEY = "policy"


# ---------------------------------------------------------------------------
# Database models
# ---------------------------------------------------------------------------
class TransactionRecord(SQLModel, table=True):
    id: str = Field(primary_key=True)
    child_id: str = Field(index=True)
    type: str
    amount: int
    timestamp: int = Field(index=True)
    category: Optional[str] = None
    base_amount: Optional[int] = None
    multiplier: Optional[float] = None
    note: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionRecord":
        return cls(**transaction.to_dict())

    def to_transaction(self) -> Transaction:
        return Transaction(
            id=self.id,
            child_id=self.child_id,
            type=TransactionType(self.type),
            amount=self.amount,
            timestamp=self.timestamp,
            category=self.category,
            base_amount=self.base_amount,
            multiplier=self.multiplier,
            note=self.note,
            message=self.message,
        )


class MetaKV(SQLModel, table=True):
    k: str = Field(primary_key=True)
    v: str


def make_engine(path: str = SQLITE_FILE_NAME) -> Engine:
    return create_engine(
        f"sqlite:///{path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


class SqlStore:
    """:class:`~timebank.store.HistoryStore` backed by SQLModel tables."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._append_lock = threading.Lock()
        init_db(engine)

    def load_transactions(self) -> Sequence[Transaction]:
        with Session(self.engine) as session:
            records = session.exec(select(TransactionRecord).order_by(TransactionRecord.timestamp)).all()
            return tuple(record.to_transaction() for record in records)

    def append(self, transactions: Iterable[Transaction]) -> Tuple[Transaction, ...]:
        added: list[Transaction] = []
        with self._append_lock, Session(self.engine) as session:
            seen: set[str] = set()
            for transaction in transactions:
                if transaction.id in seen or session.get(TransactionRecord, transaction.id) is not None:
                    continue
                seen.add(transaction.id)
                session.add(TransactionRecord.from_transaction(transaction))
                added.append(transaction)
            session.commit()
        return tuple(added)

    def load_policy(self) -> Optional[Policy]:
        with Session(self.engine) as session:
            row = session.get(MetaKV, POLICY_KEY)
            if row is None:
                return None
            raw = row.v
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise InvalidPolicyError("Stored policy is not valid JSON.") from exc
        return Policy.from_dict(payload)

    def save_policy(self, policy: Policy) -> None:
        with Session(self.engine) as session:
            row = session.get(MetaKV, POLICY_KEY)
            value = json.dumps(policy.to_dict(), sort_keys=True)
            if row is None:
                row = MetaKV(k=POLICY_KEY, v=value)
            else:
                row.v = value
            session.add(row)
            session.commit()

    def clear_policy(self) -> None:
        with Session(self.engine) as session:
            row = session.get(MetaKV, POLICY_KEY)
            if row is not None:
                session.delete(row)
                session.commit()


__all__ = ["MetaKV", "SqlStore", "TransactionRecord", "init_db", "make_engine"]
