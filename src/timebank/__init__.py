"""TimeBank package for tracking children's study and screen-time minutes."""

from .api import ApiExporter
from .encouragement import CannedEncouragement, GeminiEncouragement
from .exceptions import (
    ChildNotFoundError,
    DuplicateChildError,
    DuplicateTransactionError,
    EncouragementAuthError,
    EncouragementError,
    InsufficientBalanceError,
    InvalidPolicyError,
    TimeBankError,
)
from .i18n import Translator
from .interest import compute_accruals, interest_transaction_id
from .ledger import Ledger, compute_balance, compute_stats, daily_activity
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
from .service import TimeBank
from .store import HistoryStore, InMemoryStore

__all__ = [
    "ActivityReceipt",
    "ApiExporter",
    "CannedEncouragement",
    "ChildNotFoundError",
    "ChildProfile",
    "DEFAULT_POLICY",
    "DailyActivity",
    "DuplicateChildError",
    "DuplicateTransactionError",
    "EncouragementAuthError",
    "EncouragementError",
    "GeminiEncouragement",
    "HistoryStore",
    "InMemoryStore",
    "InsufficientBalanceError",
    "InvalidPolicyError",
    "Ledger",
    "LedgerStats",
    "Policy",
    "StructuredLogger",
    "StudyCategory",
    "TimeBank",
    "TimeBankError",
    "Transaction",
    "TransactionType",
    "Translator",
    "UsageCategory",
    "compute_accruals",
    "compute_balance",
    "compute_stats",
    "daily_activity",
    "interest_transaction_id",
]
