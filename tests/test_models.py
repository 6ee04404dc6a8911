import math

import pytest

from timebank.exceptions import InvalidPolicyError
from timebank.minutes import apply_multiplier, format_minutes, require_positive, to_minutes
from timebank.models import DEFAULT_POLICY, ChildProfile, Policy, StudyCategory, Transaction, TransactionType, UsageCategory


def test_transaction_signed_amount_and_validation() -> None:
    deposit = Transaction(id="a", child_id="ava", type="deposit", amount=30, timestamp=1)
    withdrawal = Transaction(id="b", child_id="ava", type=TransactionType.WITHDRAW, amount=30, timestamp=2)

    assert deposit.type is TransactionType.DEPOSIT
    assert deposit.signed_amount == 30
    assert withdrawal.signed_amount == -30

    with pytest.raises(ValueError):
        Transaction(id="c", child_id="ava", type="deposit", amount=-1, timestamp=1)
    with pytest.raises(TypeError):
        Transaction(id="c", child_id="ava", type="deposit", amount=1.5, timestamp=1)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        Transaction(id="c", child_id="ava", type="refund", amount=1, timestamp=1)


def test_transaction_is_immutable_and_serialisable() -> None:
    original = Transaction(
        id="a",
        child_id="ava",
        type=TransactionType.DEPOSIT,
        amount=36,
        timestamp=10,
        category="video",
        base_amount=30,
        multiplier=1.2,
        note="Video lesson",
    )

    with pytest.raises(AttributeError):
        original.amount = 1  # type: ignore[misc]

    payload = original.to_dict()
    assert payload["type"] == "deposit"
    assert Transaction.from_dict(payload) == original


def test_default_policy_matches_household_settings() -> None:
    assert DEFAULT_POLICY.study_multipliers == {"workbook": 2.0, "book": 1.5, "video": 1.2}
    assert DEFAULT_POLICY.usage_multipliers == {"youtube_game": 1.2, "tv_watch": 1.0}
    assert DEFAULT_POLICY.interest_rate == 0.05
    assert DEFAULT_POLICY.interest_threshold_hours == 48
    assert DEFAULT_POLICY.multiplier_for(StudyCategory.WORKBOOK) == 2.0
    assert DEFAULT_POLICY.multiplier_for(UsageCategory.YOUTUBE_GAME) == 1.2


@pytest.mark.parametrize(
    "changes",
    [
        {"interest_rate": -0.01},
        {"interest_rate": math.inf},
        {"interest_threshold_hours": -1},
        {"interest_threshold_hours": math.nan},
        {"interest_rate": "0.05"},
        {"study_multipliers": {"workbook": 2.0, "book": 1.5}},
        {"study_multipliers": {"workbook": 2.0, "book": 1.5, "video": 0}},
        {"usage_multipliers": {"youtube_game": 1.2, "tv_watch": 1.0, "radio": 1.0}},
    ],
)
def test_invalid_policies_are_rejected(changes: dict) -> None:
    with pytest.raises(InvalidPolicyError):
        Policy(**changes)


def test_policy_multiplier_edit_returns_new_policy() -> None:
    edited = DEFAULT_POLICY.with_multiplier(StudyCategory.BOOK, 3)

    assert edited.study_multipliers["book"] == 3.0
    assert DEFAULT_POLICY.study_multipliers["book"] == 1.5
    assert edited.usage_multipliers == DEFAULT_POLICY.usage_multipliers
    with pytest.raises(InvalidPolicyError):
        DEFAULT_POLICY.with_multiplier(UsageCategory.TV_WATCH, -2)


def test_policy_from_partial_mapping_uses_defaults() -> None:
    policy = Policy.from_dict({"interest_rate": 0.1})

    assert policy.interest_rate == 0.1
    assert policy.interest_threshold_hours == 48
    assert Policy.from_dict(DEFAULT_POLICY.to_dict()) == DEFAULT_POLICY
    with pytest.raises(InvalidPolicyError):
        Policy.from_dict({"study_multipliers": [1, 2, 3]})


def test_child_profile_requires_names() -> None:
    with pytest.raises(ValueError):
        ChildProfile(child_id=" ", name="Ava")
    with pytest.raises(ValueError):
        ChildProfile(child_id="ava", name="")


def test_minute_helpers() -> None:
    assert to_minutes("15") == 15
    assert to_minutes(20.0) == 20
    assert apply_multiplier(30, 1.2) == 36
    assert apply_multiplier(7, 1.5) == 10
    assert apply_multiplier(10, 1.0) == 10
    assert format_minutes(125) == "2h 05m"
    assert format_minutes(45) == "45m"
    assert format_minutes(-60) == "-1h 00m"
    assert require_positive(0, allow_zero=True) == 0

    with pytest.raises(ValueError):
        to_minutes(1.5)
    with pytest.raises(TypeError):
        to_minutes(True)
    with pytest.raises(ValueError):
        require_positive(0)
