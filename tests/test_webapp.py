import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from timebank.clock import ONE_DAY_MS
from timebank.i18n import Translator
from timebank.models import ChildProfile
from timebank.service import TimeBank
from timebank.webapp.application import create_app
from timebank.webapp.config import parse_children


@pytest.fixture
def bank(clock) -> TimeBank:
    return TimeBank(
        children=[ChildProfile("ava", "Ava", "👧"), ChildProfile("ben", "Ben")],
        clock=clock,
        translator=Translator("en"),
    )


@pytest.fixture
def client(bank) -> TestClient:
    return TestClient(create_app(bank))


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_study_and_usage_flow(client) -> None:
    response = client.post("/children/ava/study", json={"category": "workbook", "minutes": 30})

    assert response.status_code == 201
    body = response.json()
    assert body["transaction"]["amount"] == 60
    assert body["transaction"]["type"] == "deposit"
    assert body["message"] == "Ava, that's amazing! You worked so hard today! 👏"
    assert body["credentials_required"] is False

    response = client.post("/children/ava/usage", json={"category": "tv_watch", "minutes": 20, "note": "Cartoons"})
    assert response.status_code == 201
    assert response.json()["transaction"]["note"] == "Cartoons"

    children = client.get("/children").json()["children"]
    assert [(child["child_id"], child["balance"]) for child in children] == [("ava", 40), ("ben", 0)]

    detail = client.get("/children/ava").json()
    assert detail["emoji"] == "👧"
    assert detail["stats"] == {"earned": 60, "spent": 20, "interest": 0, "balance": 40}
    assert len(detail["transactions"]) == 2
    assert len(detail["activity"]) == 5


def test_errors_map_to_status_codes(client) -> None:
    response = client.post("/children/ava/usage", json={"category": "tv_watch", "minutes": 5})
    assert response.status_code == 409
    assert response.json()["error"] == "InsufficientBalanceError"

    assert client.get("/children/zed").status_code == 404
    assert client.post("/children/ava/study", json={"category": "chess", "minutes": 5}).status_code == 400
    assert client.post("/children/ava/study", json={"category": "book", "minutes": 0}).status_code == 400
    assert client.post("/children/ava/study", json={"category": "book"}).status_code == 422


def test_interest_endpoint_and_transactions(client, clock) -> None:
    client.post("/children/ava/study", json={"category": "workbook", "minutes": 500})
    clock.advance(2 * ONE_DAY_MS)

    response = client.post("/interest")

    assert response.json()["count"] == 2
    assert [tx["amount"] for tx in response.json()["transactions"]] == [50, 52]
    assert client.post("/interest", params={"child_id": "ava"}).json()["count"] == 0

    transactions = client.get("/children/ava/transactions", params={"limit": 1}).json()["transactions"]
    assert transactions[0]["type"] == "interest"
    assert transactions[0]["id"].startswith("interest-ava-")

    activity = client.get("/children/ava/activity", params={"days": 3}).json()["activity"]
    assert sum(day["interest"] for day in activity) == 102


def test_interest_endpoint_rejects_blank_child(client) -> None:
    response = client.post("/interest", params={"child_id": ""})

    assert response.status_code == 404
    assert response.json()["error"] == "ChildNotFoundError"


def test_settings_update_and_reset(client) -> None:
    settings = client.get("/settings").json()
    assert settings["interest_threshold_hours"] == 48

    settings["interest_rate"] = 0.1
    settings["study_multipliers"]["book"] = 2.5
    response = client.put("/settings", json=settings)
    assert response.status_code == 200
    assert client.get("/settings").json()["study_multipliers"]["book"] == 2.5

    settings["interest_threshold_hours"] = -4
    response = client.put("/settings", json=settings)
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidPolicyError"
    assert client.get("/settings").json()["interest_rate"] == 0.1

    assert client.delete("/settings").json()["interest_rate"] == 0.05


def test_parse_children_config() -> None:
    children = parse_children("seoa:Seoa:👧🏻, seou:Seou ,")

    assert [(child.child_id, child.name, child.emoji) for child in children] == [
        ("seoa", "Seoa", "👧🏻"),
        ("seou", "Seou", ""),
    ]
    with pytest.raises(ValueError):
        parse_children("broken")
