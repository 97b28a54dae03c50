from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cardrewards.api.app import app
from cardrewards.api.dependencies import get_repository
from cardrewards.repository.catalog_store import CatalogStore
from cardrewards.repository.memory import InMemoryRepository

SAMPLE_CATALOG = Path(__file__).resolve().parents[1] / "data" / "catalog" / "sample_catalog.json"
USER = {"X-User-Id": "demo-user"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "ADMIN"}


@pytest.fixture
def client():
    repository = InMemoryRepository(CatalogStore(str(SAMPLE_CATALOG)).load_catalog())
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_calculate_recommends_best_saved_card(client) -> None:
    response = client.post(
        "/calculate",
        json={"amount": 2000, "category_id": "cat-dining", "sub_category_id": "sub-dining-restaurants"},
        headers=USER,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["best_card"]["card_name"] == "Millennia"
    assert body["best_card"]["bank_name"] == "HDFC Bank"
    assert Decimal(body["best_card"]["reward_amount"]) == 100
    assert body["best_card"]["reward_rate_display"] == "5% cashback"
    assert body["best_card"]["reward_amount_display"] == "₹100.00"
    assert [card["card_name"] for card in body["ranked_cards"]] == ["Millennia", "Amazon Pay"]


def test_calculate_travel_and_empty_profile(client) -> None:
    response = client.post("/calculate", json={"amount": 2000, "category_id": "cat-travel"}, headers=USER)

    assert response.status_code == 200
    assert response.json()["ranked_cards"][0]["card_name"] == "Atlas"

    empty = client.post("/calculate", json={"amount": 2000, "category_id": "cat-travel"}, headers={"X-User-Id": "new"})
    assert empty.json() == {"best_card": None, "ranked_cards": []}


def test_calculate_rejects_negative_amount(client) -> None:
    response = client.post("/calculate", json={"amount": -5, "category_id": "cat-dining"}, headers=USER)

    assert response.status_code == 400


def test_calculate_unknown_category(client) -> None:
    response = client.post("/calculate", json={"amount": 100, "category_id": "cat-missing"}, headers=USER)

    assert response.status_code == 404


def test_caller_identity_is_required(client) -> None:
    response = client.post("/calculate", json={"amount": 100, "category_id": "cat-dining"})

    assert response.status_code == 422


def test_compare_builds_category_rows(client) -> None:
    response = client.post(
        "/compare", json={"card_ids": ["card-hdfc-bank-millennia", "card-axis-bank-atlas"]}, headers=USER
    )

    assert response.status_code == 200
    rows = {row["category_name"]: [cell["display"] for cell in row["cells"]] for row in response.json()["rows"]}
    assert list(rows) == ["Dining", "Shopping", "Travel"]
    assert rows["Dining"] == ["5% cashback", "2 points per ₹1"]
    assert rows["Shopping"] == ["5% cashback", "N/A"]
    assert rows["Travel"] == ["N/A", "5 miles per ₹1"]


def test_compare_needs_two_to_three_cards(client) -> None:
    one = client.post("/compare", json={"card_ids": ["card-axis-bank-atlas"]}, headers=USER)
    unknown = client.post("/compare", json={"card_ids": ["card-axis-bank-atlas", "card-missing"]}, headers=USER)

    assert one.status_code == 422
    assert unknown.status_code == 404


def test_card_rewards_view(client) -> None:
    response = client.get("/credit-cards/card-hdfc-bank-millennia/rewards", headers=USER)

    assert response.status_code == 200
    summaries = [rule["summary"] for rule in response.json()["rules"]]
    assert "Dining / Restaurants: 5% cashback [Cap: ₹1,000/month]" in summaries
    assert client.get("/credit-cards/card-missing/rewards", headers=USER).status_code == 404


def test_reward_rule_writes_need_admin(client) -> None:
    payload = {
        "credit_card_id": "card-axis-bank-flipkart",
        "category_id": "cat-dining",
        "reward_type": "POINTS",
        "reward_value": 3,
    }

    assert client.post("/reward-rules", json=payload, headers=USER).status_code == 403

    created = client.post("/reward-rules", json=payload, headers=ADMIN)
    assert created.status_code == 201
    rule = created.json()
    assert rule["transaction_type"] == "BOTH"

    by_card = client.get("/reward-rules/credit-card/card-axis-bank-flipkart", headers=USER).json()
    assert rule["id"] in [item["id"] for item in by_card]


def test_reward_rule_reference_errors(client) -> None:
    mismatched = {
        "credit_card_id": "card-axis-bank-flipkart",
        "category_id": "cat-dining",
        "sub_category_id": "sub-travel-hotels",
        "reward_type": "CASHBACK",
        "reward_value": 2,
    }
    unknown_card = {**mismatched, "credit_card_id": "card-missing", "sub_category_id": None}

    assert client.post("/reward-rules", json=mismatched, headers=ADMIN).status_code == 400
    assert client.post("/reward-rules", json=unknown_card, headers=ADMIN).status_code == 400
    assert client.post("/reward-rules", json={**mismatched, "reward_value": -1}, headers=ADMIN).status_code == 422


def test_update_and_delete_reward_rule(client) -> None:
    updated = client.patch("/reward-rules/rule-0001", json={"reward_value": 2.5}, headers=ADMIN)

    assert updated.status_code == 200
    assert Decimal(updated.json()["reward_value"]) == Decimal("2.5")
    assert updated.json()["category_id"] == "cat-dining"

    deleted = client.delete("/reward-rules/rule-0001", headers=ADMIN)
    assert deleted.json() == {"message": "Reward rule deleted successfully"}
    assert client.get("/reward-rules/rule-0001", headers=USER).status_code == 404
    assert client.delete("/reward-rules/rule-0001", headers=ADMIN).status_code == 404


def test_saved_cards(client) -> None:
    headers = {"X-User-Id": "user-2"}

    added = client.post("/users/me/credit-cards", json={"credit_card_id": "card-axis-bank-flipkart"}, headers=headers)
    assert added.status_code == 201
    duplicate = client.post("/users/me/credit-cards", json={"credit_card_id": "card-axis-bank-flipkart"}, headers=headers)
    assert duplicate.status_code == 409

    saved = client.get("/users/me/credit-cards", headers=headers).json()
    assert [item["credit_card_id"] for item in saved] == ["card-axis-bank-flipkart"]

    removed = client.delete(f"/users/me/credit-cards/{added.json()['id']}", headers=headers)
    assert removed.status_code == 200
    assert client.get("/users/me/credit-cards", headers=headers).json() == []


def test_catalog_listing(client) -> None:
    categories = client.get("/categories", headers=USER).json()

    assert [category["name"] for category in categories] == ["Dining", "Travel", "Shopping"]
    assert len(categories[0]["sub_categories"]) == 3
    assert len(client.get("/credit-cards", headers=USER).json()) == 4
    assert len(client.get("/banks", headers=USER).json()) == 3


@pytest.mark.parametrize("field", ["transaction_type", "reward_type", "reward_value", "credit_card_id"])
def test_update_reward_rule_ignores_null_for_required_field(client, field) -> None:
    before = client.get("/reward-rules/rule-0003", headers=USER).json()

    response = client.patch("/reward-rules/rule-0003", json={field: None}, headers=ADMIN)

    assert response.status_code == 200
    assert response.json() == before


def test_update_reward_rule_null_clears_optional_limit(client) -> None:
    response = client.patch("/reward-rules/rule-0003", json={"minimum_spend": None}, headers=ADMIN)

    assert response.status_code == 200
    assert response.json()["minimum_spend"] is None
    assert response.json()["monthly_cap"] is not None
