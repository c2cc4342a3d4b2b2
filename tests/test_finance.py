# tests/test_finance.py

from datetime import timedelta

from cortexia.services.finance_service import period_start
from cortexia.utils import today


def _tx(client, headers, **fields):
    body = {"type": "expense", "amount": 10, "category": "food", **fields}
    resp = client.post("/api/v1/finance/transactions", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_amount_must_be_positive(client, auth_headers):
    for amount in (0, -5):
        resp = client.post(
            "/api/v1/finance/transactions", json={"type": "expense", "amount": amount}, headers=auth_headers
        )
        assert resp.status_code == 400


def test_transaction_crud(client, auth_headers):
    tx = _tx(client, auth_headers, description="Lunch")
    assert tx["date"] == today().isoformat()

    data = client.put(
        f"/api/v1/finance/transactions/{tx['id']}", json={"amount": 12.5}, headers=auth_headers
    ).json()["data"]
    assert data["amount"] == 12.5
    assert data["description"] == "Lunch"

    assert client.delete(f"/api/v1/finance/transactions/{tx['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/v1/finance/transactions/{tx['id']}", headers=auth_headers).status_code == 404


def test_list_window_and_filters(client, auth_headers):
    _tx(client, auth_headers, amount=5)
    _tx(client, auth_headers, amount=7, date=(today() - timedelta(days=60)).isoformat())
    _tx(client, auth_headers, type="income", amount=100, category="salary")

    assert len(client.get("/api/v1/finance/transactions", headers=auth_headers).json()) == 2
    assert len(client.get("/api/v1/finance/transactions", params={"days": 90}, headers=auth_headers).json()) == 3
    income = client.get("/api/v1/finance/transactions", params={"type": "income"}, headers=auth_headers).json()
    assert [t["category"] for t in income] == ["salary"]


def test_stats(client, auth_headers):
    _tx(client, auth_headers, type="income", amount=1000, category="salary")
    _tx(client, auth_headers, amount=200, category="food")
    _tx(client, auth_headers, amount=50, category="transport")

    stats = client.get("/api/v1/finance/stats", headers=auth_headers).json()
    assert stats["income"] == 1000
    assert stats["expenses"] == 250
    assert stats["balance"] == 750
    assert stats["savings_rate"] == 0.75
    assert stats["by_category"] == {"food": 200, "transport": 50}
    assert stats["transaction_count"] == 3


def test_stats_without_income(client, auth_headers):
    _tx(client, auth_headers, amount=20)
    stats = client.get("/api/v1/finance/stats", params={"period": "week"}, headers=auth_headers).json()
    assert stats["period"] == "week"
    assert stats["savings_rate"] == 0.0


def test_budget_upsert(client, auth_headers):
    first = client.post("/api/v1/finance/budgets", json={"category": "food", "limit": 300}, headers=auth_headers)
    assert first.status_code == 200
    assert first.json()["created"] is True

    second = client.post("/api/v1/finance/budgets", json={"category": "food", "limit": 400}, headers=auth_headers)
    assert second.json()["created"] is False
    assert second.json()["data"]["id"] == first.json()["data"]["id"]

    budgets = client.get("/api/v1/finance/budgets", headers=auth_headers).json()
    assert len(budgets) == 1
    assert budgets[0]["limit"] == 400


def test_budget_status_levels(client, auth_headers):
    client.post("/api/v1/finance/budgets", json={"category": "food", "limit": 100}, headers=auth_headers)
    url = "/api/v1/finance/budgets/status/food"

    _tx(client, auth_headers, amount=50)
    assert client.get(url, headers=auth_headers).json()["status"] == "ok"

    _tx(client, auth_headers, amount=30)
    status = client.get(url, headers=auth_headers).json()
    assert status["status"] == "warning"
    assert status["percentage"] == 80
    assert status["remaining"] == 20

    _tx(client, auth_headers, amount=30)
    assert client.get(url, headers=auth_headers).json()["status"] == "exceeded"


def test_budget_status_default_limit(client, auth_headers):
    _tx(client, auth_headers, amount=100, category="fun")
    status = client.get("/api/v1/finance/budgets/status/fun", headers=auth_headers).json()
    assert status["is_default"] is True
    assert status["limit"] == 500
    assert status["percentage"] == 20


def test_delete_budget(client, auth_headers):
    budget = client.post(
        "/api/v1/finance/budgets", json={"category": "food", "limit": 100}, headers=auth_headers
    ).json()["data"]
    assert client.delete(f"/api/v1/finance/budgets/{budget['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/v1/finance/budgets/{budget['id']}", headers=auth_headers).status_code == 404


def test_period_start():
    ref = today().replace(day=15)
    assert period_start("month", ref) == ref.replace(day=1)
    assert period_start("week", ref) == ref - timedelta(days=7)
