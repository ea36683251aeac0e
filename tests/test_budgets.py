import uuid

from tests.conftest import API, auth_header, signup


def category_id(client, headers, name="Shopping"):
    categories = client.get(f"{API}/categories", headers=headers).json()
    return next(c["id"] for c in categories if c["name"] == name)


def budgets_by_category(client, headers):
    return {b["category_id"]: b for b in client.get(f"{API}/budgets", headers=headers).json()}


def test_every_category_is_listed_without_budget(client, headers):
    budgets = client.get(f"{API}/budgets", headers=headers).json()
    assert len(budgets) == 4
    assert all(b["amount"] is None for b in budgets)


def test_put_budget_creates_then_updates(client, headers):
    cat = category_id(client, headers)
    assert client.put(f"{API}/budgets/{cat}", json={"amount": 3000}, headers=headers).json() == {"ok": True}
    assert budgets_by_category(client, headers)[cat]["amount"] == 3000

    client.put(f"{API}/budgets/{cat}", json={"amount": 4500.5}, headers=headers)
    budget = budgets_by_category(client, headers)[cat]
    assert budget["amount"] == 4500.5
    assert budget["category_name"] == "Shopping"


def test_post_budget_upserts(client, headers):
    cat = category_id(client, headers)
    response = client.post(f"{API}/budgets", json={"category_id": cat, "amount": 1200}, headers=headers)
    assert response.status_code == 200
    assert budgets_by_category(client, headers)[cat]["amount"] == 1200


def test_post_budget_requires_category(client, headers):
    response = client.post(f"{API}/budgets", json={"amount": 1200}, headers=headers)
    assert response.status_code == 400
    assert "category_id" in response.json()["details"]


def test_negative_amount_is_rejected(client, headers):
    cat = category_id(client, headers)
    response = client.put(f"{API}/budgets/{cat}", json={"amount": -5}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "invalid_amount"}


def test_zero_amount_is_allowed(client, headers):
    cat = category_id(client, headers)
    assert client.put(f"{API}/budgets/{cat}", json={"amount": 0}, headers=headers).status_code == 200
    assert budgets_by_category(client, headers)[cat]["amount"] == 0


def test_unknown_or_foreign_category_is_not_found(client, headers):
    assert client.put(f"{API}/budgets/{uuid.uuid4()}", json={"amount": 10}, headers=headers).status_code == 404

    other = auth_header(signup(client, email="bob@acme.io").json()["token"])
    cat = category_id(client, headers)
    assert client.put(f"{API}/budgets/{cat}", json={"amount": 10}, headers=other).status_code == 404


def test_delete_budget_is_idempotent(client, headers):
    cat = category_id(client, headers)
    client.put(f"{API}/budgets/{cat}", json={"amount": 3000}, headers=headers)

    assert client.delete(f"{API}/budgets/{cat}", headers=headers).json() == {"ok": True, "deleted": True}
    assert client.delete(f"{API}/budgets/{cat}", headers=headers).json() == {"ok": True, "deleted": False}
    assert budgets_by_category(client, headers)[cat]["amount"] is None
