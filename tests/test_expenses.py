import uuid

from tests.conftest import API, auth_header, signup


def category_id(client, headers, name="Transport"):
    categories = client.get(f"{API}/categories", headers=headers).json()
    return next(c["id"] for c in categories if c["name"] == name)


def add(client, headers, **fields):
    body = {"amount": 100.0, "incurred_on": "2025-03-10"}
    body.update(fields)
    return client.post(f"{API}/expenses", json=body, headers=headers)


def list_range(client, headers, start="2025-03-01", end="2025-03-31", **params):
    return client.get(f"{API}/expenses", params={"from": start, "to": end, **params}, headers=headers)


def test_create_and_list_expense(client, headers):
    cat = category_id(client, headers)
    response = add(client, headers, amount=250.5, category_id=cat, note="Cab")
    assert response.status_code == 201
    assert response.json()["ok"] is True

    rows = list_range(client, headers).json()
    assert len(rows) == 1
    row = rows[0]
    assert row["amount"] == 250.5
    assert row["note"] == "Cab"
    assert row["category_name"] == "Transport"
    assert row["category_color"] == "#3B82F6"


def test_range_is_inclusive_and_newest_first(client, headers):
    add(client, headers, incurred_on="2025-03-01", note="first")
    add(client, headers, incurred_on="2025-03-31", note="last")
    add(client, headers, incurred_on="2025-04-01", note="outside")

    notes = [r["note"] for r in list_range(client, headers).json()]
    assert notes == ["last", "first"]


def test_limit(client, headers):
    for day in range(1, 6):
        add(client, headers, incurred_on=f"2025-03-0{day}")
    assert len(list_range(client, headers, limit=2).json()) == 2
    assert list_range(client, headers, limit=0).status_code == 400


def test_range_parameters_are_required_and_validated(client, headers):
    assert client.get(f"{API}/expenses", headers=headers).status_code == 400
    assert list_range(client, headers, start="03/01/2025").status_code == 400


def test_invalid_expense_fields(client, headers):
    response = add(client, headers, amount=0, incurred_on="not-a-date")
    assert response.status_code == 400
    details = response.json()["details"]
    assert "amount" in details and "incurred_on" in details


def test_unknown_category_is_invalid_input(client, headers):
    response = add(client, headers, category_id=str(uuid.uuid4()))
    assert response.status_code == 400
    assert "category_id" in response.json()["details"]


def test_update_expense(client, headers):
    expense_id = add(client, headers).json()["id"]
    response = client.put(
        f"{API}/expenses/{expense_id}",
        json={"amount": 80, "category_id": category_id(client, headers, "Bills")},
        headers=headers,
    )
    assert response.status_code == 200

    row = list_range(client, headers).json()[0]
    assert row["amount"] == 80
    assert row["category_name"] == "Bills"


def test_update_can_clear_category(client, headers):
    expense_id = add(client, headers, category_id=category_id(client, headers)).json()["id"]
    client.put(f"{API}/expenses/{expense_id}", json={"category_id": None}, headers=headers)
    assert list_range(client, headers).json()[0]["category_id"] is None


def test_update_rejects_null_amount(client, headers):
    expense_id = add(client, headers).json()["id"]
    response = client.put(f"{API}/expenses/{expense_id}", json={"amount": None}, headers=headers)
    assert response.status_code == 400


def test_delete_expense(client, headers):
    expense_id = add(client, headers).json()["id"]
    assert client.delete(f"{API}/expenses/{expense_id}", headers=headers).status_code == 200
    assert list_range(client, headers).json() == []
    assert client.delete(f"{API}/expenses/{expense_id}", headers=headers).status_code == 404


def test_expenses_are_private(client, headers):
    expense_id = add(client, headers).json()["id"]
    other = auth_header(signup(client, email="bob@acme.io").json()["token"])

    assert list_range(client, other).json() == []
    assert client.put(f"{API}/expenses/{expense_id}", json={"amount": 1}, headers=other).status_code == 404
    assert client.delete(f"{API}/expenses/{expense_id}", headers=other).status_code == 404


def test_cannot_file_expense_under_other_users_category(client, headers):
    other = auth_header(signup(client, email="bob@acme.io").json()["token"])
    response = add(client, other, category_id=category_id(client, headers))
    assert response.status_code == 400
