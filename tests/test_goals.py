from tests.conftest import API, auth_header, signup


def add(client, headers, name="Emergency fund", target_amount=10000, target_date="2025-12-31"):
    return client.post(
        f"{API}/goals",
        json={"name": name, "target_amount": target_amount, "target_date": target_date},
        headers=headers,
    )


def test_create_and_list_goals(client, headers):
    response = add(client, headers)
    assert response.status_code == 201
    goal_id = response.json()["id"]

    goals = client.get(f"{API}/goals", headers=headers).json()
    assert goals == [
        {"id": goal_id, "name": "Emergency fund", "target_amount": 10000, "target_date": "2025-12-31"}
    ]


def test_goals_are_ordered_by_target_date_with_undated_last(client, headers):
    add(client, headers, name="Someday", target_date=None)
    add(client, headers, name="Later", target_date="2026-06-01")
    add(client, headers, name="Soon", target_date="2025-06-01")

    names = [g["name"] for g in client.get(f"{API}/goals", headers=headers).json()]
    assert names == ["Soon", "Later", "Someday"]


def test_goal_validation(client, headers):
    response = add(client, headers, name="   ", target_amount=0)
    assert response.status_code == 400
    details = response.json()["details"]
    assert "name" in details and "target_amount" in details


def test_update_goal(client, headers):
    goal_id = add(client, headers).json()["id"]
    response = client.put(
        f"{API}/goals/{goal_id}",
        json={"name": "Vacation", "target_amount": 5000, "target_date": None},
        headers=headers,
    )
    assert response.status_code == 200
    goal = client.get(f"{API}/goals", headers=headers).json()[0]
    assert goal["name"] == "Vacation"
    assert goal["target_date"] is None


def test_missing_goal_is_not_found(client, headers):
    body = {"name": "X", "target_amount": 1}
    assert client.put(f"{API}/goals/999", json=body, headers=headers).status_code == 404
    assert client.delete(f"{API}/goals/999", headers=headers).status_code == 404


def test_delete_goal(client, headers):
    goal_id = add(client, headers).json()["id"]
    assert client.delete(f"{API}/goals/{goal_id}", headers=headers).json() == {"ok": True}
    assert client.get(f"{API}/goals", headers=headers).json() == []


def test_goals_are_private(client, headers):
    goal_id = add(client, headers).json()["id"]
    other = auth_header(signup(client, email="bob@acme.io").json()["token"])
    assert client.get(f"{API}/goals", headers=other).json() == []
    assert client.delete(f"{API}/goals/{goal_id}", headers=other).status_code == 404
