"""
Tests for user, friend (direct ledger) and currency endpoints.
"""
import pytest

ALICE = {"id": "alice", "name": "Alice", "email": "alice@example.com"}
BOB = {"id": "bob", "name": "Bob"}
CAROL = {"id": "carol", "name": "Carol"}


def register(client, user):
    response = client.post("/api/users", json=user)
    assert response.status_code == 201
    return {"X-User-Id": user["id"]}


def add_direct_expense(client, headers, friend, amount, paid_by_me=True):
    return client.post(
        "/api/friends/expenses",
        headers=headers,
        json={"title": "Coffee", "amount": amount, "friend": friend, "paid_by_me": paid_by_me}
    )


def test_current_user_requires_header(client):
    assert client.get("/api/users/me").status_code == 401
    assert client.get("/api/users/me", headers={"X-User-Id": "ghost"}).status_code == 401


def test_register_and_fetch_user(client):
    headers = register(client, ALICE)
    assert client.get("/api/users/me", headers=headers).json()["name"] == "Alice"
    assert client.get("/api/users/alice").json()["email"] == "alice@example.com"
    assert client.get("/api/users/nobody").status_code == 404


def test_direct_expenses_net_into_one_balance(client):
    headers = register(client, ALICE)
    assert add_direct_expense(client, headers, BOB, 40).status_code == 201
    assert add_direct_expense(client, headers, BOB, 20, paid_by_me=False).status_code == 201

    response = client.get("/api/friends/bob/balance", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["balance"] == pytest.approx(10)
    assert body["direct_balance"] == pytest.approx(10)
    assert body["description"] == "Bob owes you $10.00"


def test_direct_expense_with_yourself_is_rejected(client):
    headers = register(client, ALICE)
    response = add_direct_expense(client, headers, ALICE, 10)
    assert response.status_code == 400


def test_friend_balance_includes_groups(client):
    headers = register(client, ALICE)
    group = client.post(
        "/api/groups",
        json={"name": "Trip", "members": [ALICE, BOB, CAROL], "currency": "eur"}
    ).json()
    client.post(
        f"/api/groups/{group['id']}/expenses",
        json={"title": "Hotel", "amount": 30, "paid_by_id": "carol", "participant_ids": ["alice", "bob", "carol"]}
    )

    friends = client.get("/api/friends", headers=headers).json()
    assert [f["friend"]["id"] for f in friends] == ["bob", "carol"]
    by_id = {f["friend"]["id"]: f for f in friends}
    # 10 EUR share owed to Carol, converted to USD
    assert by_id["carol"]["balance"] == pytest.approx(-10.8)
    assert by_id["carol"]["description"] == "You owe Carol $10.80"
    assert by_id["bob"]["description"] == "Settled"


def test_summary(client):
    headers = register(client, ALICE)
    add_direct_expense(client, headers, BOB, 50)
    add_direct_expense(client, headers, CAROL, 8, paid_by_me=False)

    summary = client.get("/api/friends/summary", headers=headers).json()
    assert summary["owe"] == pytest.approx(-4)
    assert summary["owed"] == pytest.approx(25)


def test_list_direct_expenses_for_friend(client):
    headers = register(client, ALICE)
    add_direct_expense(client, headers, BOB, 10)
    add_direct_expense(client, headers, CAROL, 12)

    assert len(client.get("/api/friends/expenses", headers=headers).json()) == 2
    only_bob = client.get("/api/friends/expenses", headers=headers, params={"friend_id": "bob"}).json()
    assert [e["amount"] for e in only_bob] == [10]


def test_unknown_friend(client):
    headers = register(client, ALICE)
    assert client.get("/api/friends/zoe/balance", headers=headers).status_code == 404


def test_list_currencies(client):
    currencies = client.get("/api/currencies").json()
    codes = [c["code"] for c in currencies]
    assert codes == ["USD", "EUR", "GBP", "JPY", "INR", "CAD", "AUD", "CHF"]


def test_convert_endpoint(client):
    body = client.get(
        "/api/currencies/convert",
        params={"amount": 10, "from_currency": "EUR", "to_currency": "usd"}
    ).json()
    assert body["converted_amount"] == pytest.approx(10.8)
    assert body["formatted"] == "$10.80"


def test_settled_group_clears_friend_balance(client):
    headers = register(client, ALICE)
    group = client.post("/api/groups", json={"name": "Lunch", "members": [ALICE, BOB]}).json()
    client.post(
        f"/api/groups/{group['id']}/expenses",
        json={"title": "Pizza", "amount": 40, "paid_by_id": "alice", "participant_ids": ["alice", "bob"]}
    )
    before = client.get("/api/friends/bob/balance", headers=headers).json()
    assert before["description"] == "Bob owes you $20.00"

    assert client.post(f"/api/settlement/{group['id']}/settle").status_code == 200

    after = client.get("/api/friends/bob/balance", headers=headers).json()
    assert after["balance"] == pytest.approx(0)
    assert after["description"] == "Settled"
