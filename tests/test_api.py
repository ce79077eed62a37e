"""
HTTP-level tests for the auth and expense routes
"""

from core.security import create_access_token


def register_and_login(client, username, password="pw"):
    resp = client.post("/auth/register", json={"username": username, "password": password})
    assert resp.status_code == 200
    resp = client.post("/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_register_response(client):
    resp = client.post("/auth/register", json={"username": "alice", "password": "pw"})
    assert resp.status_code == 200
    assert resp.json() == {"message": "User registered"}


def test_register_duplicate_username(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw"})
    resp = client.post("/auth/register", json={"username": "alice", "password": "pw2"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Username already taken"}


def test_login_errors(client):
    resp = client.post("/auth/login", json={"username": "ghost", "password": "pw"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "User not found"}

    client.post("/auth/register", json={"username": "alice", "password": "pw"})
    resp = client.post("/auth/login", json={"username": "alice", "password": "nope"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid password"}


def test_malformed_body_is_bad_request(client):
    resp = client.post("/auth/login", content=b"not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_expenses_require_token(client):
    responses = [
        client.get("/expenses"),
        client.post("/expenses", json={"title": "Coffee", "amount": 3.5, "category": "Food"}),
        client.delete("/expenses/some-id"),
    ]
    for resp in responses:
        assert resp.status_code == 401
        assert resp.json() == {"error": "Access denied"}


def test_huge_amount_is_bad_request(client):
    headers = register_and_login(client, "alice")
    resp = client.post(
        "/expenses",
        content=b'{"title": "Coffee", "category": "Food", "amount": 1' + b"0" * 400 + b"}",
        headers={**headers, "Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "amount must be a positive number"}


def test_invalid_tokens_are_rejected(client):
    forged = create_access_token("someone", "wrong-secret")
    for header in (f"Bearer {forged}", "Bearer garbage", "garbage"):
        resp = client.get("/expenses", headers={"Authorization": header})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid token"}


def test_round_trip(client):
    headers = register_and_login(client, "alice")

    resp = client.post(
        "/expenses",
        json={"title": " Coffee ", "amount": 3.5, "category": "Food "},
        headers=headers,
    )
    assert resp.status_code == 200
    created = resp.json()
    assert created["title"] == "Coffee"
    assert created["category"] == "Food"
    assert created["amount"] == 3.5
    assert set(created) == {"id", "user_id", "title", "amount", "category", "date"}

    resp = client.get("/expenses", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == [created]


def test_add_expense_validation(client):
    headers = register_and_login(client, "alice")

    resp = client.post("/expenses", json={"title": "Coffee", "category": "Food"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "title, amount, and category are required"}

    resp = client.post(
        "/expenses", json={"title": "Coffee", "amount": 0, "category": "Food"}, headers=headers
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "amount must be a positive number"}

    assert client.get("/expenses", headers=headers).json() == []


def test_add_expense_with_date(client):
    headers = register_and_login(client, "alice")

    resp = client.post(
        "/expenses",
        json={"title": "Rent", "amount": "900", "category": "Housing", "date": "2024-03-01T10:00:00Z"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["date"].startswith("2024-03-01T10:00:00")
    assert resp.json()["amount"] == 900.0


def test_two_accounts_are_isolated(client):
    alice = register_and_login(client, "alice")
    bob = register_and_login(client, "bob")

    a_expense = client.post(
        "/expenses", json={"title": "Coffee", "amount": 3.5, "category": "Food"}, headers=alice
    ).json()
    b_expense = client.post(
        "/expenses", json={"title": "Taxi", "amount": 12, "category": "Transport"}, headers=bob
    ).json()

    assert client.get("/expenses", headers=alice).json() == [a_expense]
    assert client.get("/expenses", headers=bob).json() == [b_expense]

    resp = client.delete(f"/expenses/{a_expense['id']}", headers=bob)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Expense not found"}

    resp = client.delete(f"/expenses/{a_expense['id']}", headers=alice)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Deleted", "id": a_expense["id"]}

    assert client.get("/expenses", headers=alice).json() == []
    assert client.get("/expenses", headers=bob).json() == [b_expense]
