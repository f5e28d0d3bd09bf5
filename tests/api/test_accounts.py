"""
Tests for the account endpoints.
"""

import pytest


@pytest.fixture
def user_id(client):
    return client.post("/users", json={"email": "jane@test.com"}).json()["id"]


def test_create_account(client, user_id):
    response = client.post("/accounts", json={"user_id": user_id})

    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == user_id
    assert data["status"] == "ACTIVE"
    assert data["disabled_at"] is None
    assert len(data["account_number"]) == 10
    assert data["account_number"].isdigit()


def test_create_account_unknown_user(client):
    response = client.post("/accounts", json={"user_id": 999})
    assert response.status_code == 404


def test_list_user_accounts(client, user_id):
    first = client.post("/accounts", json={"user_id": user_id}).json()
    second = client.post("/accounts", json={"user_id": user_id}).json()

    response = client.get("/accounts", params={"user_id": user_id})

    assert response.status_code == 200
    assert [a["id"] for a in response.json()] == [first["id"], second["id"]]


def test_get_account(client, user_id):
    created = client.post("/accounts", json={"user_id": user_id}).json()

    response = client.get(f"/accounts/{created['id']}")

    assert response.status_code == 200
    assert response.json()["account_number"] == created["account_number"]


def test_get_missing_account(client):
    assert client.get("/accounts/999").status_code == 404


def test_new_account_balance_is_zero(client, user_id):
    created = client.post("/accounts", json={"user_id": user_id}).json()

    response = client.get(f"/accounts/{created['id']}/balance")

    assert response.status_code == 200
    data = response.json()
    assert data["balance"] == 0
    assert data["account_number"] == created["account_number"]


def test_disable_account(client, user_id):
    created = client.post("/accounts", json={"user_id": user_id}).json()

    response = client.patch(f"/accounts/{created['id']}/disable")

    assert response.status_code == 200
    assert response.json()["status"] == "DISABLED"
    assert response.json()["disabled_at"] is not None

    # Still readable, but gone from the user's active accounts
    assert client.get(f"/accounts/{created['id']}").status_code == 200
    listed = client.get("/accounts", params={"user_id": user_id}).json()
    assert listed == []


def test_disable_twice(client, user_id):
    created = client.post("/accounts", json={"user_id": user_id}).json()
    client.patch(f"/accounts/{created['id']}/disable")

    response = client.patch(f"/accounts/{created['id']}/disable")

    assert response.status_code == 409


def test_disable_missing_account(client):
    assert client.patch("/accounts/999/disable").status_code == 404
