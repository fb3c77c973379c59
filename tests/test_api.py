from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_store
from app.core.jwt_config import create_access_token, create_refresh_token, user_claims
from app.main import app


@pytest.fixture
def client(store):
    async def _store():
        return store

    app.dependency_overrides[get_store] = _store
    yield TestClient(app)
    app.dependency_overrides.clear()


def login_as(client: TestClient, user) -> TestClient:
    client.cookies.set("access_token", create_access_token(user_claims(user)))
    return client


EXPENSE = {
    "date": "2024-05-01",
    "memo": "점심식대",
    "isCardUsage": True,
    "users": [
        {"name": "Kim", "amount": 10000, "menu": "김치찌개"},
        {"name": "Lee", "amount": 20000, "menu": "기타", "customMenu": "마라탕"},
    ],
}


def test_root(client) -> None:
    assert client.get("/").status_code == 200


def test_expenses_require_login(client, store) -> None:
    resp = client.get("/api/v1/expenses/")

    assert resp.status_code == 401
    assert store.calls == []


def test_garbage_token_is_rejected(client) -> None:
    client.cookies.set("access_token", "not-a-jwt")

    assert client.get("/api/v1/expenses/").status_code == 401


def test_refresh_token_cannot_be_used_as_access(client, kim) -> None:
    client.cookies.set("access_token", create_refresh_token(user_claims(kim)))

    assert client.get("/api/v1/users/me").status_code == 401


def test_expense_lifecycle(client, kim, lee) -> None:
    login_as(client, kim)

    created = client.post("/api/v1/expenses/", json=EXPENSE)
    assert created.status_code == 200
    expense_id = created.json()["expenseId"]

    listed = client.get("/api/v1/expenses/", params={"startDate": "2024-05-01", "endDate": "2024-05-31"})
    assert listed.status_code == 200
    [record] = listed.json()
    assert record["amount"] == 30000
    assert record["isCardUsage"] is True
    assert record["registrant"]["companyName"] == "ACME"
    assert [u["menu"] for u in record["users"]] == ["김치찌개", "마라탕"]

    fetched = client.get(f"/api/v1/expenses/{expense_id}")
    assert fetched.json()["id"] == expense_id

    updated = client.put(f"/api/v1/expenses/{expense_id}", json={**EXPENSE, "memo": "저녁식대"})
    assert updated.status_code == 200
    assert client.get(f"/api/v1/expenses/{expense_id}").json()["memo"] == "저녁식대"

    # not the registrant
    login_as(client, lee)
    assert client.delete(f"/api/v1/expenses/{expense_id}").status_code == 403

    login_as(client, kim)
    assert client.delete(f"/api/v1/expenses/{expense_id}").status_code == 200
    assert client.get(f"/api/v1/expenses/{expense_id}").status_code == 404
    assert client.get("/api/v1/expenses/").json() == []


def test_user_view_and_admin_views(client, kim, lee, park) -> None:
    login_as(client, kim)
    client.post("/api/v1/expenses/", json=EXPENSE)

    login_as(client, lee)
    mine = client.get("/api/v1/expenses/", params={"viewType": "user"}).json()
    assert [r["amount"] for r in mine] == [20000]
    assert client.get("/api/v1/expenses/", params={"viewType": "admin"}).status_code == 403

    login_as(client, park)
    summary = client.get("/api/v1/expenses/", params={"viewType": "admin-summary"}).json()
    assert [(r["registrant"]["name"], r["amount"]) for r in summary] == [("Kim", 10000), ("Lee", 20000)]


def test_bad_filter_date_is_400(client, kim) -> None:
    login_as(client, kim)

    assert client.get("/api/v1/expenses/", params={"startDate": "yesterday"}).status_code == 400


def test_invalid_expense_body_is_422(client, kim) -> None:
    login_as(client, kim)

    assert client.post("/api/v1/expenses/", json={**EXPENSE, "users": []}).status_code == 422


def test_signup_login_me_logout(client) -> None:
    signup = client.post(
        "/api/v1/users/signup",
        json={"email": "new@example.com", "name": "Jung", "password": "secret", "companyName": "ACME"},
    )
    assert signup.status_code == 200
    assert signup.json()["companyName"] == "ACME"

    duplicate = client.post(
        "/api/v1/users/signup",
        json={"email": "new@example.com", "name": "Jung", "password": "secret", "companyName": "ACME"},
    )
    assert duplicate.status_code == 400

    assert client.post("/api/v1/users/login", json={"email": "new@example.com", "password": "nope"}).status_code == 401

    login = client.post("/api/v1/users/login", json={"email": "new@example.com", "password": "secret"})
    assert login.status_code == 200
    assert "access_token" in login.cookies

    me = client.get("/api/v1/users/me").json()
    assert (me["email"], me["name"], me["role"]) == ("new@example.com", "Jung", "USER")

    refreshed = client.post("/api/v1/users/refresh")
    assert refreshed.status_code == 200

    changed = client.post("/api/v1/users/change-password", json={"currentPassword": "secret", "newPassword": "better"})
    assert changed.status_code == 200
    assert client.post("/api/v1/users/login", json={"email": "new@example.com", "password": "better"}).status_code == 200

    client.post("/api/v1/users/logout")
    client.cookies.clear()
    assert client.get("/api/v1/users/me").status_code == 401


def test_menus_companies_notices_usage(client, kim) -> None:
    assert [c["name"] for c in client.get("/api/v1/companies").json()] == ["ACME", "Other Corp"]

    login_as(client, kim)
    client.post("/api/v1/expenses/", json=EXPENSE)

    assert client.get("/api/v1/menus/").json() == ["김치찌개", "된장찌개", "마라탕"]

    analysis = client.get(
        "/api/v1/menus/analysis",
        params={"startDate": "2024-05-01", "endDate": "2024-05-31", "viewType": "personal"},
    ).json()
    assert analysis["popularity"][0] == {
        "menu": "김치찌개",
        "count": 1,
        "percentage": "100.0",
        "lastUsed": "2024-05-01",
    }
    assert client.get("/api/v1/menus/analysis", params={"viewType": "team"}).status_code == 400

    calendar = client.get("/api/v1/menus/calendar", params={"year": 2024, "month": 5}).json()
    assert calendar == [{"date": "2024-05-01", "menu": "김치찌개", "type": "점심식대"}]

    notices = client.get("/api/v1/notices").json()
    assert [n["content"] for n in notices] == ["Welcome", "Card limit raised"]

    usage = client.get("/api/v1/usage/monthly", params={"year": 2024, "month": 5}).json()
    assert usage == {"year": 2024, "month": 5, "used": 10000, "limit": 200000, "remaining": 190000}
