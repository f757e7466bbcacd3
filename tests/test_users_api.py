"""
tests.test_users_api

Identity service: registration, login and self-service account routes.
"""

from __future__ import annotations

from datetime import UTC, datetime

import jwt
import pytest

from conftest import TEST_SECRET, bearer, register_and_login


@pytest.mark.asyncio
async def test_register_returns_profile_without_password(identity_http) -> None:
    r = await identity_http.post(
        "/api/users",
        json={
            "username": "alice",
            "email": "alice@example.com",
            "password": "correct-horse-battery",
            "firstName": "Alice",
        },
    )

    assert r.status_code == 201
    body = r.json()
    assert body["username"] == "alice"
    assert body["firstName"] == "Alice"
    assert "password" not in r.text
    assert "passwordHash" not in body


@pytest.mark.asyncio
async def test_duplicate_username_and_email_conflict(identity_http) -> None:
    await register_and_login(identity_http, "alice")

    r = await identity_http.post(
        "/api/users",
        json={"username": "alice", "email": "other@example.com", "password": "password123"},
    )
    assert r.status_code == 409
    assert r.json()["error"] == "Username already exists"

    r = await identity_http.post(
        "/api/users",
        json={"username": "alice2", "email": "alice@example.com", "password": "password123"},
    )
    assert r.status_code == 409
    assert r.json()["error"] == "Email already exists"


@pytest.mark.asyncio
async def test_register_validation(identity_http) -> None:
    r = await identity_http.post(
        "/api/users", json={"username": "al", "email": "nope", "password": "short"}
    )

    assert r.status_code == 400
    fields = {d["field"] for d in r.json()["details"]}
    assert fields == {"username", "email", "password"}


@pytest.mark.asyncio
async def test_availability_checks_are_public(identity_http) -> None:
    r = await identity_http.get("/api/users/check-username", params={"username": "alice"})
    assert r.json() == {"available": True}

    await register_and_login(identity_http, "alice")

    r = await identity_http.get("/api/users/check-username", params={"username": "alice"})
    assert r.json() == {"available": False}
    r = await identity_http.get("/api/users/check-email", params={"email": "alice@example.com"})
    assert r.json() == {"available": False}
    r = await identity_http.get("/api/users/check-email", params={"email": "bob@example.com"})
    assert r.json() == {"available": True}


@pytest.mark.asyncio
async def test_login_issues_token_with_identity_claims(identity_http) -> None:
    before = int(datetime.now(tz=UTC).timestamp())
    body = await register_and_login(identity_http, "alice")

    assert body["username"] == "alice"
    claims = jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"])
    assert claims["sub"] == "alice"
    assert claims["userId"] == body["userId"]
    assert claims["iat"] >= before
    assert claims["exp"] - claims["iat"] == 3600


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_user_look_the_same(identity_http) -> None:
    await register_and_login(identity_http, "alice")

    wrong = await identity_http.post(
        "/api/auth/login", json={"username": "alice", "password": "not-her-password"}
    )
    unknown = await identity_http.post(
        "/api/auth/login", json={"username": "mallory", "password": "not-her-password"}
    )

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {
        "error": "Invalid username or password",
        "reason": "InvalidCredentials",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{"username": "", "password": "x"}, {"username": "   ", "password": "x"}, {"username": "alice", "password": ""}],
)
async def test_empty_login_fields_are_400(identity_http, payload) -> None:
    r = await identity_http.post("/api/auth/login", json=payload)

    assert r.status_code == 400
    assert r.json()["reason"] == "ValidationError"


@pytest.mark.asyncio
async def test_me_reads_identity_from_token(identity_http) -> None:
    alice = await register_and_login(identity_http, "alice")
    await register_and_login(identity_http, "bob")

    r = await identity_http.get("/api/users/me", headers=bearer(alice["token"]))

    assert r.status_code == 200
    assert r.json()["id"] == alice["userId"]
    assert r.json()["username"] == "alice"


@pytest.mark.asyncio
async def test_me_requires_token(identity_http) -> None:
    r = await identity_http.get("/api/users/me")

    assert r.status_code == 401
    assert r.json()["reason"] == "MissingToken"


@pytest.mark.asyncio
async def test_get_user_is_same_user_only(identity_http) -> None:
    alice = await register_and_login(identity_http, "alice")
    bob = await register_and_login(identity_http, "bob")

    r = await identity_http.get(f"/api/users/{bob['userId']}", headers=bearer(alice["token"]))
    assert r.status_code == 403
    assert "bob" not in r.text

    r = await identity_http.get(f"/api/users/{alice['userId']}", headers=bearer(alice["token"]))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_update_profile(identity_http) -> None:
    alice = await register_and_login(identity_http, "alice")

    r = await identity_http.put(
        "/api/users/me",
        json={"firstName": "Alice", "lastName": "Liddell"},
        headers=bearer(alice["token"]),
    )

    assert r.status_code == 200
    assert (r.json()["firstName"], r.json()["lastName"]) == ("Alice", "Liddell")


@pytest.mark.asyncio
async def test_change_password(identity_http) -> None:
    alice = await register_and_login(identity_http, "alice")
    headers = bearer(alice["token"])

    r = await identity_http.patch(
        "/api/users/me/password",
        json={"oldPassword": "wrong-old-password", "newPassword": "brand-new-secret"},
        headers=headers,
    )
    assert r.status_code == 403
    assert r.json()["error"] == "Old password incorrect"

    r = await identity_http.patch(
        "/api/users/me/password",
        json={"oldPassword": "correct-horse-battery", "newPassword": "brand-new-secret"},
        headers=headers,
    )
    assert r.status_code == 204

    r = await identity_http.post(
        "/api/auth/login", json={"username": "alice", "password": "correct-horse-battery"}
    )
    assert r.status_code == 401
    r = await identity_http.post(
        "/api/auth/login", json={"username": "alice", "password": "brand-new-secret"}
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_deleted_account_token_no_longer_finds_user(identity_http) -> None:
    alice = await register_and_login(identity_http, "alice")
    headers = bearer(alice["token"])

    r = await identity_http.delete("/api/users/me", headers=headers)
    assert r.status_code == 204

    # The token itself is still valid until exp; the account is gone.
    r = await identity_http.get("/api/users/me", headers=headers)
    assert r.status_code == 404
    r = await identity_http.get("/api/users/check-username", params={"username": "alice"})
    assert r.json() == {"available": True}
