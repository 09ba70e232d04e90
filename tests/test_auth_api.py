# tests/test_auth_api.py
from datetime import timedelta

from sqlalchemy import update
from sqlalchemy.orm import Session

from rental_quotes.core.security import create_access_token
from rental_quotes.models import User
from tests.conftest import API, login


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] is True


def test_login_returns_token_and_user(client, seed_user):
    seed_user("alice", role="admin")

    response = client.post(f"{API}/auth/login", json={"username": "alice", "password": "secret123"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] is True
    assert body["data"]["token_type"] == "bearer"
    assert body["data"]["token"]
    user = body["data"]["user"]
    assert user["username"] == "alice"
    assert user["role"] == "admin"
    assert user["last_login"] is not None
    assert "password_hash" not in user


def test_login_with_wrong_password(client, seed_user):
    seed_user("alice")

    response = client.post(f"{API}/auth/login", json={"username": "alice", "password": "nope123"})

    assert response.status_code == 401
    assert response.json() == {"status": False, "message": "Invalid credentials", "errorCode": 401}


def test_login_of_inactive_user_is_rejected(client, seed_user):
    seed_user("ghost", is_active=False)

    response = client.post(f"{API}/auth/login", json={"username": "ghost", "password": "secret123"})

    assert response.status_code == 401


def test_login_validation_error_is_400(client):
    response = client.post(f"{API}/auth/login", json={"username": "al"})

    assert response.status_code == 400
    body = response.json()
    assert body["status"] is False
    assert body["errorCode"] == 400
    fields = {e["field"] for e in body["errors"]}
    assert {"username", "password"} <= fields


def test_me_requires_a_token(client):
    response = client.get(f"{API}/auth/me")

    assert response.status_code == 401
    assert response.json()["status"] is False
    assert response.headers["www-authenticate"] == "Bearer"


def test_garbage_token_is_rejected(client):
    response = client.get(f"{API}/auth/me", headers=bearer("not-a-jwt"))
    assert response.status_code == 401


def test_expired_token_is_rejected(client, settings, seed_user):
    user_id = seed_user("alice")
    token = create_access_token(
        {"sub": str(user_id), "username": "alice", "role": "user"},
        token_version=0,
        settings=settings,
        expires_delta=timedelta(minutes=-5),
    )

    response = client.get(f"{API}/auth/me", headers=bearer(token))

    assert response.status_code == 401


def test_token_for_unknown_user_is_rejected(client, settings):
    token = create_access_token({"sub": "999", "username": "nobody", "role": "admin"}, 0, settings)

    response = client.get(f"{API}/auth/me", headers=bearer(token))

    assert response.status_code == 401


def test_token_of_deactivated_user_is_rejected(client, seed_user, sync_engine):
    seed_user("alice")
    headers = login(client, "alice")
    assert client.get(f"{API}/auth/me", headers=headers).status_code == 200

    with Session(sync_engine) as session:
        session.execute(update(User).where(User.username == "alice").values(is_active=False))
        session.commit()

    response = client.get(f"{API}/auth/me", headers=headers)
    assert response.status_code == 401


def test_me_returns_current_user(client, user_headers):
    response = client.get(f"{API}/auth/me", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["data"]["username"] == "staff"


def test_logout_invalidates_existing_tokens(client, user_headers):
    response = client.post(f"{API}/auth/logout", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"

    response = client.get(f"{API}/auth/me", headers=user_headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Token invalidated. Please log in again."


def test_non_admin_cannot_manage_users(client, user_headers):
    response = client.get(f"{API}/users/", headers=user_headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Insufficient permissions"
