from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from profit_tracker.core.auth import RequestUserContext, decode_access_token, has_role
from profit_tracker.core.config import get_settings
from profit_tracker.core.errors import AppError
from profit_tracker.models.entities import User, UserRole


def _token(claims: dict[str, object], *, secret: str | None = None) -> str:
    settings = get_settings()
    payload = {"exp": datetime.now(timezone.utc) + timedelta(hours=1), **claims}
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


def test_has_role_matches_expected_roles() -> None:
    context = RequestUserContext(user_id=1, username="manager", role=UserRole.MANAGER)

    assert has_role(context, {UserRole.ADMIN, UserRole.MANAGER}) is True
    assert has_role(context, {UserRole.ADMIN}) is False
    assert context.is_admin is False


def test_decode_access_token_maps_claims() -> None:
    context = decode_access_token(_token({"user_id": 7, "username": "sato", "role": "admin"}))

    assert context == RequestUserContext(user_id=7, username="sato", role=UserRole.ADMIN)
    assert context.is_admin is True


@pytest.mark.parametrize(
    "token",
    [
        _token({"user_id": 1, "username": "x", "role": "admin"}, secret="wrong-secret"),
        _token({"user_id": 1, "username": "x", "role": "owner"}),
        _token({"username": "x", "role": "admin"}),
        "not-a-jwt",
    ],
)
def test_decode_access_token_rejects_bad_tokens(token: str) -> None:
    with pytest.raises(AppError) as exc_info:
        decode_access_token(token)

    assert exc_info.value.status_code == 401
    assert exc_info.value.code == "INVALID_TOKEN"


def test_missing_token_is_unauthorized(client: TestClient) -> None:
    response = client.get("/api/v1/clients")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": {"code": "UNAUTHORIZED", "message": "認証が必要です"},
    }


def test_non_bearer_scheme_is_unauthorized(client: TestClient) -> None:
    response = client.get("/api/v1/clients", headers={"Authorization": "Basic abc"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_expired_token_is_rejected(client: TestClient) -> None:
    expired_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    token = _token({"user_id": 1, "username": "x", "role": "admin", "exp": expired_at})

    response = client.get("/api/v1/clients", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


def test_user_role_cannot_create_client(client: TestClient, auth_headers) -> None:
    response = client.post(
        "/api/v1/clients",
        headers=auth_headers(role="user"),
        json={"client_code": "C-1", "name": "Acme"},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_dev_principal_is_used_when_enabled(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_ALLOW_DEV_PRINCIPAL", "true")
    get_settings.cache_clear()
    try:
        response = client.get("/api/v1/clients")
    finally:
        monkeypatch.delenv("AUTH_ALLOW_DEV_PRINCIPAL")
        get_settings.cache_clear()

    assert response.status_code == 200


def test_me_returns_user_row(client: TestClient, db_session: Session, auth_headers) -> None:
    user = User(username="tanaka", role=UserRole.MANAGER, is_active=True)
    db_session.add(user)
    db_session.commit()

    response = client.get(
        "/api/v1/auth/me",
        headers=auth_headers(role="manager", user_id=user.user_id, username="tanaka"),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user_id"] == user.user_id
    assert data["username"] == "tanaka"
    assert data["role"] == "manager"
    assert data["is_active"] is True


def test_me_returns_404_for_unknown_user(client: TestClient, auth_headers) -> None:
    response = client.get("/api/v1/auth/me", headers=auth_headers(user_id=999))

    assert response.status_code == 404
    assert response.json()["error"] == {"code": "NOT_FOUND", "message": "ユーザーが見つかりません"}
