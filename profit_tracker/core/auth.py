"""Bearer token verification and RBAC guard utilities."""

from __future__ import annotations

from dataclasses import dataclass

import jwt
from fastapi import Depends, Header, status

from profit_tracker.core.config import get_settings
from profit_tracker.core.errors import AppError
from profit_tracker.models.entities import UserRole

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class RequestUserContext:
    """Authenticated request actor resolved from the bearer token claims."""

    user_id: int
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


def _unauthorized() -> AppError:
    return AppError(status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", "認証が必要です")


def _invalid_token() -> AppError:
    return AppError(status.HTTP_401_UNAUTHORIZED, "INVALID_TOKEN", "無効なトークンです")


def decode_access_token(token: str) -> RequestUserContext:
    """Verify token signature and expiry, then map claims to a request context."""

    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.InvalidTokenError as exc:
        raise _invalid_token() from exc

    try:
        return RequestUserContext(
            user_id=int(claims["user_id"]),
            username=str(claims["username"]),
            role=UserRole(claims["role"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise _invalid_token() from exc


def _dev_principal() -> RequestUserContext:
    settings = get_settings()
    return RequestUserContext(
        user_id=settings.auth_dev_user_id,
        username=settings.auth_dev_username,
        role=UserRole(settings.auth_dev_role),
    )


def get_current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> RequestUserContext:
    """Resolve the request actor from ``Authorization: Bearer <token>``.

    Tokens are issued by the identity side; this service only verifies them.
    """

    if authorization is None and get_settings().auth_allow_dev_principal:
        return _dev_principal()

    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise _unauthorized()

    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        raise _unauthorized()
    return decode_access_token(token)


def has_role(context: RequestUserContext, allowed_roles: set[UserRole]) -> bool:
    """Check whether user has any of the allowed roles."""

    return context.role in allowed_roles


def require_roles(*roles: UserRole):
    """Dependency factory requiring at least one provided role."""

    allowed = set(roles)

    def dependency(context: RequestUserContext = Depends(get_current_user_context)) -> RequestUserContext:
        if not has_role(context, allowed):
            raise AppError(
                status.HTTP_403_FORBIDDEN,
                "FORBIDDEN",
                "この操作を実行する権限がありません",
            )
        return context

    return dependency


MANAGE_ROLES = (UserRole.ADMIN, UserRole.MANAGER)
ADMIN_ONLY = (UserRole.ADMIN,)
