from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from profit_tracker.core.config import get_settings
from profit_tracker.db.base import Base
from profit_tracker.db.dependencies import get_db_session
from profit_tracker.db.views import create_reporting_views, drop_reporting_views
import profit_tracker.models.entities  # noqa: F401
from profit_tracker.main import create_app


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=engine)
    with engine.begin() as connection:
        create_reporting_views(connection)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        with engine.begin() as connection:
            drop_reporting_views(connection)
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_token(
    *,
    role: str = "admin",
    user_id: int = 1,
    username: str = "admin",
    expires_in: timedelta = timedelta(hours=8),
    secret: str | None = None,
) -> str:
    settings = get_settings()
    claims = {
        "user_id": user_id,
        "username": username,
        "role": role,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


@pytest.fixture()
def auth_headers() -> Callable[..., dict[str, str]]:
    def build(*, role: str = "admin", user_id: int = 1, username: str | None = None) -> dict[str, str]:
        token = make_token(role=role, user_id=user_id, username=username or role)
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture()
def admin_headers(auth_headers: Callable[..., dict[str, str]]) -> dict[str, str]:
    return auth_headers(role="admin")
