"""Shared test doubles: in-memory SQLite store, controllable clock, wired app."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_auth_service, get_credential_store
from app.core.database import get_db
from app.core.tokens import TokenService, get_token_service
from app.main import create_app
from app.models import Base
from app.services.auth import AuthService
from app.services.credential_store import CredentialStore

# Lowest bcrypt cost keeps the suite fast.
TEST_BCRYPT_ROUNDS = 4


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime.now(UTC)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


def make_session_factory() -> sessionmaker:
    """Fresh in-memory SQLite database with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs explicit BEGIN for SAVEPOINT support; enable FK enforcement.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _record) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def make_token_service(now=None) -> TokenService:
    """Token service with secrets unique to this call."""
    suffix = uuid.uuid4().hex
    kwargs = {"now": now} if now is not None else {}
    return TokenService(
        access_secret=f"test-access-secret-{suffix}",
        refresh_secret=f"test-refresh-secret-{suffix}",
        **kwargs,
    )


def make_auth_service(db: Session, tokens: TokenService, now=None) -> AuthService:
    store = CredentialStore(db, now=now) if now is not None else CredentialStore(db)
    return AuthService(store, tokens, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


class ApiHarness:
    """An isolated app instance over its own SQLite database and token secrets."""

    def __init__(self, clock: FakeClock | None = None) -> None:
        self.clock = clock
        self.session_factory = make_session_factory()
        self.tokens = make_token_service(now=clock)
        self.app = create_app()

        def _get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        def _get_auth_service(
            store: Annotated[CredentialStore, Depends(get_credential_store)],
        ) -> AuthService:
            return AuthService(store, self.tokens, bcrypt_rounds=TEST_BCRYPT_ROUNDS)

        self.app.dependency_overrides[get_db] = _get_db
        self.app.dependency_overrides[get_token_service] = lambda: self.tokens
        self.app.dependency_overrides[get_auth_service] = _get_auth_service

    def client(self, **kwargs) -> TestClient:
        return TestClient(self.app, **kwargs)

    def register(self, client: TestClient, email: str, password: str = "secret1", **extra):
        return client.post("/api/auth/register", json={"email": email, "password": password, **extra})

    def login(self, client: TestClient, email: str, password: str = "secret1") -> dict:
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()

    def register_and_login(self, email: str, password: str = "secret1", **extra) -> dict:
        """Register and log in with a throwaway client; returns the login body."""
        with self.client() as c:
            assert self.register(c, email, password, **extra).status_code == 201
            return self.login(c, email, password)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
