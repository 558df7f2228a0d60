"""Shared pytest configuration for the Comet admin test suite."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Iterator, Optional

_TEST_DIR = Path(tempfile.mkdtemp(prefix="comet-admin-tests-"))
_TEST_DB = _TEST_DIR / "test.db"

# Settings are read once at import time; configure before importing the app
os.environ["SECRET_KEY"] = "test-signing-secret-do-not-use-in-production"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB}"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_MAX"] = "100000"
os.environ["BCRYPT_ROUNDS"] = "10"
os.environ.pop("ADMIN_PASSWORD", None)

import pyotp
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from comet_admin.database import Base, async_session_maker
from comet_admin.main import app
from comet_admin.models import AdminRole, AdminUser
from comet_admin.utils.security import generate_totp_secret, get_password_hash
from comet_admin.utils.tokens import TokenConfig, TokenIssuer
from tests.helpers import ADMIN_PASSWORD, bearer, login


def _reset_database() -> None:
    for suffix in ("", "-wal", "-shm", "-journal"):
        path = Path(f"{_TEST_DB}{suffix}")
        if path.exists():
            path.unlink()


@pytest.fixture
def client() -> Iterator[TestClient]:
    """App client on a fresh database; the lifespan creates the tables."""
    _reset_database()
    with TestClient(app) as test_client:
        yield test_client


async def _insert_admin(
    username: str,
    password: str,
    role: AdminRole,
    totp_secret: Optional[str],
) -> int:
    async with async_session_maker() as db:
        admin = AdminUser(
            username=username,
            password_hash=get_password_hash(password),
            role=role,
            two_factor_secret=totp_secret,
            two_factor_enabled=totp_secret is not None,
        )
        db.add(admin)
        await db.commit()
        return admin.id


@pytest.fixture
def create_admin(client: TestClient) -> Callable[..., int]:
    """Insert an admin account directly and return its id."""

    def _create(
        username: str,
        password: str = ADMIN_PASSWORD,
        role: AdminRole = AdminRole.ADMIN,
        totp_secret: Optional[str] = None,
    ) -> int:
        return client.portal.call(_insert_admin, username, password, role, totp_secret)

    return _create


@pytest.fixture
def run_db(client: TestClient) -> Callable[[Callable[[AsyncSession], Awaitable[Any]]], Any]:
    """Run ``fn(session)`` on the app's event loop and return its result."""

    def _run(fn: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async def _call() -> Any:
            async with async_session_maker() as db:
                return await fn(db)

        return client.portal.call(_call)

    return _run


@pytest.fixture
def auth_headers(client: TestClient, create_admin: Callable[..., int]) -> Dict[str, str]:
    """Bearer headers for a freshly created admin named ``alice``."""
    create_admin("alice")
    response = login(client, "alice")
    assert response.status_code == 200, response.text
    return bearer(response.json()["token"])


@pytest.fixture
def totp_secret() -> str:
    return generate_totp_secret()


@pytest.fixture
def totp_now() -> Callable[[str], str]:
    return lambda secret: pyotp.TOTP(secret).now()


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(TokenConfig(signing_secret="unit-test-secret"))


@pytest_asyncio.fixture
async def db_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Engine on its own SQLite file, for service-level tests."""
    import comet_admin.models  # noqa: F401

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'service.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session
