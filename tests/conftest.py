"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# These must be set before any app import that triggers Settings validation
# (db.session and api.main read settings at import time).
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-0123456789abcdef0123456789")
# Cheap Argon2 parameters keep the suite fast; production defaults are much higher
os.environ["PASSWORD_HASH_TIME_COST"] = "1"
os.environ["PASSWORD_HASH_MEMORY_COST"] = "1024"
os.environ["PASSWORD_HASH_PARALLELISM"] = "1"

from core.config import Settings, get_settings  # noqa: E402
from core.passwords import PasswordHasher  # noqa: E402
from core.session_tokens import SessionSigner  # noqa: E402
from models.base import Base  # noqa: E402
from models.user import User  # noqa: E402
from services import user_service  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy control transactions on pysqlite so SAVEPOINTs work.

    pysqlite's own implicit BEGIN handling breaks begin_nested(); signup relies
    on a SAVEPOINT to recover from duplicate-email inserts.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, _connection_record) -> None:  # noqa: ANN001
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn) -> None:  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")


@pytest.fixture
def settings() -> Settings:
    """Settings as the application sees them in tests."""
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def hasher(settings: Settings) -> PasswordHasher:
    """Password hasher with the (cheap) test cost parameters."""
    return PasswordHasher.from_settings(settings)


@pytest.fixture
def signer(settings: Settings) -> SessionSigner:
    """Session signer using the test secret."""
    return SessionSigner.from_settings(settings)


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create a fresh in-memory database for each test.

    StaticPool keeps a single connection so the in-memory database survives
    across sessions within the test.
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    _enable_sqlite_savepoints(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session bound to the per-test database."""
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(
    db_session: AsyncSession,
    settings: Settings,  # noqa: ARG001
) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database session override."""
    from api.main import app  # noqa: PLC0415
    from db.session import get_async_session  # noqa: PLC0415

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Authenticated users
# =============================================================================

DEFAULT_PASSWORD = "123456"


async def create_user_with_token(
    db_session: AsyncSession,
    hasher: PasswordHasher,
    signer: SessionSigner,
    email: str,
) -> tuple[User, str]:
    """Insert a user directly and issue a token for them."""
    user = await user_service.create_user(db_session, email, hasher.hash(DEFAULT_PASSWORD))
    return user, signer.issue(user.id)


@asynccontextmanager
async def authenticated_client(
    db_session: AsyncSession,
    token: str,
) -> AsyncGenerator[AsyncClient]:
    """
    Yield an AsyncClient that sends `token` as a bearer credential.

    Shares the test's database session with any other client in the test.
    """
    from api.main import app  # noqa: PLC0415
    from db.session import get_async_session  # noqa: PLC0415

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    ) as auth_client:
        yield auth_client


@pytest.fixture
async def user_a(
    db_session: AsyncSession,
    hasher: PasswordHasher,
    signer: SessionSigner,
) -> tuple[User, str]:
    """First test user and their token."""
    return await create_user_with_token(db_session, hasher, signer, "user-a@example.com")


@pytest.fixture
async def user_b(
    db_session: AsyncSession,
    hasher: PasswordHasher,
    signer: SessionSigner,
) -> tuple[User, str]:
    """Second test user and their token."""
    return await create_user_with_token(db_session, hasher, signer, "user-b@example.com")


@pytest.fixture
async def client_as_user_a(
    client: AsyncClient,  # noqa: ARG001 - installs overrides and clears them afterwards
    db_session: AsyncSession,
    user_a: tuple[User, str],
) -> AsyncGenerator[AsyncClient]:
    """Client authenticated as user A."""
    async with authenticated_client(db_session, user_a[1]) as auth_client:
        yield auth_client


@pytest.fixture
async def client_as_user_b(
    client: AsyncClient,  # noqa: ARG001
    db_session: AsyncSession,
    user_b: tuple[User, str],
) -> AsyncGenerator[AsyncClient]:
    """Client authenticated as user B."""
    async with authenticated_client(db_session, user_b[1]) as auth_client:
        yield auth_client
