"""Test configuration and fixtures.

Every test gets its own database:
1. A fresh SQLite file (aiosqlite) under the test's tmp_path, schema created from the models
2. Set TEST_DATABASE_URL to run against another backend (e.g. PostgreSQL via asyncpg)
3. Each HTTP request gets its own session from the test engine, so concurrent
   requests behave as they do in production
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

from dotenv import load_dotenv

# Load test environment variables before the application reads its settings
test_env_path = Path(__file__).parent.parent / ".env.test"
load_dotenv(test_env_path, override=True)

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./studies_api_test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-do-not-use-in-production")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SESSION_CLEANUP_INTERVAL_SECONDS", "0")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from studies_api.database.base import Base  # noqa: E402
from studies_api.database.client import build_engine  # noqa: E402
from studies_api.database.dependencies import get_db_session  # noqa: E402
from studies_api.features.auth.dependencies import get_token_codec  # noqa: E402
from studies_api.features.auth.token_codec import TokenCodec, TokenKind, utc_now  # noqa: E402
from studies_api.features.user.models import User, UserRole, UserState  # noqa: E402
from studies_api.main import app  # noqa: E402

# Database Setup - Function Scope (Fresh Database Per Test)


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """Create an engine with a freshly created schema."""
    test_db_url = os.getenv("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    engine = build_engine(test_db_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Database session for direct service/store calls. Nothing is committed implicitly."""
    async with session_factory() as async_session:
        yield async_session


# FastAPI Client & Dependency Overrides


@pytest_asyncio.fixture
async def client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP test client bound to the test database.

    This client is unauthenticated. Use auth_client for authenticated requests.
    """

    async def _get_test_session():
        async with session_factory() as request_session:
            try:
                yield request_session
                await request_session.commit()
            except Exception:
                await request_session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _get_test_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def codec() -> TokenCodec:
    """The application's token codec (same secret and lifetimes)."""
    return get_token_codec()


# Test User Factories


@pytest_asyncio.fixture
async def make_user(session_factory: async_sessionmaker[AsyncSession]):
    """Factory fixture to create committed test users.

    Usage:
        user = await make_user()                              # owner, state new
        resident = await make_user(role=UserRole.RESIDENT)
        blocked = await make_user(state=UserState.BLOCKED)
    """
    counter = 0  # Counter for unique email/login generation

    async def _factory(
        login=None,
        email=None,
        password="TestPass123!",
        role=UserRole.OWNER,
        state=UserState.NEW,
    ) -> User:
        nonlocal counter
        counter += 1

        if login is None:
            login = f"user{counter}"
        if email is None:
            email = f"user{counter}@somewhere.com"

        user = User(
            login=login,
            email=email,
            hashed_password=User.hash_password(password),
            role=role.value,
            state=state.value,
        )

        async with session_factory() as factory_session:
            factory_session.add(user)
            await factory_session.commit()
        return user

    yield _factory


@pytest.fixture
def auth_headers(codec: TokenCodec):
    """Factory for an Authorization header with a fresh access token for ``user``.

    Usage:
        response = await client.get("/users", headers=auth_headers(resident))
    """

    def _headers(user: User) -> dict[str, str]:
        access = codec.issue(user.id, UserRole(user.role), TokenKind.ACCESS, utc_now())
        return {"Authorization": f"Bearer {access.token}"}

    return _headers


@pytest_asyncio.fixture
async def auth_client(client: AsyncClient, make_user, codec: TokenCodec):
    """Authenticated client with an owner user.

    Carries a freshly issued access token; no login request, no stored session.

    Returns:
        tuple: (client, user) - both the HTTP client and the authenticated user

    """
    user = await make_user()
    access = codec.issue(user.id, UserRole.OWNER, TokenKind.ACCESS, utc_now())
    client.headers["Authorization"] = f"Bearer {access.token}"

    yield client, user
