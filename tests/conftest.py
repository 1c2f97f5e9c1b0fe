"""Pytest configuration and shared fixtures."""

import os


# Point settings at SQLite before the application modules are imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("ENVIRONMENT", "testing")

from collections.abc import AsyncGenerator, Awaitable, Callable, Iterable  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from realty_access.core.database import Base, get_db  # noqa: E402
from realty_access.core.permissions.models import UserPermission  # noqa: E402
from realty_access.main import create_app  # noqa: E402
from realty_access.modules.users.enums import Role, UserStatus  # noqa: E402
from realty_access.modules.users.models import RevokedToken, User  # noqa: F401, E402
from tests.factories.user import UserFactory  # noqa: E402
from tests.utils import bearer, sqlite_engine  # noqa: E402


UserMaker = Callable[..., Awaitable[User]]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = sqlite_engine(
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes.
    """
    session_factory = async_sessionmaker(
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


@pytest.fixture
async def app(db: AsyncSession):
    """Create test application instance."""
    application = create_app()

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# User and Token Fixtures
# ============================================================


@pytest.fixture
def make_user(db: AsyncSession) -> UserMaker:
    """Factory fixture that persists a user, optionally with grants.

    Usage:
        emp = await make_user(Role.EMPLOYEE, permissions=["view_posts"])
    """

    async def _make_user(
        role: Role = Role.USER,
        *,
        status: UserStatus = UserStatus.ACTIVE,
        permissions: Iterable[str] | None = None,
        **overrides,
    ) -> User:
        user = UserFactory.build(role=role, status=status, **overrides)
        db.add(user)
        await db.flush()
        if permissions is not None:
            db.add(UserPermission(user_id=user.id, permissions=list(permissions)))
            await db.flush()
        return user

    return _make_user


@pytest.fixture
async def admin(make_user: UserMaker) -> User:
    """Create an administrator."""
    return await make_user(Role.ADMIN)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    """Authorization headers for the administrator."""
    return bearer(admin)
