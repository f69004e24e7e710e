import socket
import uuid
from collections.abc import AsyncGenerator, Iterator
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from portfolio_api.core.config import Settings, settings
from portfolio_api.core.email import ContactMailer
from portfolio_api.core.rate_limiting import limiter
from portfolio_api.models.base import Base
from portfolio_api.providers.storage.mock_adapter import MockStorage

# Use separate test database
TEST_DATABASE_URL = settings.database_url.replace(
    settings.database_name, f"{settings.database_name}_test"
)

# Test user ID (consistent across tests for predictable auth)
TEST_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")

# Security: This is a test-only secret. Production uses a real secret from env.
TEST_AUTH_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105  # gitleaks:allow

TEST_BASE_URL = "http://test"


class FixedClock:
    """Controllable clock for SessionManager tests.

    Usage:
        clock = FixedClock(datetime(2026, 1, 1, tzinfo=UTC))
        manager = SessionManager(secret=..., clock=clock)
        clock.advance(hours=5)
    """

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


def _is_postgres_available() -> bool:
    """Check if PostgreSQL is accepting connections.

    Returns:
        True if PostgreSQL is reachable on the configured port, False otherwise.
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex((settings.database_host, settings.database_port))
        sock.close()
        return result == 0
    except OSError:
        return False


# Check once at module load time
_POSTGRES_AVAILABLE = _is_postgres_available()


def skip_if_no_postgres() -> None:
    """Skip test if PostgreSQL is not available.

    Called by fixtures that require database connection.
    """
    if not _POSTGRES_AVAILABLE:
        pytest.skip(
            f"PostgreSQL not available on {settings.database_host}:"
            f"{settings.database_port}. Start database with: docker compose up -d"
        )


@pytest.fixture(autouse=True)
def _disable_rate_limiting() -> Iterator[None]:
    """Keep the shared slowapi limiter out of tests that do not test it."""
    original = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = original
    limiter.reset()


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine.

    Skips test if PostgreSQL is not available (e.g., Docker not running).
    """
    skip_if_no_postgres()

    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


# =============================================================================
# API Test Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an app under test: known secret, mock storage."""
    return Settings(
        auth_secret=SecretStr(TEST_AUTH_SECRET),
        storage_provider="mock",
        rate_limit_enabled=False,
    )


@pytest.fixture
def mock_storage() -> MockStorage:
    """In-memory storage shared by the app and the test."""
    return MockStorage()


@pytest.fixture
def mock_mailer() -> AsyncMock:
    """Mailer stand-in that records send_contact_message() calls."""
    mailer = AsyncMock(spec=ContactMailer)
    mailer.send_contact_message.return_value = True
    return mailer


@pytest.fixture
def mock_db() -> AsyncMock:
    """Session handed to routes whose repositories are patched."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def test_app(test_settings, mock_storage, mock_mailer, mock_db):
    """Application wired to the mock storage, mock mailer and mock session."""
    from portfolio_api.core.database import get_db
    from portfolio_api.main import create_app

    app = create_app(test_settings, storage=mock_storage, mailer=mock_mailer)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def auth_token(test_app) -> str:
    """Valid session token for TEST_USER_ID, signed by the app under test."""
    return test_app.state.session_manager.issue(TEST_USER_ID).token


@pytest_asyncio.fixture
async def unauthenticated_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client without a session token."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url=TEST_BASE_URL) as ac:
        yield ac


@pytest_asyncio.fixture
async def client(test_app, auth_token) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client authenticated with a Bearer token for TEST_USER_ID."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport,
        base_url=TEST_BASE_URL,
        headers={"Authorization": f"Bearer {auth_token}"},
    ) as ac:
        yield ac


# =============================================================================
# Entity stand-ins for API tests with patched repositories
# =============================================================================

_CREATED_AT = datetime(2026, 1, 15, 9, 30, tzinfo=UTC)


def make_level(name: str = "Expert", competency_level: int = 90) -> SimpleNamespace:
    return SimpleNamespace(id=uuid.uuid4(), name=name, competency_level=competency_level)


def make_skill(name: str = "Python", **overrides) -> SimpleNamespace:
    values = {
        "id": uuid.uuid4(),
        "name": name,
        "level_id": None,
        "level": make_level(),
        "icon_url": "https://storage.test/image/portfolio/skill/icon",
        "icon_public_id": "portfolio/skill/icon",
        "created_at": _CREATED_AT,
        "updated_at": _CREATED_AT,
    }
    values.update(overrides)
    values["level_id"] = values["level_id"] or values["level"].id
    return SimpleNamespace(**values)


def make_category(name: str = "Web Developer") -> SimpleNamespace:
    return SimpleNamespace(id=uuid.uuid4(), name=name)


def make_project(title: str = "Blog App", **overrides) -> SimpleNamespace:
    category = overrides.pop("category", None) or make_category()
    values = {
        "id": uuid.uuid4(),
        "title": title,
        "slug": "blog-app",
        "description": "A blog built with FastAPI",
        "category_id": category.id,
        "category": category,
        "skills": [make_skill()],
        "image_url": "https://storage.test/image/portfolio/project/old",
        "image_public_id": "portfolio/project/old",
        "link_demo": None,
        "link_repository": None,
        "created_at": _CREATED_AT,
        "updated_at": _CREATED_AT,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def make_certificate(title: str = "AWS Practitioner", **overrides) -> SimpleNamespace:
    values = {
        "id": uuid.uuid4(),
        "title": title,
        "image_url": "https://storage.test/image/portfolio/certificate/old",
        "image_public_id": "portfolio/certificate/old",
        "created_at": _CREATED_AT,
        "updated_at": _CREATED_AT,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def make_user(**overrides) -> SimpleNamespace:
    values = {
        "id": TEST_USER_ID,
        "name": "Admin",
        "email": "a@b.com",
        "password_hash": "$2b$12$notarealhash",
        "profile_url": None,
        "profile_public_id": None,
        "cv_url": None,
        "cv_public_id": None,
        "created_at": _CREATED_AT,
        "updated_at": _CREATED_AT,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PDF_BYTES = b"%PDF-1.4\n" + b"\x00" * 64
