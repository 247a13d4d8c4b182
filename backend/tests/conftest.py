"""
tests/conftest.py

Test fixtures for API integration and unit tests.
Includes async clients, fake users, a controllable clock, and dependency overrides.
"""
import os
import sys
import tempfile
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Settings are read at import time, so the test environment is fixed first
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["EMAILS_ENABLED"] = "false"
os.environ["REDIS_URL"] = ""
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="softwarepros-uploads-")

# --- Imports ---
from collections.abc import AsyncGenerator, Generator
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from main import app
from softwarepros.core.config import settings
from softwarepros.core.dependencies import get_current_user
from softwarepros.core.rate_limiter import RateLimiter
from softwarepros.core.security import get_password_hash
from softwarepros.database.enums import UserRole
from softwarepros.database.models import User
from softwarepros.database.session import get_db
from softwarepros.images.models import Image
from softwarepros.posts.models import Post


# --- Helpers ---


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def db_result(value: Any = None, values: list[Any] | None = None, scalar: Any = None) -> MagicMock:
    """Builds a mock of an AsyncSession.execute() result."""
    result = MagicMock()
    result.unique.return_value.scalar_one_or_none.return_value = value
    result.unique.return_value.scalars.return_value.all.return_value = values or []
    result.scalar_one.return_value = scalar
    return result


# --- Core Test Fixtures ---


@pytest.fixture(scope="session")
def transport() -> ASGITransport:
    """Fixture for ASGI transport."""
    return ASGITransport(app=app)


@pytest_asyncio.fixture(scope="function")
async def async_client(transport: ASGITransport) -> AsyncGenerator[AsyncClient, None]:
    """Fixture for HTTP async client."""
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def contact_limiter(fake_clock: FakeClock) -> Generator[RateLimiter, None, None]:
    """Swaps the app's contact limiter for one driven by the fake clock."""
    original = app.state.contact_rate_limiter
    limiter = RateLimiter(
        window_ms=settings.CONTACT_RATE_LIMIT_WINDOW_MS,
        max_requests=settings.CONTACT_RATE_LIMIT_MAX_REQUESTS,
        clock=fake_clock,
    )
    app.state.contact_rate_limiter = limiter
    yield limiter
    app.state.contact_rate_limiter = original


# --- Fake User Fixtures ---


@pytest.fixture(scope="session")
def known_password() -> str:
    return "correctpassword"


@pytest.fixture(scope="session")
def known_password_hash(known_password: str) -> str:
    return get_password_hash(known_password)


@pytest.fixture
def fake_admin_user(known_password_hash: str) -> User:
    """Fixture for a fake admin user."""
    return User(
        id=uuid4(),
        email="admin.test@example.com",
        name="Admin Test",
        role=UserRole.ADMIN,
        hashed_password=known_password_hash,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def fake_regular_user(known_password_hash: str) -> User:
    """Fixture for a fake non-admin user."""
    return User(
        id=uuid4(),
        email="user.test@example.com",
        name="User Test",
        role=UserRole.USER,
        hashed_password=known_password_hash,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def fake_post(fake_admin_user: User) -> Post:
    """Fixture for a published post authored by the admin."""
    now = datetime.now(timezone.utc)
    return Post(
        id=uuid4(),
        title="Building Scalable Web Applications",
        slug="building-scalable-web-applications",
        content="Long form content about scaling.",
        excerpt="How we scale web apps.",
        published=True,
        published_at=now,
        meta_title=None,
        meta_description=None,
        author_id=fake_admin_user.id,
        author=fake_admin_user,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def fake_image(fake_admin_user: User) -> Image:
    """Fixture for a library image uploaded by the admin."""
    now = datetime.now(timezone.utc)
    return Image(
        id=uuid4(),
        filename="0f1e2d_team-photo.png",
        original_name="team-photo.png",
        url="/uploads/0f1e2d_team-photo.png",
        alt="Our team",
        size=2048,
        mime_type="image/png",
        uploaded_by=fake_admin_user.id,
        user=fake_admin_user,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def uploads_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Points the uploads directory at a per-test folder."""
    monkeypatch.setattr(settings, "UPLOADS_DIR", str(tmp_path))
    return tmp_path


# --- Dependency Override Fixtures ---


@pytest.fixture
def mock_db() -> AsyncMock:
    """An AsyncSession stand-in."""
    db = AsyncMock()
    db.add = MagicMock()
    return db


@pytest_asyncio.fixture
async def override_get_db(mock_db: AsyncMock) -> AsyncGenerator[AsyncMock, None]:
    """Override for the database dependency."""

    async def _override() -> AsyncGenerator[AsyncMock, None]:
        yield mock_db

    app.dependency_overrides[get_db] = _override
    yield mock_db
    app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def mock_current_admin_user(fake_admin_user: User) -> AsyncGenerator[User, None]:
    """Mock the current user as an admin."""
    app.dependency_overrides[get_current_user] = lambda: fake_admin_user
    yield fake_admin_user
    app.dependency_overrides.pop(get_current_user, None)


@pytest_asyncio.fixture
async def mock_current_regular_user(fake_regular_user: User) -> AsyncGenerator[User, None]:
    """Mock the current user as a non-admin."""
    app.dependency_overrides[get_current_user] = lambda: fake_regular_user
    yield fake_regular_user
    app.dependency_overrides.pop(get_current_user, None)
