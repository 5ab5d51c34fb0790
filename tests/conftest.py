import os
import tempfile

# Settings are read at import time, so the test environment must be in place first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="astrosocial-media-"))

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from astrosocial.core.config import settings
from astrosocial.core.limiter import storage as rate_limit_storage
from astrosocial.core.security import create_access_token
from astrosocial.db.database import get_db
from astrosocial.main import app
from astrosocial.models import User

TEST_PASSWORD = "Password123"


@pytest_asyncio.fixture(scope="function")
async def async_test_engine():
    """Fresh in-memory database for each test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_test_engine):
    TestSessionLocal = sessionmaker(
        bind=async_test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
    async with TestSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession):
    """Create test client with database session override"""
    def override_get_db():
        return db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    rate_limit_storage.reset()
    yield
    rate_limit_storage.reset()


@pytest.fixture
def media_root(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "MEDIA_ROOT", str(tmp_path))
    return tmp_path


@pytest_asyncio.fixture
async def make_user(db_session: AsyncSession):
    """Factory creating persisted users with a known password"""
    async def _make_user(username: str, password: str = TEST_PASSWORD, **fields) -> User:
        user = User(
            username=username,
            email=fields.pop("email", f"{username}@example.com"),
            hashed_password="",
            **fields
        )
        user.set_password(password)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    """Bearer header for a user, as issued by the login endpoint"""
    def _auth_headers(user: User) -> dict:
        scopes = ["user", "admin"] if user.is_admin else ["user"]
        return {"Authorization": f"Bearer {create_access_token(user.id, scopes)}"}

    return _auth_headers
