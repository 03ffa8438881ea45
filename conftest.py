import os
import uuid
from typing import AsyncGenerator, Optional

# Settings are read at import time by the db engine and the rate limiter, so
# the test environment has to be in place before any project import.
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SMTP_USERNAME"] = ""
os.environ["SMTP_PASSWORD"] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.auth.models import AuthUser, Role
from libs.common.config import get_settings
from libs.db.base import Base
from libs.db.session import get_async_db
from services.gateway_service.app.main import app

# Import all models so metadata includes every table
from services.communications_service import models as _communications_models  # noqa: F401
from services.community_service import models as _community_models  # noqa: F401
from services.donations_service import models as _donations_models  # noqa: F401
from services.jobs_service import models as _jobs_models  # noqa: F401
from services.members_service import models as _member_models  # noqa: F401
from services.rewards_service import models as _rewards_models  # noqa: F401

get_settings.cache_clear()
settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """
    A fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive so every session sees the
    same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient for the gateway app with the DB dependency overridden.
    """

    async def _override_db():
        yield db_session

    app.dependency_overrides[get_async_db] = _override_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def make_auth_user(
    role: Role = Role.ALUMNI,
    tenant_id: Optional[uuid.UUID] = None,
    user_id: Optional[uuid.UUID] = None,
    email: Optional[str] = None,
) -> AuthUser:
    user_id = user_id or uuid.uuid4()
    return AuthUser(
        sub=user_id,
        email=email or f"user-{user_id.hex[:8]}@example.com",
        role=role,
        tenant_id=tenant_id,
    )


def auth_headers_for(user: AuthUser) -> dict:
    """Sign a real bearer token for ``user``."""
    claims = {
        "sub": str(user.user_id),
        "email": user.email,
        "role": user.role.value,
    }
    if user.tenant_id:
        claims["tenant_id"] = str(user.tenant_id)
    token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def tenant_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def admin_user(tenant_id) -> AuthUser:
    return make_auth_user(Role.COLLEGE_ADMIN, tenant_id)


@pytest.fixture
def staff_user(tenant_id) -> AuthUser:
    return make_auth_user(Role.STAFF, tenant_id)


@pytest.fixture
def alumni_user(tenant_id) -> AuthUser:
    return make_auth_user(Role.ALUMNI, tenant_id)
