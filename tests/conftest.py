import os
from typing import AsyncGenerator, Dict

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from institute_fees.auth.models import User
from institute_fees.auth.security import create_access_token, hash_password
from institute_fees.db.session import Base, get_db
from institute_fees.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "StrongPass123"


@pytest.fixture()
async def engine():
    """Fresh in-memory database per test; StaticPool keeps the single connection alive."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test and override FastAPI dependency."""
    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.clear()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def _create_user(
    db: AsyncSession,
    email: str,
    role: str = "user",
    is_approved: bool = True,
    full_name: str = "Test User",
) -> User:
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
        is_approved=is_approved,
        status="ACTIVE",
    )
    db.add(user)
    await db.commit()
    return user


def auth_headers_for(user: User) -> Dict[str, str]:
    token = create_access_token(
        subject={"sub": str(user.id), "user_id": str(user.id), "role": user.role}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(
        db_session, "admin@institute.com", role="admin", is_approved=True, full_name="Admin"
    )


@pytest.fixture()
async def staff_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "staff@institute.com", full_name="Staff Member")


@pytest.fixture()
async def pending_user(db_session: AsyncSession) -> User:
    return await _create_user(
        db_session, "pending@institute.com", is_approved=False, full_name="Pending Person"
    )


@pytest.fixture()
def admin_headers(admin_user: User) -> Dict[str, str]:
    return auth_headers_for(admin_user)


@pytest.fixture()
def staff_headers(staff_user: User) -> Dict[str, str]:
    return auth_headers_for(staff_user)


@pytest.fixture()
def pending_headers(pending_user: User) -> Dict[str, str]:
    return auth_headers_for(pending_user)
