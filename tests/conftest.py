import os
import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING MODE
# Must happen BEFORE importing aqua.main so config.py and database.py
# build the engine against the throwaway SQLite file.
# ------------------------------------------------------------------
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_aqua.db"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENV"] = "test"

from aqua.main import app  # noqa: E402
from aqua.core.database import AsyncSessionLocal, drop_db, init_db  # noqa: E402
from aqua.core.roles import UserRole  # noqa: E402
from aqua.core.security import create_access_token  # noqa: E402
from aqua.services.auth_service import create_user  # noqa: E402
from aqua.services.customer_service import create_customer  # noqa: E402

PASSWORD = "secret123"


@pytest_asyncio.fixture
async def database():
    """Fresh schema per test."""
    await drop_db()
    await init_db()
    yield
    await drop_db()


@pytest_asyncio.fixture
async def client(database):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def session(database):
    async with AsyncSessionLocal() as s:
        yield s


@pytest_asyncio.fixture
async def make_user(database):
    async def _make(role: UserRole, email: str | None = None, **extra):
        async with AsyncSessionLocal() as s:
            return await create_user(
                s,
                full_name=extra.pop("full_name", f"{role.value.title()} User"),
                email=email or f"{role.value}-{uuid.uuid4().hex[:8]}@example.com",
                password=extra.pop("password", PASSWORD),
                role=role,
                **extra,
            )

    return _make


@pytest_asyncio.fixture
async def make_customer(database):
    """Customer record, optionally linked to a customer-role login."""
    async def _make(user=None, **fields):
        data = {"billing_address": "12 Reservoir Road", **fields}
        if user is not None:
            data["user_id"] = user.id
        async with AsyncSessionLocal() as s:
            return await create_customer(s, data)

    return _make


@pytest.fixture
def headers_for():
    def _headers(user):
        token = create_access_token(subject=user.id, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers
