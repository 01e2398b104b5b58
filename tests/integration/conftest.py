"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session.
"""

import uuid
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete

from src.main import app
from src.vt_common.database import async_session_factory
from src.vt_gateway.auth.password import hash_password
from src.vt_gateway.user.db_models import PasswordResetTokenModel, UserModel
from tests.helpers import SeedUser


@pytest_asyncio.fixture(loop_scope="session")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Fresh cookie jar per test, session-wide event loop."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def seed_user() -> AsyncGenerator[SeedUser, None]:
    """Factory inserting users straight into PG; rows are removed afterwards."""
    created: list[str] = []

    async def _seed(role: str = "DEALER", status: str = "ACTIVE") -> dict[str, str]:
        uid = uuid.uuid4().hex[:8]
        user = {"email": f"test_{uid}@example.com", "password": "TestPass123"}
        async with async_session_factory() as db, db.begin():
            db.add(
                UserModel(
                    email=user["email"],
                    name=f"Test {uid}",
                    password_hash=hash_password(user["password"]),
                    role=role,
                    status=status,
                )
            )
        created.append(user["email"])
        return user

    yield _seed

    async with async_session_factory() as db, db.begin():
        await db.execute(
            delete(PasswordResetTokenModel).where(PasswordResetTokenModel.email.in_(created))
        )
        await db.execute(delete(UserModel).where(UserModel.email.in_(created)))
