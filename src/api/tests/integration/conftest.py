"""Integration test fixtures.

These fixtures require a running PostgreSQL instance migrated to the
latest schema (``alembic upgrade head``). Connection settings are read from
the same ``DESKFLOW_DB_*`` environment variables the application uses.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from iam.domain.aggregates import User
from iam.domain.value_objects import UserId, UserType
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.engines import create_write_engine
from infrastructure.settings import DatabaseSettings, get_auth_settings
from main import app

SUPER_ADMIN_ID = "integration-root"

TABLES = (
    "comments",
    "ticket_history",
    "tickets",
    "user_roles",
    "role_permissions",
    "roles",
    "permissions",
    "workspaces",
    "users",
)


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests, overridable via env."""
    return DatabaseSettings()


@pytest_asyncio.fixture
async def async_session(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session for fixture setup and assertions."""
    engine = create_write_engine(integration_db_settings)
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)

    async with sessionmaker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def clean_data(async_session: AsyncSession) -> AsyncGenerator[None, None]:
    """Truncate every table before and after the test."""

    async def cleanup() -> None:
        async with async_session.begin():
            await async_session.execute(
                text(f"TRUNCATE {', '.join(TABLES)} RESTART IDENTITY CASCADE")
            )

    await cleanup()
    yield
    await cleanup()


@pytest_asyncio.fixture
async def super_admin_id(async_session: AsyncSession, clean_data) -> str:
    """Insert a super admin directly, bypassing the API."""
    async with async_session.begin():
        await UserRepository(session=async_session).save(
            User(UserId(value=SUPER_ADMIN_ID), "root", UserType.SUPER_ADMIN)
        )
    return SUPER_ADMIN_ID


def headers_for(user_id: str) -> dict[str, str]:
    """Identity headers as set by the upstream identity proxy."""
    return {get_auth_settings().user_header: user_id}


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with lifespan support."""
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
