"""Database session dependencies for FastAPI.

One engine and sessionmaker per role (write, read) is created lazily on
first use and disposed on shutdown. Sessions never auto-commit: services
open their own transactions with ``async with session.begin()``.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import EngineRole, create_engine_for
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

_probe = DefaultConnectionProbe()

_engines: dict[EngineRole, AsyncEngine] = {}
_sessionmakers: dict[EngineRole, async_sessionmaker[AsyncSession]] = {}

_engine_lock = threading.Lock()


def _sessionmaker_for(role: EngineRole) -> async_sessionmaker[AsyncSession]:
    """Return the sessionmaker for ``role``, creating its engine on first use."""
    if role not in _sessionmakers:
        with _engine_lock:
            if role not in _sessionmakers:
                settings = get_database_settings()
                engine = create_engine_for(role, settings)
                _engines[role] = engine
                _sessionmakers[role] = async_sessionmaker(
                    engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    role=role,
                    connection=settings.connection_string,
                    max_connections=settings.pool_max_connections,
                )
    return _sessionmakers[role]


def get_write_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Sessionmaker for work outside a request, such as startup tasks."""
    return _sessionmaker_for("write")


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for mutations (FastAPI dependency)."""
    async with _sessionmaker_for("write")() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for identity lookups and authorization checks.

    Each check opens its own short transaction, so it always observes the
    last committed grants.
    """
    async with _sessionmaker_for("read")() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose every engine; the next request recreates them."""
    with _engine_lock:
        engines = list(_engines.items())
        _engines.clear()
        _sessionmakers.clear()

    for role, engine in engines:
        await engine.dispose()
        _probe.pool_closed(role=role)
