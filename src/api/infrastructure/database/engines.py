"""Async SQLAlchemy engines backed by asyncpg.

Writes and reads use separate pools so that permission checks made on
every request are never starved by long write transactions. Each pool tags
its connections with a distinct ``application_name`` for pg_stat_activity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

EngineRole = Literal["write", "read"]

APPLICATION_NAME = "deskflow-api"

__all__ = [
    "EngineRole",
    "build_async_url",
    "create_engine_for",
    "create_read_engine",
    "create_write_engine",
]


def create_engine_for(role: EngineRole, settings: DatabaseSettings) -> AsyncEngine:
    """Create an engine whose pool holds between min and max connections."""
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_min_connections,
        max_overflow=settings.pool_max_connections - settings.pool_min_connections,
        pool_pre_ping=True,
        echo=settings.echo,
        connect_args={
            "server_settings": {"application_name": f"{APPLICATION_NAME}-{role}"}
        },
    )


def create_write_engine(settings: DatabaseSettings) -> AsyncEngine:
    return create_engine_for("write", settings)


def create_read_engine(settings: DatabaseSettings) -> AsyncEngine:
    return create_engine_for("read", settings)


def build_async_url(settings: DatabaseSettings) -> str:
    """Build the asyncpg URL, percent-encoding credentials."""
    url = URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )
    return url.render_as_string(hide_password=False)
