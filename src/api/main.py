"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.services import SuperAdminBootstrapService
from iam.infrastructure.user_repository import UserRepository
from iam.presentation import router as iam_router
from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_session,
    get_write_sessionmaker,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultConnectionProbe, DefaultStartupProbe
from infrastructure.settings import get_iam_settings, get_settings
from infrastructure.version import __version__
from shared_kernel.middleware import RequestContextMiddleware
from tickets.presentation import router as tickets_router


async def bootstrap_super_admin(probe: DefaultStartupProbe) -> None:
    """Ensure the configured super admin exists before serving requests."""
    iam_settings = get_iam_settings()
    sessionmaker = get_write_sessionmaker()

    async with sessionmaker() as session:
        service = SuperAdminBootstrapService(
            user_repository=UserRepository(session=session),
            session=session,
            probe=probe,
        )
        await service.ensure_super_admin(
            iam_settings.bootstrap_super_admin_id,
            iam_settings.bootstrap_super_admin_username,
        )


@asynccontextmanager
async def deskflow_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Super admin bootstrap
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    configure_logging(get_settings().log_level)
    probe = DefaultStartupProbe()

    await bootstrap_super_admin(probe)
    probe.application_started(version=__version__)

    yield

    probe.application_stopped()
    await close_database_connections()


app = FastAPI(
    title="Deskflow API",
    description="Multi-tenant ticket tracking with workspace-scoped roles",
    version=__version__,
    lifespan=deskflow_lifespan,
)

app.add_middleware(RequestContextMiddleware)

app.include_router(iam_router)
app.include_router(tickets_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> dict:
    """Check database connection health."""
    try:
        async with session.begin():
            await session.execute(text("SELECT 1"))
        return {"status": "ok", "connected": True}
    except Exception as e:
        DefaultConnectionProbe().health_check_failed(e)
        return {
            "status": "error",
            "connected": False,
            "error": str(e),
        }
