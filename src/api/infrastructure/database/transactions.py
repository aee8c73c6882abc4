"""Transaction helpers shared by application services.

Services own their transactions (``async with session.begin()``). These
helpers cover the two cross-cutting details: raising the isolation level for
replace-style writes, and recognising the errors the database reports when
such writes collide.
"""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

SERIALIZATION_FAILURE = "40001"
DEADLOCK_DETECTED = "40P01"


async def use_serializable(session: AsyncSession) -> None:
    """Run the current transaction at SERIALIZABLE isolation.

    Must be the first statement inside ``session.begin()``; PostgreSQL
    rejects isolation changes once a query has executed.
    """
    await session.connection(execution_options={"isolation_level": "SERIALIZABLE"})


def _sqlstate(error: DBAPIError) -> str | None:
    orig = error.orig
    # asyncpg exposes sqlstate, psycopg exposes pgcode
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_serialization_failure(error: DBAPIError) -> bool:
    """True when the database aborted the transaction to preserve isolation."""
    return _sqlstate(error) in (SERIALIZATION_FAILURE, DEADLOCK_DETECTED)


def violated_constraint(error: IntegrityError) -> str | None:
    """Return the name of the violated constraint, when the driver reports it."""
    orig = error.orig
    name = getattr(orig, "constraint_name", None)
    if name:
        return name
    # asyncpg wraps the original exception under __cause__
    cause = getattr(orig, "__cause__", None)
    return getattr(cause, "constraint_name", None)


def mentions_constraint(error: IntegrityError, constraint: str) -> bool:
    """True when the integrity error was caused by the named constraint."""
    return violated_constraint(error) == constraint or constraint in str(error)
