"""Domain probe for database connectivity.

Engines, pools and the health endpoint report through this probe instead
of logging directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Events in the lifecycle of the write and read connection pools."""

    def engine_created(self, role: str, connection: str, max_connections: int) -> None:
        """An engine and its pool were created for ``role``."""
        ...

    def health_check_failed(self, error: Exception) -> None:
        """The health endpoint could not reach the database."""
        ...

    def pool_closed(self, role: str) -> None: ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe: ...


class DefaultConnectionProbe:
    """ConnectionProbe that logs through structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _fields(self, **fields: Any) -> dict[str, Any]:
        if self._context is None:
            return fields
        return {**self._context.as_dict(), **fields}

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def engine_created(self, role: str, connection: str, max_connections: int) -> None:
        self._logger.info(
            "database_engine_created",
            **self._fields(
                role=role, connection=connection, max_connections=max_connections
            ),
        )

    def health_check_failed(self, error: Exception) -> None:
        self._logger.error(
            "database_health_check_failed",
            **self._fields(error=str(error), error_type=type(error).__name__),
        )

    def pool_closed(self, role: str) -> None:
        self._logger.info("connection_pool_closed", **self._fields(role=role))
