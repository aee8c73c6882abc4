"""Structlog plumbing shared by the default ticket application probes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StructlogProbe:
    """Base for default probes: holds a logger and an optional context."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def with_context(self, context: ObservationContext):
        """Create a new probe of the same type with observation context bound."""
        return type(self)(logger=self._logger, context=context)

    def _emit(self, level: str, event: str, **fields: Any) -> None:
        """Log an event; explicit fields win over bound context."""
        context_kwargs = {}
        if self._context is not None:
            context_kwargs = {
                k: v for k, v in self._context.as_dict().items() if k not in fields
            }
        getattr(self._logger, level)(event, **fields, **context_kwargs)
