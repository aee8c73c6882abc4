"""Structlog plumbing shared by the default application probes."""

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

    def _get_context_kwargs(self, exclude: set[str] | None = None) -> dict[str, Any]:
        """Get context as kwargs dict, excluding specified keys.

        Args:
            exclude: Set of keys to exclude from context (avoids parameter collision)

        Returns:
            Context dict with excluded keys filtered out
        """
        if self._context is None:
            return {}

        context_dict = self._context.as_dict()
        if exclude:
            return {k: v for k, v in context_dict.items() if k not in exclude}
        return context_dict

    def _emit(self, level: str, event: str, **fields: Any) -> None:
        """Log an event with the bound context merged under explicit fields."""
        context_kwargs = self._get_context_kwargs(exclude=set(fields))
        getattr(self._logger, level)(event, **fields, **context_kwargs)
