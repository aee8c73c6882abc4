"""Structlog configuration for the application.

Configures structlog with colored console output for development
and JSON output for production. Standard library loggers (uvicorn,
SQLAlchemy echo) are routed to stdout at the same level.
"""

import logging
import os
import sys

import structlog


def resolve_level(log_level: str) -> int:
    """Translate a level name into its numeric value; unknown names mean INFO."""
    level = logging.getLevelName(log_level.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def use_colors() -> bool:
    """Colored output when FORCE_COLOR is set or stdout is a TTY."""
    # FORCE_COLOR=1 enables colors in non-TTY environments like Docker
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return force_color or sys.stdout.isatty()


def _renderers(colors: bool) -> list[structlog.types.Processor]:
    if colors:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog and the standard library root logger.

    Args:
        log_level: Minimum level name (e.g. "DEBUG", "INFO")
    """
    level = resolve_level(log_level)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            *_renderers(use_colors()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
