"""
Structured logging for the todo service.

structlog renders application events (repository calls, request lines).
Console output in development, JSON elsewhere. Standard-library loggers
from uvicorn and SQLAlchemy go to the same stream at levels tuned so the
request middleware is the only per-request line.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from core.config import settings


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def _third_party_levels(level: int) -> dict[str, int]:
    return {
        # api.server logs every request already
        "uvicorn.access": logging.WARNING,
        "uvicorn.error": level,
        # SQL statements only when debugging the relational backend
        "sqlalchemy.engine": logging.INFO if settings.debug else logging.WARNING,
        "asyncpg": logging.WARNING,
    }


def configure_logging() -> None:
    """Configure structlog and the standard-library loggers it sits beside."""
    level = _resolve_level(settings.log_level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.is_development:
        renderer: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderer = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name, name_level in _third_party_levels(level).items():
        logging.getLogger(name).setLevel(name_level)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger, optionally bound to context.

    Usage:
        logger = get_logger(__name__, backend="postgres")
        logger.debug("Todo deleted", todo_id=str(todo_id))
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
