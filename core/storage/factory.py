"""
Storage factory for creating todo repository instances.

This module provides factory functions to create the appropriate
repository implementation based on configuration or the command line.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from core.logging import get_logger
from core.storage.base import BaseTodoRepository


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    MEMORY = "memory"
    POSTGRES = "postgres"


def get_storage_backend(value: Union[str, "Settings"]) -> StorageBackend:
    """
    Resolve a storage backend from a name or from settings.

    Args:
        value: Backend name, or application settings

    Returns:
        The selected storage backend
    """
    backend_str = value if isinstance(value, str) else value.storage_backend
    backend_str = backend_str.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


def create_todo_repository(
    settings: "Settings",
    backend: Optional[StorageBackend] = None,
) -> BaseTodoRepository:
    """
    Create a todo repository instance.

    Args:
        settings: Application settings
        backend: Explicit backend; defaults to settings.storage_backend

    Returns:
        Configured repository instance (not yet initialized)
    """
    if backend is None:
        backend = get_storage_backend(settings)

    if backend == StorageBackend.MEMORY:
        from core.storage.memory import MemoryTodoRepository

        logger.info("Creating in-memory todo repository")
        return MemoryTodoRepository()

    elif backend == StorageBackend.POSTGRES:
        from core.storage.postgres import PostgresTodoRepository

        logger.info("Creating PostgreSQL todo repository")
        return PostgresTodoRepository(
            async_connection_string=settings.postgres_async_url,
            echo=settings.debug,
        )

    else:
        raise ValueError(f"Unsupported backend: {backend}")
