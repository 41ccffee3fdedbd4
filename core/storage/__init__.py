"""
Storage abstraction layer.

Provides pluggable todo repositories behind one interface.

Supported backends:
- In-memory (no persistence)
- PostgreSQL
"""

from core.storage.base import (
    MAX_LIMIT,
    BaseTodoRepository,
    RepositoryError,
    StorageFailureError,
    Todo,
    TodoNotFoundError,
)
from core.storage.factory import (
    create_todo_repository,
    get_storage_backend,
    StorageBackend,
)
from core.storage.handle import RepositoryHandle

__all__ = [
    # Abstract interface and model
    "BaseTodoRepository",
    "MAX_LIMIT",
    "Todo",
    # Errors
    "RepositoryError",
    "StorageFailureError",
    "TodoNotFoundError",
    # Factory functions
    "create_todo_repository",
    "get_storage_backend",
    "StorageBackend",
    # Shared access
    "RepositoryHandle",
]
