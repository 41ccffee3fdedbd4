"""
Abstract base class for todo repositories.

This module defines the contract that all storage implementations must follow,
so the in-memory and PostgreSQL backends can be swapped at startup.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


# Largest limit or offset a backend accepts (BIGINT max)
MAX_LIMIT = 2**63 - 1


class RepositoryError(Exception):
    """Base error raised by every repository operation."""


class TodoNotFoundError(RepositoryError):
    """The requested todo id has no corresponding record."""

    def __init__(self, todo_id: uuid.UUID):
        super().__init__(f"Todo {todo_id} not found")
        self.todo_id = todo_id


class StorageFailureError(RepositoryError):
    """An underlying storage fault unrelated to absence."""


@dataclass
class Todo:
    """A single todo record."""
    id: uuid.UUID
    text: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Todo":
        """Create from dictionary (or a database row mapping)."""
        todo_id = data["id"]
        if not isinstance(todo_id, uuid.UUID):
            todo_id = uuid.UUID(str(todo_id))
        return cls(
            id=todo_id,
            text=data["text"],
            completed=bool(data.get("completed", False)),
        )


class BaseTodoRepository(ABC):
    """
    Abstract base class for todo storage.

    Every fallible operation raises a RepositoryError subclass:
    TodoNotFoundError when the id is absent, StorageFailureError
    for anything else.
    """

    async def setup(self) -> None:
        """
        Initialize the storage (connections, tables).

        This should be idempotent.
        """

    async def close(self) -> None:
        """Clean up resources."""

    @abstractmethod
    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[Todo]:
        """
        List todos in backend-defined order.

        Skips `offset` items (default 0) and returns at most `limit`
        items (default unbounded).
        """
        pass

    @abstractmethod
    async def get(self, todo_id: uuid.UUID) -> Todo:
        """Get a todo by id."""
        pass

    @abstractmethod
    async def create(self, text: str) -> Todo:
        """Create a todo with a fresh id and completed=False."""
        pass

    @abstractmethod
    async def update(
        self,
        todo_id: uuid.UUID,
        *,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Todo:
        """
        Update specific fields of a todo.

        Only provided fields will be updated. Returns the updated record.
        """
        pass

    @abstractmethod
    async def delete(self, todo_id: uuid.UUID) -> None:
        """Delete a todo by id."""
        pass
