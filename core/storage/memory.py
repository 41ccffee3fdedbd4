"""
In-memory storage backend implementation.

Keeps todos in a dict keyed by id. Nothing survives a restart.
"""

import sys
import uuid
from dataclasses import replace
from itertools import islice
from typing import Optional

from core.logging import get_logger
from core.storage.base import BaseTodoRepository, Todo, TodoNotFoundError


logger = get_logger(__name__)


class MemoryTodoRepository(BaseTodoRepository):
    """
    Dict-backed todo repository.

    Iteration follows insertion order. There is no locking here;
    callers go through RepositoryHandle for exclusive access.
    """

    def __init__(self) -> None:
        self._todos: dict[uuid.UUID, Todo] = {}

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[Todo]:
        # islice rejects bounds above sys.maxsize
        start = min(offset or 0, sys.maxsize)
        stop = min(start + limit, sys.maxsize) if limit is not None else None
        return [replace(todo) for todo in islice(self._todos.values(), start, stop)]

    async def get(self, todo_id: uuid.UUID) -> Todo:
        todo = self._todos.get(todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return replace(todo)

    async def create(self, text: str) -> Todo:
        todo = Todo(id=uuid.uuid4(), text=text)
        self._todos[todo.id] = todo

        logger.debug("Todo created", todo_id=str(todo.id))
        return replace(todo)

    async def update(
        self,
        todo_id: uuid.UUID,
        *,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Todo:
        todo = await self.get(todo_id)

        if text is not None:
            todo.text = text
        if completed is not None:
            todo.completed = completed

        # Reassigning an existing key keeps its insertion position
        self._todos[todo_id] = todo

        logger.debug("Todo updated", todo_id=str(todo_id))
        return replace(todo)

    async def delete(self, todo_id: uuid.UUID) -> None:
        if self._todos.pop(todo_id, None) is None:
            raise TodoNotFoundError(todo_id)

        logger.debug("Todo deleted", todo_id=str(todo_id))
