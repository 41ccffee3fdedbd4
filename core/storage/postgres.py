"""
PostgreSQL storage backend implementation.

Uses SQLAlchemy async (asyncpg driver) with the engine's connection pool.
Each operation checks out one pooled connection, runs one parameterized
statement and hands the connection back on exit.
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.logging import get_logger
from core.storage.base import (
    MAX_LIMIT,
    BaseTodoRepository,
    StorageFailureError,
    Todo,
    TodoNotFoundError,
)


logger = get_logger(__name__)


class PostgresTodoRepository(BaseTodoRepository):
    """
    PostgreSQL-based todo repository.

    Rows come back in primary-key order. Any database error, including a
    failure to check out a connection, is raised as StorageFailureError.
    """

    TABLE_NAME = "todos"

    def __init__(
        self,
        async_connection_string: str,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
    ):
        """
        Initialize PostgreSQL todo repository.

        Args:
            async_connection_string: PostgreSQL async connection URI (asyncpg format)
            echo: Whether to echo SQL statements
            pool_size: Connections kept open in the pool
            max_overflow: Extra connections allowed beyond pool_size
        """
        self._connection_string = async_connection_string
        self._echo = echo
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def setup(self) -> None:
        """Initialize the engine and create the table if not exists."""
        if self._engine is None:
            self._engine = create_async_engine(
                self._connection_string,
                echo=self._echo,
                pool_pre_ping=True,
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
            )
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

        async with self._translate_errors("setup"):
            async with self._engine.begin() as conn:
                await conn.execute(sa.text(f"""
                    CREATE TABLE IF NOT EXISTS {self.TABLE_NAME} (
                        id UUID PRIMARY KEY,
                        text TEXT NOT NULL,
                        completed BOOLEAN NOT NULL DEFAULT FALSE
                    )
                """))

        logger.info("PostgreSQL todo repository initialized", table=self.TABLE_NAME)

    def _get_session(self) -> AsyncSession:
        """Get a new session."""
        if self._session_factory is None:
            raise RuntimeError(
                "Repository not initialized. Call setup() first."
            )
        return self._session_factory()

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncGenerator[None, None]:
        try:
            yield
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "Database operation failed",
                operation=operation,
                error=str(e),
            )
            raise StorageFailureError(f"{operation} failed: {e}") from e

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[Todo]:
        params = {
            "offset": offset or 0,
            "limit": MAX_LIMIT if limit is None else limit,
        }

        async with self._translate_errors("list"):
            async with self._get_session() as session:
                result = await session.execute(
                    sa.text(f"""
                        SELECT id, text, completed FROM {self.TABLE_NAME}
                        ORDER BY id
                        OFFSET :offset LIMIT :limit
                    """),
                    params,
                )
                rows = result.mappings().all()

        return [Todo.from_dict(dict(row)) for row in rows]

    async def get(self, todo_id: uuid.UUID) -> Todo:
        async with self._translate_errors("get"):
            async with self._get_session() as session:
                result = await session.execute(
                    sa.text(f"SELECT id, text, completed FROM {self.TABLE_NAME} WHERE id = :id"),
                    {"id": todo_id},
                )
                row = result.mappings().first()

        if row is None:
            raise TodoNotFoundError(todo_id)
        return Todo.from_dict(dict(row))

    async def create(self, text: str) -> Todo:
        todo_id = uuid.uuid4()

        async with self._translate_errors("create"):
            async with self._get_session() as session:
                result = await session.execute(
                    sa.text(f"""
                        INSERT INTO {self.TABLE_NAME} (id, text)
                        VALUES (:id, :text)
                        RETURNING id, text, completed
                    """),
                    {"id": todo_id, "text": text},
                )
                row = result.mappings().one()
                await session.commit()

        logger.debug("Todo created", todo_id=str(todo_id))
        return Todo.from_dict(dict(row))

    async def update(
        self,
        todo_id: uuid.UUID,
        *,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Todo:
        # Build dynamic SET clause
        set_parts = []
        params: dict[str, Any] = {"id": todo_id}

        if text is not None:
            set_parts.append("text = :text")
            params["text"] = text
        if completed is not None:
            set_parts.append("completed = :completed")
            params["completed"] = completed

        if not set_parts:
            return await self.get(todo_id)

        query = f"""
            UPDATE {self.TABLE_NAME}
            SET {', '.join(set_parts)}
            WHERE id = :id
            RETURNING id, text, completed
        """

        async with self._translate_errors("update"):
            async with self._get_session() as session:
                result = await session.execute(sa.text(query), params)
                row = result.mappings().first()
                await session.commit()

        if row is None:
            raise TodoNotFoundError(todo_id)

        logger.debug("Todo updated", todo_id=str(todo_id))
        return Todo.from_dict(dict(row))

    async def delete(self, todo_id: uuid.UUID) -> None:
        async with self._translate_errors("delete"):
            async with self._get_session() as session:
                result = await session.execute(
                    sa.text(f"DELETE FROM {self.TABLE_NAME} WHERE id = :id"),
                    {"id": todo_id},
                )
                await session.commit()
                deleted = result.rowcount

        if deleted == 0:
            raise TodoNotFoundError(todo_id)

        logger.debug("Todo deleted", todo_id=str(todo_id))

    async def close(self) -> None:
        """Close database engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
        logger.info("PostgreSQL todo repository closed")
