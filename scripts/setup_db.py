"""
Database setup script.

Creates the database named in the configured URL and the todos table.
Run this before starting the service against PostgreSQL.

Usage:
    python -m scripts.setup_db
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import asyncpg
from sqlalchemy.engine import make_url

from core.config import settings
from core.logging import configure_logging, get_logger
from core.storage.postgres import PostgresTodoRepository


logger = get_logger(__name__)


async def setup_database() -> None:
    """Create database and tables."""
    url = make_url(settings.postgres_async_url)
    db_name = url.database

    logger.info("Connecting to PostgreSQL", host=url.host, database=db_name)

    # Connect to the maintenance database to create ours
    conn = await asyncpg.connect(
        user=url.username,
        password=url.password,
        host=url.host,
        port=url.port,
        database="postgres",
    )
    try:
        exists = await conn.fetchval(
            "SELECT 1 FROM pg_database WHERE datname = $1",
            db_name,
        )

        if not exists:
            await conn.execute(f'CREATE DATABASE "{db_name}"')
            logger.info("Database created", database=db_name)
        else:
            logger.info("Database already exists", database=db_name)
    finally:
        await conn.close()

    repository = PostgresTodoRepository(settings.postgres_async_url)
    try:
        await repository.setup()
    finally:
        await repository.close()

    logger.info("Database setup complete")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(setup_database())
