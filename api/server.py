"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (repository setup/teardown)
- Route registration
- Request logging middleware
- Error handling
"""

import argparse
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.routes import todos_router
from core.config import settings
from core.logging import configure_logging, get_logger
from core.storage import (
    BaseTodoRepository,
    RepositoryHandle,
    StorageBackend,
    StorageFailureError,
    create_todo_repository,
)


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup: build the repository (unless one was injected), initialize it
    and publish the shared handle on app.state.
    Shutdown: release the repository's resources.
    """
    configure_logging()

    repository: Optional[BaseTodoRepository] = app.state.repository
    if repository is None:
        repository = create_todo_repository(settings)
        app.state.repository = repository

    logger.info(
        "Starting todo service...",
        storage_backend=type(repository).__name__,
    )

    try:
        await repository.setup()
    except StorageFailureError as e:
        # Requests will report storage errors until the database is reachable
        logger.error("Repository setup failed", error=str(e))

    app.state.todos = RepositoryHandle(repository)

    logger.info(
        "Todo service started",
        host=settings.server_host,
        port=settings.server_port,
    )

    yield

    logger.info("Shutting down todo service...")
    await repository.close()
    logger.info("Todo service stopped")


def create_app(repository: Optional[BaseTodoRepository] = None) -> FastAPI:
    """
    Application factory.

    Args:
        repository: Backend to serve; when omitted one is created from
            settings during startup.
    """
    app = FastAPI(
        title="Todo API",
        description="Minimal CRUD service for todos over a pluggable storage backend.",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.repository = repository

    app.include_router(todos_router)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.debug(
            "Request finished",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc) if settings.debug else "An error occurred",
            },
        )

    return app


app = create_app()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="todo-api",
        description="Serve the todo CRUD API.",
    )
    parser.add_argument(
        "-m", "--memory",
        action="store_true",
        help="Use the in-memory backend instead of PostgreSQL",
    )
    parser.add_argument("--host", default=settings.server_host)
    parser.add_argument("--port", type=int, default=settings.server_port)
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    import uvicorn

    args = parse_args(argv)
    backend = StorageBackend.MEMORY if args.memory else StorageBackend.POSTGRES

    uvicorn.run(
        create_app(create_todo_repository(settings, backend)),
        host=args.host,
        port=args.port,
    )


if __name__ == "__main__":
    main()
