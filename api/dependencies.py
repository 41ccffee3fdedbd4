"""
FastAPI dependencies for dependency injection.

The repository handle is attached to app.state when the application is
built, so every route receives the same instance without module globals.
"""

from fastapi import Request

from core.storage import RepositoryHandle


async def get_repository_handle(request: Request) -> RepositoryHandle:
    """
    Dependency that provides the shared repository handle.

    Usage:
        @router.get("/todos")
        async def list_todos(
            handle: RepositoryHandle = Depends(get_repository_handle)
        ):
            ...
    """
    handle = getattr(request.app.state, "todos", None)
    if handle is None:
        raise RuntimeError("Repository handle not initialized")
    return handle
