"""
Todo CRUD endpoints.

- GET /todos - List todos (limit/offset)
- POST /todos - Create todo
- GET /todos/{todo_id} - Get todo
- PUT /todos/{todo_id} - Partially update todo
- DELETE /todos/{todo_id} - Delete todo

Each handler makes exactly one repository call under the handle's lock.
On get/update/delete any repository error is reported as 404, so a storage
failure there is indistinguishable from a missing id.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from api.dependencies import get_repository_handle
from api.schemas.todo import TodoCreateRequest, TodoResponse, TodoUpdateRequest
from core.logging import get_logger
from core.storage import MAX_LIMIT, RepositoryError, RepositoryHandle


logger = get_logger(__name__)
router = APIRouter(prefix="/todos", tags=["Todos"])


def _not_found(todo_id: UUID, error: RepositoryError) -> HTTPException:
    logger.info("Todo not available", todo_id=str(todo_id), error=str(error))
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Todo {todo_id} not found",
    )


@router.get("", response_model=list[TodoResponse])
async def list_todos(
    limit: Optional[int] = Query(default=None, ge=0, le=MAX_LIMIT),
    offset: Optional[int] = Query(default=None, ge=0, le=MAX_LIMIT),
    handle: RepositoryHandle = Depends(get_repository_handle),
) -> list[TodoResponse]:
    """List todos, skipping `offset` and returning at most `limit`."""
    try:
        async with handle.read() as repository:
            todos = await repository.list(limit=limit, offset=offset)
    except RepositoryError as e:
        logger.error("Failed to list todos", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list todos",
        )

    return [TodoResponse.from_todo(todo) for todo in todos]


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(
    request: TodoCreateRequest,
    handle: RepositoryHandle = Depends(get_repository_handle),
) -> TodoResponse:
    """Create a todo. The id is generated server-side and completed starts false."""
    try:
        async with handle.write() as repository:
            todo = await repository.create(request.text)
    except RepositoryError as e:
        logger.error("Failed to create todo", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create todo",
        )

    logger.info("Todo created", todo_id=str(todo.id))
    return TodoResponse.from_todo(todo)


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(
    todo_id: UUID,
    handle: RepositoryHandle = Depends(get_repository_handle),
) -> TodoResponse:
    try:
        async with handle.read() as repository:
            todo = await repository.get(todo_id)
    except RepositoryError as e:
        raise _not_found(todo_id, e)

    return TodoResponse.from_todo(todo)


@router.put("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: UUID,
    request: TodoUpdateRequest,
    handle: RepositoryHandle = Depends(get_repository_handle),
) -> TodoResponse:
    """Apply only the fields present in the body."""
    try:
        async with handle.write() as repository:
            todo = await repository.update(
                todo_id,
                text=request.text,
                completed=request.completed,
            )
    except RepositoryError as e:
        raise _not_found(todo_id, e)

    logger.info("Todo updated", todo_id=str(todo_id))
    return TodoResponse.from_todo(todo)


@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_todo(
    todo_id: UUID,
    handle: RepositoryHandle = Depends(get_repository_handle),
) -> Response:
    try:
        async with handle.write() as repository:
            await repository.delete(todo_id)
    except RepositoryError as e:
        raise _not_found(todo_id, e)

    logger.info("Todo deleted", todo_id=str(todo_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
