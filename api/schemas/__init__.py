"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.todo import (
    TodoCreateRequest,
    TodoResponse,
    TodoUpdateRequest,
)

__all__ = [
    "TodoCreateRequest",
    "TodoResponse",
    "TodoUpdateRequest",
]
