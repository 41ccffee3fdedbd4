"""
Todo request and response schemas.

These Pydantic models define the API contract and provide
type coercion and documentation.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from core.storage.base import Todo


class TodoCreateRequest(BaseModel):
    """Request body for creating a todo."""

    text: str = Field(
        ...,
        description="Todo text",
        examples=["buy milk"],
    )


class TodoUpdateRequest(BaseModel):
    """Request body for a partial update. Omitted fields stay unchanged."""

    text: Optional[str] = Field(
        default=None,
        description="New text",
    )
    completed: Optional[bool] = Field(
        default=None,
        description="New completion flag",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"completed": True},
                {"text": "buy oat milk", "completed": False},
            ]
        }
    }


class TodoResponse(BaseModel):
    """A stored todo."""

    id: UUID = Field(
        ...,
        description="Server-generated identifier",
    )
    text: str
    completed: bool = False

    @classmethod
    def from_todo(cls, todo: Todo) -> "TodoResponse":
        return cls(**todo.to_dict())
