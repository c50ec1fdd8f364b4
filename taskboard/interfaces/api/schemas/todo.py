"""Todo schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TodoCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    due_date: datetime | None = None
    tags: list[str] = Field(default_factory=list, max_length=5)


class TodoUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    due_date: datetime | None = None
    tags: list[str] | None = Field(default=None, max_length=5)

    model_config = ConfigDict(extra="forbid")


class TodoToggle(BaseModel):
    completed: bool | None = Field(
        default=None, description="Estado deseado; si se omite se invierte el actual"
    )


class TodoRead(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None
    completed: bool
    due_date: datetime | None
    tags: list[str]
    created_at: datetime | None
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class BulkActionRequest(BaseModel):
    ids: list[int] = Field(..., min_length=1, max_length=50)
    action: Literal["complete", "delete"]


class BulkActionResponse(BaseModel):
    success: bool
    message: str
    count: int
