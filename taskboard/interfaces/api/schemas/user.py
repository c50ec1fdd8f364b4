"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRead(BaseModel):
    id: int
    name: str | None
    email: EmailStr
    role: str
    approved: bool
    created_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class PendingUserRead(BaseModel):
    user_id: int
    name: str | None
    email: EmailStr
    registered_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class UserReviewRequest(BaseModel):
    user_id: int = Field(..., gt=0, description="Identificador del usuario a revisar")
    approved: bool = Field(..., description="Verdadero para aprobar, falso para rechazar")


class UserReviewResponse(BaseModel):
    user_id: int
    approved: bool
    message: str
