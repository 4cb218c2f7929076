from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class UserCreateRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=64, description="The username of the user")
    name: str | None = Field(default=None, max_length=100, description="Display name of the user")


class UserResponse(BaseModel):
    id: UUID
    username: str
    name: str | None = None
    created_at: datetime
    updated_at: datetime
