from datetime import datetime, timezone
from typing import TYPE_CHECKING, Self
from uuid import UUID

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from matti.user.user_entities import UserEntity


class User(BaseModel):
    """Represents a user in the system."""

    id: UUID
    username: str
    name: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_entity(cls, entity: "UserEntity") -> Self:
        return cls(id=entity.id, username=entity.username, name=entity.name, created_at=entity.created_at, updated_at=entity.updated_at)
