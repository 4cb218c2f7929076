from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class Rating(Enum):
    UP = "up"
    DOWN = "down"


class MessageFeedback(BaseModel):
    """Thumbs up/down on one assistant message, addressed by its index in the conversation."""

    id: UUID
    conversation_id: UUID
    user_id: UUID
    message_index: int
    rating: Rating
    feedback_text: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
