from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from matti.feedback import MessageFeedback, Rating


class RatingFilter(Enum):
    ALL = "all"
    UP = "up"
    DOWN = "down"


class FeedbackCreateRequest(BaseModel):
    conversation_id: UUID
    message_index: int = Field(..., ge=0)
    rating: Rating
    feedback_text: str | None = Field(default=None, max_length=500)


class FeedbackPage(BaseModel):
    feedback: list[MessageFeedback]
    total_count: int
    has_more: bool


class FeedbackStatistics(BaseModel):
    total_count: int = 0
    up_count: int = 0
    down_count: int = 0
    positive_percentage: int = 0
