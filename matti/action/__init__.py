from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from matti.common.models import ThemeId


class ActionStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FollowUpStatus(Enum):
    PENDING = "pending"
    SENT = "sent"
    RESPONDED = "responded"
    SKIPPED = "skipped"


class Action(BaseModel):
    """A concrete step the user committed to, either from chat or from a goal plan."""

    id: UUID
    user_id: UUID
    theme_id: ThemeId
    conversation_id: UUID | None = None
    goal_id: UUID | None = None
    action_text: str
    action_type: str | None = None
    status: ActionStatus = ActionStatus.PENDING
    sequence: int | None = None
    is_active_step: bool = False
    follow_up_intervals: list[int] = Field(default_factory=list)
    follow_up_scheduled: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class FollowUp(BaseModel):
    id: UUID
    action_id: UUID
    scheduled_for: datetime
    status: FollowUpStatus = FollowUpStatus.PENDING
    notification_sent: datetime | None = None
    response: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
