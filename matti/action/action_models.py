from uuid import UUID

from pydantic import BaseModel, Field

from matti.action import Action, ActionStatus, FollowUp
from matti.common.models import ThemeId


class ActionCreateRequest(BaseModel):
    theme_id: ThemeId
    action_text: str = Field(..., min_length=1, max_length=500)
    action_type: str | None = None
    conversation_id: UUID | None = None


class ActionStatusUpdateRequest(BaseModel):
    status: ActionStatus


class ActionResponse(Action):
    follow_ups: list[FollowUp] = Field(default_factory=list)


class ActionStats(BaseModel):
    total: int = 0
    pending: int = 0
    completed: int = 0
    cancelled: int = 0
    completion_rate: int = 0
