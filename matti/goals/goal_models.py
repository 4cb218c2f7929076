from uuid import UUID

from pydantic import BaseModel, Field

from matti.action import Action
from matti.goals import Goal, GoalType


class StartGoalRequest(BaseModel):
    goal_type: GoalType
    custom_text: str | None = Field(default=None, max_length=200)


class StartGoalResponse(BaseModel):
    success: bool = True
    goal_id: UUID
    title: str
    goal_type: GoalType


class FinalizeGoalRequest(BaseModel):
    clarification_context: str = Field(..., description="Summary of the clarification questions and answers")


class FinalizeGoalResponse(BaseModel):
    success: bool = True
    goal_id: UUID
    intro: str
    step_count: int
    action_ids: list[UUID]


class GoalProgress(BaseModel):
    completed: int = 0
    total: int = 0


class GoalOverview(Goal):
    active_action: Action | None = None
    progress: GoalProgress = Field(default_factory=GoalProgress)


class GoalDetail(GoalOverview):
    actions: list[Action] = Field(default_factory=list)
