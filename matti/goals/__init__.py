from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class GoalStatus(Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class GoalType(Enum):
    SLEEP = "sleep"
    PROCRASTINATION = "procrastination"
    PLANNING = "planning"
    CONFIDENCE = "confidence"
    BULLYING = "bullying"
    MENTAL_REST = "mental_rest"
    CUSTOM = "custom"


GOAL_TITLES: dict[GoalType, str] = {
    GoalType.SLEEP: "Beter slapen",
    GoalType.PROCRASTINATION: "Minder uitstellen",
    GoalType.PLANNING: "Beter plannen",
    GoalType.CONFIDENCE: "Meer zelfvertrouwen",
    GoalType.BULLYING: "Omgaan met pesten",
    GoalType.MENTAL_REST: "Meer rust in mijn hoofd",
}

CUSTOM_GOAL_TITLE = "Eigen doel"


class Goal(BaseModel):
    """A user goal grouping a sequence of actions, activated one step at a time."""

    id: UUID
    user_id: UUID
    title: str
    description: str | None = None
    goal_type: GoalType
    status: GoalStatus = GoalStatus.DRAFT
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def goal_title(goal_type: GoalType, custom_text: str | None = None) -> str:
    if goal_type is GoalType.CUSTOM:
        return custom_text or CUSTOM_GOAL_TITLE
    return GOAL_TITLES[goal_type]
