from pydantic import AliasChoices, BaseModel, Field


class GoalPlanStep(BaseModel):
    sequence: int
    action_text: str = Field(..., validation_alias=AliasChoices("action_text", "actionText"), min_length=1)


class GoalPlan(BaseModel):
    """Step plan returned by the language model for a draft goal."""

    intro: str = ""
    steps: list[GoalPlanStep] = Field(default_factory=list)
