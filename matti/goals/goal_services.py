from datetime import datetime
from uuid import UUID, uuid4

from loguru import logger

from matti.action import Action, ActionStatus
from matti.action.action_repositories import ActionRepository
from matti.action.scheduling import GOAL_FOLLOW_UP_INTERVALS, GOAL_FOLLOW_UP_TIME, follow_up_dates
from matti.chatbot.chatbot_services import ChatbotService
from matti.common.entities import utc_now
from matti.common.exceptions import ConflictException
from matti.common.models import ThemeId
from matti.goals import Goal, GoalStatus, GoalType, goal_title
from matti.goals.goal_models import FinalizeGoalResponse, GoalDetail, GoalOverview, GoalProgress
from matti.goals.goal_repositories import GoalRepository
from matti.user import User


class GoalService:
    """
    Service class for goals. Goal lifecycle: draft -> active -> completed.
    The steps of a goal are actions that are activated one at a time.
    """

    def __init__(self, goal_repository: GoalRepository, action_repository: ActionRepository, chatbot_service: ChatbotService):
        self.repository = goal_repository
        self.action_repository = action_repository
        self.chatbot_service = chatbot_service

    async def start_draft_goal(self, user: User, goal_type: GoalType, custom_text: str | None = None) -> Goal:
        goal = self.repository.create_goal(user.id, title=goal_title(goal_type, custom_text), goal_type=goal_type, description=custom_text)
        logger.info("Draft goal created", goal_id=str(goal.id), goal_type=goal_type.value)
        return goal

    async def finalize_goal(self, user: User, goal_id: UUID, clarification_context: str, now: datetime | None = None) -> FinalizeGoalResponse:
        """
        Asks the language model for a step plan, stores one action per step and activates the goal.
        Only the lowest sequence becomes the active step and receives follow-ups.
        """
        now = now or utc_now()
        goal = self.repository.find_by_id(goal_id, user.id)
        if goal.status is not GoalStatus.DRAFT:
            raise ConflictException(f"Goal {goal_id} is not in draft status")

        plan = await self.chatbot_service.generate_goal_plan(goal, clarification_context)
        first_sequence = min(step.sequence for step in plan.steps)

        action_ids: list[UUID] = []
        for step in sorted(plan.steps, key=lambda s: s.sequence):
            is_first = step.sequence == first_sequence and not action_ids
            action = Action(
                id=uuid4(),
                user_id=user.id,
                theme_id=ThemeId.GENERAL,
                goal_id=goal.id,
                action_text=step.action_text,
                sequence=step.sequence,
                is_active_step=is_first,
                follow_up_intervals=GOAL_FOLLOW_UP_INTERVALS,
                created_at=now,
                updated_at=now,
            )
            dates = follow_up_dates(now, GOAL_FOLLOW_UP_INTERVALS, at=GOAL_FOLLOW_UP_TIME) if is_first else []
            saved, _ = self.action_repository.create_action(action, dates)
            action_ids.append(saved.id)

        self.repository.update_status(goal.id, GoalStatus.ACTIVE)
        logger.info("Goal finalized", goal_id=str(goal.id), steps=len(action_ids))
        return FinalizeGoalResponse(goal_id=goal.id, intro=plan.intro, step_count=len(action_ids), action_ids=action_ids)

    def _overview(self, goal: Goal, actions: list[Action]) -> dict:
        return {
            **goal.model_dump(),
            "active_action": next((a for a in actions if a.is_active_step), None),
            "progress": GoalProgress(completed=sum(1 for a in actions if a.status is ActionStatus.COMPLETED), total=len(actions)),
        }

    async def get_active_goals(self, user: User) -> list[GoalOverview]:
        goals = self.repository.list_by_status(user.id, GoalStatus.ACTIVE)
        return [GoalOverview(**self._overview(goal, self.action_repository.list_goal_actions(goal.id))) for goal in goals]

    async def get_goal(self, user: User, goal_id: UUID) -> GoalDetail:
        goal = self.repository.find_by_id(goal_id, user.id)
        actions = self.action_repository.list_goal_actions(goal.id)
        return GoalDetail(**self._overview(goal, actions), actions=actions)
