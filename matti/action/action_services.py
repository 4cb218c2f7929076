from datetime import datetime
from uuid import UUID, uuid4

from loguru import logger

from matti.action import Action, ActionStatus, FollowUp
from matti.action.action_models import ActionCreateRequest, ActionStats
from matti.action.action_repositories import ActionRepository
from matti.action.scheduling import CHAT_FOLLOW_UP_INTERVALS, GOAL_FOLLOW_UP_INTERVALS, GOAL_FOLLOW_UP_TIME, follow_up_dates
from matti.common.entities import utc_now
from matti.common.exceptions import ConflictException
from matti.goals import GoalStatus
from matti.goals.goal_repositories import GoalRepository
from matti.user import User


class ActionService:
    """
    Service class for user-committed actions and the follow-ups scheduled for them.
    """

    def __init__(self, action_repository: ActionRepository, goal_repository: GoalRepository):
        self.repository = action_repository
        self.goal_repository = goal_repository

    async def save_action(self, user: User, request: ActionCreateRequest, now: datetime | None = None) -> tuple[Action, list[FollowUp]]:
        now = now or utc_now()
        action = Action(
            id=uuid4(),
            user_id=user.id,
            theme_id=request.theme_id,
            conversation_id=request.conversation_id,
            action_text=request.action_text,
            action_type=request.action_type,
            follow_up_intervals=CHAT_FOLLOW_UP_INTERVALS,
            created_at=now,
            updated_at=now,
        )
        saved, follow_ups = self.repository.create_action(action, follow_up_dates(now, CHAT_FOLLOW_UP_INTERVALS))
        logger.info("Action saved", action_id=str(saved.id), follow_ups=len(follow_ups))
        return saved, follow_ups

    async def get_actions(self, user: User, status: ActionStatus | None = None) -> list[Action]:
        return self.repository.list_actions(user.id, status)

    async def get_stats(self, user: User) -> ActionStats:
        counts = self.repository.count_by_status(user.id)
        total = sum(counts.values())
        completed = counts[ActionStatus.COMPLETED]
        return ActionStats(
            total=total,
            pending=counts[ActionStatus.PENDING],
            completed=completed,
            cancelled=counts[ActionStatus.CANCELLED],
            completion_rate=round(100 * completed / total) if total else 0,
        )

    async def update_status(self, user: User, action_id: UUID, status: ActionStatus) -> Action:
        """
        Moves a pending action to completed or cancelled.
        When it was the active step of a goal, the next step is activated.
        """
        current = self.repository.find_by_id(action_id, user.id)
        if current.status is not ActionStatus.PENDING:
            raise ConflictException(f"Action {action_id} is already {current.status.value}")
        if status is ActionStatus.PENDING:
            raise ConflictException(f"Action {action_id} is already pending")

        updated = self.repository.update_status(action_id, user.id, status)
        if current.goal_id is not None and current.is_active_step:
            await self._advance_goal(current.goal_id, current.id)
        return updated

    async def _advance_goal(self, goal_id: UUID, finished_step_id: UUID, now: datetime | None = None) -> None:
        now = now or utc_now()
        remaining = [
            step
            for step in self.repository.list_goal_actions(goal_id)
            if step.status is ActionStatus.PENDING and step.id != finished_step_id
        ]
        if not remaining:
            self.goal_repository.update_status(goal_id, GoalStatus.COMPLETED)
            logger.info("Goal completed", goal_id=str(goal_id))
            return

        next_step = min(remaining, key=lambda step: step.sequence if step.sequence is not None else 0)
        self.repository.set_active_step(next_step.id)
        self.repository.schedule_follow_ups(next_step.id, follow_up_dates(now, GOAL_FOLLOW_UP_INTERVALS, at=GOAL_FOLLOW_UP_TIME))
        logger.info("Goal step activated", goal_id=str(goal_id), action_id=str(next_step.id), sequence=next_step.sequence)
