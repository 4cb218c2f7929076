from datetime import datetime
from uuid import UUID

from loguru import logger
from sqlalchemy import func

from matti.action import Action, ActionStatus, FollowUp, FollowUpStatus
from matti.action.action_entities import ActionEntity, FollowUpEntity
from matti.common.entities import utc_now
from matti.common.exceptions import NotFoundException
from matti.common.models import ThemeId
from matti.common.repositories import BaseRepository


class ActionRepository(BaseRepository):
    """
    Repository for actions and their scheduled follow-ups.
    """

    def _get_entity(self, action_id: UUID, user_id: UUID | None = None) -> ActionEntity:
        query = self.session.query(ActionEntity).filter(ActionEntity.id == action_id)
        if user_id is not None:
            query = query.filter(ActionEntity.user_id == user_id)
        entity = query.first()
        if not entity:
            raise NotFoundException(f"Action with ID: {action_id} was not found!")
        return entity

    def create_action(self, action: Action, follow_up_dates: list[datetime]) -> tuple[Action, list[FollowUp]]:
        """Insert the action and its follow-ups in a single commit."""
        entity = ActionEntity.from_domain(action)
        if follow_up_dates:
            entity.follow_up_scheduled = min(follow_up_dates)
        self.session.add(entity)
        self.session.flush()

        follow_ups = [FollowUpEntity(action_id=entity.id, scheduled_for=when, status=FollowUpStatus.PENDING) for when in follow_up_dates]
        self.session.add_all(follow_ups)
        self.commit()
        self.session.refresh(entity)
        return entity.to_domain(), [f.to_domain() for f in follow_ups]

    def schedule_follow_ups(self, action_id: UUID, follow_up_dates: list[datetime]) -> list[FollowUp]:
        entity = self._get_entity(action_id)
        follow_ups = [FollowUpEntity(action_id=action_id, scheduled_for=when, status=FollowUpStatus.PENDING) for when in follow_up_dates]
        self.session.add_all(follow_ups)
        if follow_up_dates:
            entity.follow_up_scheduled = min(follow_up_dates)
        self.commit()
        return [f.to_domain() for f in follow_ups]

    def find_by_id(self, action_id: UUID, user_id: UUID | None = None) -> Action:
        return self._get_entity(action_id, user_id).to_domain()

    def list_actions(self, user_id: UUID, status: ActionStatus | None = None) -> list[Action]:
        query = self.session.query(ActionEntity).filter(ActionEntity.user_id == user_id)
        if status is not None:
            query = query.filter(ActionEntity.status == status)
        return [e.to_domain() for e in query.order_by(ActionEntity.created_at.desc()).all()]

    def list_pending_for_theme(self, user_id: UUID, theme_id: ThemeId, limit: int) -> list[Action]:
        entities = (
            self.session.query(ActionEntity)
            .filter_by(user_id=user_id, theme_id=theme_id, status=ActionStatus.PENDING)
            .order_by(ActionEntity.created_at.desc())
            .limit(limit)
            .all()
        )
        return [e.to_domain() for e in entities]

    def list_goal_actions(self, goal_id: UUID) -> list[Action]:
        entities = self.session.query(ActionEntity).filter_by(goal_id=goal_id).order_by(ActionEntity.sequence.asc()).all()
        return [e.to_domain() for e in entities]

    def count_by_status(self, user_id: UUID) -> dict[ActionStatus, int]:
        rows = self.session.query(ActionEntity.status, func.count(ActionEntity.id)).filter(ActionEntity.user_id == user_id).group_by(ActionEntity.status).all()
        counts = {status: 0 for status in ActionStatus}
        for status, count in rows:
            counts[status] = count
        return counts

    def update_status(self, action_id: UUID, user_id: UUID, status: ActionStatus) -> Action:
        """
        Move the action to `status`. Leaving `pending` skips every follow-up still waiting to be sent.
        """
        entity = self._get_entity(action_id, user_id)
        now = utc_now()
        entity.status = status
        entity.completed_at = now if status is ActionStatus.COMPLETED else None
        entity.updated_at = now
        if status is not ActionStatus.PENDING:
            entity.is_active_step = False
            skipped = (
                self.session.query(FollowUpEntity)
                .filter(FollowUpEntity.action_id == action_id, FollowUpEntity.status == FollowUpStatus.PENDING)
                .update({FollowUpEntity.status: FollowUpStatus.SKIPPED}, synchronize_session=False)
            )
            logger.debug("Skipped outstanding follow-ups", action_id=str(action_id), count=skipped)
        self.commit()
        return entity.to_domain()

    def set_active_step(self, action_id: UUID) -> Action:
        entity = self._get_entity(action_id)
        entity.is_active_step = True
        entity.updated_at = utc_now()
        self.commit()
        return entity.to_domain()

    def find_due_follow_ups(self, now: datetime) -> list[tuple[FollowUp, Action]]:
        """Pending follow-ups scheduled at or before `now` whose action is still pending."""
        rows = (
            self.session.query(FollowUpEntity, ActionEntity)
            .join(ActionEntity, FollowUpEntity.action_id == ActionEntity.id)
            .filter(
                FollowUpEntity.status == FollowUpStatus.PENDING,
                FollowUpEntity.scheduled_for <= now,
                ActionEntity.status == ActionStatus.PENDING,
            )
            .order_by(FollowUpEntity.scheduled_for.asc())
            .all()
        )
        return [(follow_up.to_domain(), action.to_domain()) for follow_up, action in rows]

    def settle_follow_ups(self, sent_id: UUID, skipped_ids: list[UUID], sent_at: datetime) -> FollowUp:
        """
        Mark one follow-up sent and the given others skipped.
        Only flushes: the change is published by the commit that stores the check-in message.
        """
        entity = self.session.query(FollowUpEntity).filter_by(id=sent_id).first()
        if not entity:
            raise NotFoundException(f"Follow-up with ID: {sent_id} was not found!")
        entity.status = FollowUpStatus.SENT
        entity.notification_sent = sent_at
        if skipped_ids:
            self.session.query(FollowUpEntity).filter(FollowUpEntity.id.in_(skipped_ids)).update(
                {FollowUpEntity.status: FollowUpStatus.SKIPPED}, synchronize_session=False
            )
        self.session.flush()
        return entity.to_domain()
