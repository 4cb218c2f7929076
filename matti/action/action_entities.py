from datetime import datetime
from typing import Self
import uuid

from sqlalchemy import TEXT, DateTime, Enum as SAEnum, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from matti.action import Action, ActionStatus, FollowUp, FollowUpStatus
from matti.common.entities import BaseEntity, enum_values, utc_now
from matti.common.models import ThemeId


class ActionEntity(BaseEntity):
    """
    Represents an action the user committed to.
    """

    __tablename__ = "actions"

    id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    theme_id: Mapped[ThemeId] = mapped_column(SAEnum(ThemeId, name="theme", values_callable=enum_values), nullable=False)
    conversation_id: Mapped[uuid.UUID | None] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("conversations.id", ondelete="SET NULL"), nullable=True)
    goal_id: Mapped[uuid.UUID | None] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("goals.id", ondelete="CASCADE"), nullable=True)
    action_text: Mapped[str] = mapped_column(TEXT, nullable=False, doc="Description of the action")
    action_type: Mapped[str | None] = mapped_column(nullable=True, doc="Type of action detected")
    status: Mapped[ActionStatus] = mapped_column(SAEnum(ActionStatus, name="action_status", values_callable=enum_values), nullable=False, default=ActionStatus.PENDING)
    sequence: Mapped[int | None] = mapped_column(nullable=True, doc="Position of the step within its goal")
    is_active_step: Mapped[bool] = mapped_column(nullable=False, default=False)
    follow_up_intervals: Mapped[list[int]] = mapped_column(JSONB, nullable=False, default=list, doc="Follow-up offsets in days")
    follow_up_scheduled: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, doc="First scheduled follow-up")
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    def to_domain(self) -> Action:
        return Action(
            id=self.id,
            user_id=self.user_id,
            theme_id=self.theme_id,
            conversation_id=self.conversation_id,
            goal_id=self.goal_id,
            action_text=self.action_text,
            action_type=self.action_type,
            status=self.status,
            sequence=self.sequence,
            is_active_step=self.is_active_step,
            follow_up_intervals=list(self.follow_up_intervals or []),
            follow_up_scheduled=self.follow_up_scheduled,
            completed_at=self.completed_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_domain(cls, model: Action) -> Self:
        return cls(
            id=model.id,
            user_id=model.user_id,
            theme_id=model.theme_id,
            conversation_id=model.conversation_id,
            goal_id=model.goal_id,
            action_text=model.action_text,
            action_type=model.action_type,
            status=model.status,
            sequence=model.sequence,
            is_active_step=model.is_active_step,
            follow_up_intervals=list(model.follow_up_intervals),
            follow_up_scheduled=model.follow_up_scheduled,
            completed_at=model.completed_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class FollowUpEntity(BaseEntity):
    """
    A scheduled check-in for an action, consumed by the follow-up sweep.
    """

    __tablename__ = "follow_ups"

    id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    action_id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("actions.id", ondelete="CASCADE"), nullable=False)
    scheduled_for: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[FollowUpStatus] = mapped_column(SAEnum(FollowUpStatus, name="follow_up_status", values_callable=enum_values), nullable=False, default=FollowUpStatus.PENDING)
    notification_sent: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    response: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    def to_domain(self) -> FollowUp:
        return FollowUp(
            id=self.id,
            action_id=self.action_id,
            scheduled_for=self.scheduled_for,
            status=self.status,
            notification_sent=self.notification_sent,
            response=self.response,
            created_at=self.created_at,
        )
