from datetime import datetime
import uuid

from sqlalchemy import TEXT, DateTime, Enum as SAEnum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from matti.common.entities import BaseEntity, enum_values, utc_now
from matti.goals import Goal, GoalStatus, GoalType


class GoalEntity(BaseEntity):
    __tablename__ = "goals"

    id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(TEXT, nullable=False)
    description: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    goal_type: Mapped[GoalType] = mapped_column(SAEnum(GoalType, name="goal_type", values_callable=enum_values), nullable=False)
    status: Mapped[GoalStatus] = mapped_column(SAEnum(GoalStatus, name="goal_status", values_callable=enum_values), nullable=False, default=GoalStatus.DRAFT)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    def to_domain(self) -> Goal:
        return Goal(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            description=self.description,
            goal_type=self.goal_type,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
