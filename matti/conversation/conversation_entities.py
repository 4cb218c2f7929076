from datetime import datetime
from typing import Any
import uuid

from sqlalchemy import TEXT, DateTime, Enum as SAEnum, ForeignKey, Index, text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from matti.common.entities import BaseEntity, enum_values, utc_now
from matti.common.models import Outcome, Severity, ThemeId
from matti.conversation import ChatMessage, Conversation


class ConversationEntity(BaseEntity):
    """
    Represents a theme-scoped conversation. Messages are kept as a JSON array on the row.
    """

    __tablename__ = "conversations"
    __table_args__ = (
        Index("ix_conversations_user_updated", "user_id", "updated_at"),
        # At most one active conversation per (user, theme).
        Index(
            "uq_conversations_active_theme",
            "user_id",
            "theme_id",
            unique=True,
            postgresql_where=text("is_archived = false"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, doc="Unique Identifier of the Conversation")
    user_id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, doc="ID of the User who owns the Conversation")
    theme_id: Mapped[ThemeId] = mapped_column(SAEnum(ThemeId, name="theme", values_callable=enum_values), nullable=False, doc="Theme bucket of the Conversation")
    thread_id: Mapped[str | None] = mapped_column(nullable=True, doc="Identifier of the upstream LLM thread, if any")
    summary: Mapped[str | None] = mapped_column(TEXT, nullable=True, doc="Summary of the Conversation")
    messages: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list, doc="Ordered list of {role, content, timestamp}")
    is_archived: Mapped[bool] = mapped_column(nullable=False, default=False, doc="Archived conversations are read-only")
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    bullying_detected: Mapped[bool] = mapped_column(nullable=False, default=False)
    bullying_severity: Mapped[Severity | None] = mapped_column(SAEnum(Severity, name="bullying_severity", values_callable=enum_values), nullable=True)
    bullying_follow_up_scheduled: Mapped[bool] = mapped_column(nullable=False, default=False)
    initial_problem: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    conversation_count: Mapped[int] = mapped_column(nullable=False, default=0)
    intervention_start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    intervention_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    outcome: Mapped[Outcome | None] = mapped_column(SAEnum(Outcome, name="outcome", values_callable=enum_values), nullable=True, default=Outcome.IN_PROGRESS)
    resolution: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    action_completion_rate: Mapped[int] = mapped_column(nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now, doc="Timestamp when the Conversation was created")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now, doc="Timestamp of the last activity in the Conversation")

    def to_domain(self) -> Conversation:
        return Conversation(
            id=self.id,
            user_id=self.user_id,
            theme_id=self.theme_id,
            thread_id=self.thread_id,
            messages=[ChatMessage.model_validate(m) for m in self.messages or []],
            summary=self.summary,
            is_archived=self.is_archived,
            archived_at=self.archived_at,
            bullying_detected=self.bullying_detected,
            bullying_severity=self.bullying_severity,
            bullying_follow_up_scheduled=self.bullying_follow_up_scheduled,
            initial_problem=self.initial_problem,
            conversation_count=self.conversation_count,
            intervention_start_date=self.intervention_start_date,
            intervention_end_date=self.intervention_end_date,
            outcome=self.outcome,
            resolution=self.resolution,
            action_completion_rate=self.action_completion_rate,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
