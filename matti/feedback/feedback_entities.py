from datetime import datetime
import uuid

from sqlalchemy import TEXT, DateTime, Enum as SAEnum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from matti.common.entities import BaseEntity, enum_values, utc_now
from matti.feedback import MessageFeedback, Rating


class MessageFeedbackEntity(BaseEntity):
    __tablename__ = "message_feedback"

    id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    conversation_id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    message_index: Mapped[int] = mapped_column(nullable=False, doc="Index of the assistant message in the conversation")
    rating: Mapped[Rating] = mapped_column(SAEnum(Rating, name="rating", values_callable=enum_values), nullable=False)
    feedback_text: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    def to_domain(self) -> MessageFeedback:
        return MessageFeedback(
            id=self.id,
            conversation_id=self.conversation_id,
            user_id=self.user_id,
            message_index=self.message_index,
            rating=self.rating,
            feedback_text=self.feedback_text,
            created_at=self.created_at,
        )
