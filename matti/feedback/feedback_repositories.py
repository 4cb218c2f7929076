from uuid import UUID

from sqlalchemy import func

from matti.common.repositories import BaseRepository
from matti.feedback import MessageFeedback, Rating
from matti.feedback.feedback_entities import MessageFeedbackEntity


class FeedbackRepository(BaseRepository):
    """Repository for thumbs up/down feedback on assistant messages."""

    def create_feedback(self, conversation_id: UUID, user_id: UUID, message_index: int, rating: Rating, feedback_text: str | None = None) -> MessageFeedback:
        entity = MessageFeedbackEntity(
            conversation_id=conversation_id,
            user_id=user_id,
            message_index=message_index,
            rating=rating,
            feedback_text=feedback_text or None,
        )
        self.session.add(entity)
        self.commit()
        self.session.refresh(entity)
        return entity.to_domain()

    def list_for_conversation(self, conversation_id: UUID) -> list[MessageFeedback]:
        entities = self.session.query(MessageFeedbackEntity).filter_by(conversation_id=conversation_id).order_by(MessageFeedbackEntity.message_index.asc()).all()
        return [e.to_domain() for e in entities]

    def list_feedback(self, rating: Rating | None = None, limit: int = 50, offset: int = 0) -> tuple[list[MessageFeedback], int]:
        """Returns one page of feedback (newest first) together with the total number of matching rows."""
        query = self.session.query(MessageFeedbackEntity)
        if rating is not None:
            query = query.filter(MessageFeedbackEntity.rating == rating)
        total = query.count()
        entities = query.order_by(MessageFeedbackEntity.created_at.desc()).limit(limit).offset(offset).all()
        return [e.to_domain() for e in entities], total

    def count_by_rating(self) -> dict[Rating, int]:
        rows = self.session.query(MessageFeedbackEntity.rating, func.count(MessageFeedbackEntity.id)).group_by(MessageFeedbackEntity.rating).all()
        counts = {rating: 0 for rating in Rating}
        for rating, count in rows:
            counts[rating] = count
        return counts
