from uuid import UUID

from loguru import logger

from matti.feedback import MessageFeedback, Rating
from matti.feedback.feedback_models import FeedbackCreateRequest, FeedbackPage, FeedbackStatistics, RatingFilter
from matti.feedback.feedback_repositories import FeedbackRepository
from matti.user import User

NEGATIVE_FEEDBACK_LIMIT = 100


class FeedbackService:
    def __init__(self, feedback_repository: FeedbackRepository):
        self.repository = feedback_repository

    async def submit_feedback(self, user: User, request: FeedbackCreateRequest) -> MessageFeedback:
        feedback = self.repository.create_feedback(
            conversation_id=request.conversation_id,
            user_id=user.id,
            message_index=request.message_index,
            rating=request.rating,
            feedback_text=request.feedback_text,
        )
        logger.info("Feedback submitted", rating=request.rating.value, message_index=request.message_index, conversation_id=str(request.conversation_id))
        return feedback

    async def get_conversation_feedback(self, conversation_id: UUID) -> list[MessageFeedback]:
        return self.repository.list_for_conversation(conversation_id)

    async def get_all_feedback(self, rating: RatingFilter = RatingFilter.ALL, limit: int = 50, offset: int = 0) -> FeedbackPage:
        rating_value = None if rating is RatingFilter.ALL else Rating(rating.value)
        feedback, total = self.repository.list_feedback(rating=rating_value, limit=limit, offset=offset)
        return FeedbackPage(feedback=feedback, total_count=total, has_more=offset + limit < total)

    async def get_statistics(self) -> FeedbackStatistics:
        counts = self.repository.count_by_rating()
        total = sum(counts.values())
        up = counts[Rating.UP]
        return FeedbackStatistics(
            total_count=total,
            up_count=up,
            down_count=counts[Rating.DOWN],
            positive_percentage=round(100 * up / total) if total else 0,
        )

    async def get_negative_feedback(self) -> list[MessageFeedback]:
        feedback, _ = self.repository.list_feedback(rating=Rating.DOWN, limit=NEGATIVE_FEEDBACK_LIMIT)
        return feedback
