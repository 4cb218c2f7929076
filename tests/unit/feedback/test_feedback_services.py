from unittest.mock import Mock
import uuid

import pytest

from matti.feedback import MessageFeedback, Rating
from matti.feedback.feedback_models import FeedbackCreateRequest, RatingFilter
from matti.feedback.feedback_services import FeedbackService


@pytest.fixture
def repository():
    return Mock()


@pytest.fixture
def service(repository):
    return FeedbackService(repository)


def _feedback(rating: Rating = Rating.DOWN) -> MessageFeedback:
    return MessageFeedback(id=uuid.uuid4(), conversation_id=uuid.uuid4(), user_id=uuid.uuid4(), message_index=1, rating=rating)


@pytest.mark.asyncio
async def test_submit_feedback(service, repository, fake_user):
    conversation_id = uuid.uuid4()
    request = FeedbackCreateRequest(conversation_id=conversation_id, message_index=3, rating=Rating.UP, feedback_text="Fijn antwoord")

    await service.submit_feedback(fake_user, request)

    repository.create_feedback.assert_called_once_with(
        conversation_id=conversation_id,
        user_id=fake_user.id,
        message_index=3,
        rating=Rating.UP,
        feedback_text="Fijn antwoord",
    )


@pytest.mark.asyncio
async def test_all_feedback_pages(service, repository):
    repository.list_feedback.return_value = ([_feedback()], 12)

    page = await service.get_all_feedback(RatingFilter.DOWN, limit=5, offset=5)

    assert page.total_count == 12
    assert page.has_more is True
    repository.list_feedback.assert_called_once_with(rating=Rating.DOWN, limit=5, offset=5)


@pytest.mark.asyncio
async def test_last_page_has_no_more(service, repository):
    repository.list_feedback.return_value = ([_feedback()], 11)

    page = await service.get_all_feedback(limit=5, offset=10)

    assert page.has_more is False
    repository.list_feedback.assert_called_once_with(rating=None, limit=5, offset=10)


@pytest.mark.asyncio
async def test_statistics(service, repository):
    repository.count_by_rating.return_value = {Rating.UP: 2, Rating.DOWN: 1}

    statistics = await service.get_statistics()

    assert statistics.total_count == 3
    assert statistics.positive_percentage == 67


@pytest.mark.asyncio
async def test_statistics_without_feedback(service, repository):
    repository.count_by_rating.return_value = {Rating.UP: 0, Rating.DOWN: 0}

    statistics = await service.get_statistics()

    assert statistics.positive_percentage == 0


@pytest.mark.asyncio
async def test_negative_feedback(service, repository):
    negative = [_feedback()]
    repository.list_feedback.return_value = (negative, 1)

    assert await service.get_negative_feedback() == negative
    repository.list_feedback.assert_called_once_with(rating=Rating.DOWN, limit=100)
