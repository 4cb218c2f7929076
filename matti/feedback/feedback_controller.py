from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Query

from matti.common.config import ServiceFactory
from matti.common.controller import BaseController, current_user
from matti.common.models import RequestHeaders, SuccessResponse
from matti.feedback import MessageFeedback
from matti.feedback.feedback_models import FeedbackCreateRequest, FeedbackPage, FeedbackStatistics, RatingFilter
from matti.feedback.feedback_services import FeedbackService
from matti.user import User


class FeedbackController(BaseController):
    prefix = "feedback"

    @property
    def router(self) -> APIRouter:
        @self.api_router.post("", response_model=SuccessResponse)
        async def submit_feedback(
            headers: Annotated[RequestHeaders, Header()],
            request: FeedbackCreateRequest,
            user: User = Depends(current_user),
            feedback_service: FeedbackService = Depends(ServiceFactory.get_feedback_service),
        ) -> SuccessResponse:
            await feedback_service.submit_feedback(user, request)
            return SuccessResponse()

        @self.api_router.get("", response_model=FeedbackPage, dependencies=[Depends(current_user)])
        async def get_all_feedback(
            headers: Annotated[RequestHeaders, Header()],
            rating: RatingFilter = Query(default=RatingFilter.ALL),
            limit: int = Query(default=50, ge=1, le=100),
            offset: int = Query(default=0, ge=0),
            feedback_service: FeedbackService = Depends(ServiceFactory.get_feedback_service),
        ) -> FeedbackPage:
            return await feedback_service.get_all_feedback(rating=rating, limit=limit, offset=offset)

        @self.api_router.get("/statistics", response_model=FeedbackStatistics, dependencies=[Depends(current_user)])
        async def get_statistics(
            headers: Annotated[RequestHeaders, Header()],
            feedback_service: FeedbackService = Depends(ServiceFactory.get_feedback_service),
        ) -> FeedbackStatistics:
            return await feedback_service.get_statistics()

        @self.api_router.get("/negative", response_model=list[MessageFeedback], dependencies=[Depends(current_user)])
        async def get_negative_feedback(
            headers: Annotated[RequestHeaders, Header()],
            feedback_service: FeedbackService = Depends(ServiceFactory.get_feedback_service),
        ) -> list[MessageFeedback]:
            return await feedback_service.get_negative_feedback()

        @self.api_router.get("/conversations/{conversation_id}", response_model=list[MessageFeedback], dependencies=[Depends(current_user)])
        async def get_conversation_feedback(
            headers: Annotated[RequestHeaders, Header()],
            conversation_id: UUID,
            feedback_service: FeedbackService = Depends(ServiceFactory.get_feedback_service),
        ) -> list[MessageFeedback]:
            return await feedback_service.get_conversation_feedback(conversation_id)

        return self.api_router
