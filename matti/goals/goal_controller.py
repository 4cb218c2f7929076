from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Header

from matti.common.config import ServiceFactory
from matti.common.controller import BaseController, current_user
from matti.common.models import RequestHeaders
from matti.goals.goal_models import FinalizeGoalRequest, FinalizeGoalResponse, GoalDetail, GoalOverview, StartGoalRequest, StartGoalResponse
from matti.goals.goal_services import GoalService
from matti.user import User


class GoalController(BaseController):
    prefix = "goals"

    @property
    def router(self) -> APIRouter:
        """
        Returns the APIRouter instance for the GoalController.
        A goal starts as a draft, becomes active once its plan is generated and completes with its last step.
        """

        @self.api_router.post("", response_model=StartGoalResponse)
        async def start_draft_goal(
            headers: Annotated[RequestHeaders, Header()],
            request: StartGoalRequest,
            user: User = Depends(current_user),
            goal_service: GoalService = Depends(ServiceFactory.get_goal_service),
        ) -> StartGoalResponse:
            goal = await goal_service.start_draft_goal(user, request.goal_type, request.custom_text)
            return StartGoalResponse(goal_id=goal.id, title=goal.title, goal_type=goal.goal_type)

        @self.api_router.post("/{goal_id}/finalize", response_model=FinalizeGoalResponse)
        async def finalize_goal_with_plan(
            headers: Annotated[RequestHeaders, Header()],
            goal_id: UUID,
            request: FinalizeGoalRequest,
            user: User = Depends(current_user),
            goal_service: GoalService = Depends(ServiceFactory.get_goal_service),
        ) -> FinalizeGoalResponse:
            return await goal_service.finalize_goal(user, goal_id, request.clarification_context)

        @self.api_router.get("/active", response_model=list[GoalOverview])
        async def get_active_goals(
            headers: Annotated[RequestHeaders, Header()],
            user: User = Depends(current_user),
            goal_service: GoalService = Depends(ServiceFactory.get_goal_service),
        ) -> list[GoalOverview]:
            return await goal_service.get_active_goals(user)

        @self.api_router.get("/{goal_id}", response_model=GoalDetail)
        async def get_goal_by_id(
            headers: Annotated[RequestHeaders, Header()],
            goal_id: UUID,
            user: User = Depends(current_user),
            goal_service: GoalService = Depends(ServiceFactory.get_goal_service),
        ) -> GoalDetail:
            return await goal_service.get_goal(user, goal_id)

        return self.api_router
