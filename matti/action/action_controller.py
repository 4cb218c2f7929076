from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Query

from matti.action import Action, ActionStatus
from matti.action.action_models import ActionCreateRequest, ActionResponse, ActionStats, ActionStatusUpdateRequest
from matti.action.action_services import ActionService
from matti.common.config import ServiceFactory
from matti.common.controller import BaseController, current_user
from matti.common.models import RequestHeaders
from matti.user import User


class ActionController(BaseController):
    prefix = "actions"

    @property
    def router(self) -> APIRouter:
        @self.api_router.post("", response_model=ActionResponse)
        async def save_action(
            headers: Annotated[RequestHeaders, Header()],
            request: ActionCreateRequest,
            user: User = Depends(current_user),
            action_service: ActionService = Depends(ServiceFactory.get_action_service),
        ) -> ActionResponse:
            """Stores a commitment from the chat and schedules its follow-ups."""
            action, follow_ups = await action_service.save_action(user, request)
            return ActionResponse(**action.model_dump(), follow_ups=follow_ups)

        @self.api_router.get("", response_model=list[Action])
        async def get_actions(
            headers: Annotated[RequestHeaders, Header()],
            status: ActionStatus | None = Query(default=None),
            user: User = Depends(current_user),
            action_service: ActionService = Depends(ServiceFactory.get_action_service),
        ) -> list[Action]:
            return await action_service.get_actions(user, status)

        @self.api_router.get("/stats", response_model=ActionStats)
        async def get_action_stats(
            headers: Annotated[RequestHeaders, Header()],
            user: User = Depends(current_user),
            action_service: ActionService = Depends(ServiceFactory.get_action_service),
        ) -> ActionStats:
            return await action_service.get_stats(user)

        @self.api_router.put("/{action_id}/status", response_model=Action)
        async def update_action_status(
            headers: Annotated[RequestHeaders, Header()],
            action_id: UUID,
            request: ActionStatusUpdateRequest,
            user: User = Depends(current_user),
            action_service: ActionService = Depends(ServiceFactory.get_action_service),
        ) -> Action:
            return await action_service.update_status(user, action_id, request.status)

        return self.api_router
