from typing import Annotated

from fastapi import APIRouter, Depends, Header

from matti.common.config import ServiceFactory
from matti.common.controller import BaseController, current_user
from matti.common.models import RequestHeaders
from matti.followup.follow_up_models import RecentContextResponse, SweepResult
from matti.followup.follow_up_services import FollowUpService
from matti.user import User


class FollowUpController(BaseController):
    prefix = "follow-ups"
    tags = ["follow-ups"]

    @property
    def router(self) -> APIRouter:
        @self.api_router.get("/context", response_model=RecentContextResponse | None)
        async def get_recent_context(
            headers: Annotated[RequestHeaders, Header()],
            user: User = Depends(current_user),
            follow_up_service: FollowUpService = Depends(ServiceFactory.get_follow_up_service),
        ) -> RecentContextResponse | None:
            """Compact context of the latest conversation, or null when nothing should be resurfaced."""
            return await follow_up_service.get_recent_context(user)

        @self.api_router.post("/sweep", response_model=SweepResult, dependencies=[Depends(current_user)])
        async def run_follow_up_sweep(
            headers: Annotated[RequestHeaders, Header()],
            follow_up_service: FollowUpService = Depends(ServiceFactory.get_follow_up_service),
        ) -> SweepResult:
            return await follow_up_service.run_follow_up_sweep()

        return self.api_router
