from typing import Annotated

from fastapi import APIRouter, Depends, Header

from matti.assistant.assistant_models import AssistantMessageRequest, AssistantReply, WelcomeResponse
from matti.assistant.assistant_services import AssistantService
from matti.common.config import ServiceFactory
from matti.common.controller import BaseController, current_user
from matti.common.models import RequestHeaders
from matti.user import User


class AssistantController(BaseController):
    prefix = "assistant"

    @property
    def router(self) -> APIRouter:
        @self.api_router.post("/messages", response_model=AssistantReply)
        async def send_message(
            headers: Annotated[RequestHeaders, Header()],
            request: AssistantMessageRequest,
            user: User = Depends(current_user),
            assistant_service: AssistantService = Depends(ServiceFactory.get_assistant_service),
        ) -> AssistantReply:
            """
            Sends the user's message to the assistant and stores both turns in the conversation.
            Crisis and bullying signals in the message are returned alongside the reply.
            """
            return await assistant_service.send_message(user, request)

        @self.api_router.get("/welcome", response_model=WelcomeResponse)
        async def get_welcome_message(
            headers: Annotated[RequestHeaders, Header()],
            user: User = Depends(current_user),
            assistant_service: AssistantService = Depends(ServiceFactory.get_assistant_service),
        ) -> WelcomeResponse:
            return await assistant_service.welcome(user)

        return self.api_router
