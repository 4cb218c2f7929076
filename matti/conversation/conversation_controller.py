from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Header, Query

from matti.common.config import ServiceFactory
from matti.common.controller import BaseController, current_user
from matti.common.models import RequestHeaders, Role, SuccessResponse, ThemeId
from matti.conversation import Conversation
from matti.conversation.conversation_models import (
    ArchiveConversationRequest,
    ArchiveConversationResponse,
    BullyingFollowUpRequest,
    BullyingFollowUpResponse,
    ConversationSummary,
    DeleteConversationsResponse,
    InitializeInterventionRequest,
    SaveMessageRequest,
    SaveMessageResponse,
    UpdateOutcomeRequest,
    UpdateSummaryRequest,
)
from matti.conversation.conversation_services import ConversationService
from matti.user import User


class ConversationController(BaseController):
    prefix = "chat"

    @property
    def router(self) -> APIRouter:
        """
        Returns the APIRouter instance for the ConversationController.
        Conversations are addressed by theme for lifecycle operations and by id for everything else.
        """

        @self.api_router.get("/conversations/active", response_model=Conversation)
        async def get_active_conversation(
            headers: Annotated[RequestHeaders, Header()],
            theme_id: ThemeId = Query(...),
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> Conversation:
            return await conversation_service.get_active_conversation(user, theme_id)

        @self.api_router.get("/conversations", response_model=list[ConversationSummary])
        async def get_all_conversations(
            headers: Annotated[RequestHeaders, Header()],
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> list[ConversationSummary]:
            """The most recent conversations of the user, newest first."""
            conversations = await conversation_service.get_recent_conversations(user)
            return [ConversationSummary.from_conversation(c) for c in conversations]

        @self.api_router.get("/conversations/{conversation_id}", response_model=Conversation)
        async def get_conversation(
            headers: Annotated[RequestHeaders, Header()],
            conversation_id: UUID,
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> Conversation:
            return await conversation_service.get_conversation(user, conversation_id)

        @self.api_router.post("/conversations/{conversation_id}/messages", response_model=SaveMessageResponse)
        async def save_message(
            headers: Annotated[RequestHeaders, Header()],
            conversation_id: UUID,
            request: SaveMessageRequest,
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> SaveMessageResponse:
            conversation = await conversation_service.save_message(user, conversation_id, Role(request.role.value), request.content, thread_id=request.thread_id)
            return SaveMessageResponse(message_count=len(conversation.messages))

        @self.api_router.put("/conversations/{conversation_id}/summary", response_model=SuccessResponse)
        async def update_summary(
            headers: Annotated[RequestHeaders, Header()],
            conversation_id: UUID,
            request: UpdateSummaryRequest,
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> SuccessResponse:
            await conversation_service.update_summary(user, conversation_id, request.summary)
            return SuccessResponse()

        @self.api_router.post("/conversations/{conversation_id}/bullying-follow-up", response_model=BullyingFollowUpResponse)
        async def schedule_bullying_follow_up(
            headers: Annotated[RequestHeaders, Header()],
            conversation_id: UUID,
            request: BullyingFollowUpRequest,
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> BullyingFollowUpResponse:
            follow_up_date = await conversation_service.schedule_bullying_follow_up(user, conversation_id, request.severity)
            return BullyingFollowUpResponse(follow_up_date=follow_up_date)

        @self.api_router.put("/conversations/{conversation_id}/outcome", response_model=SuccessResponse)
        async def update_outcome(
            headers: Annotated[RequestHeaders, Header()],
            conversation_id: UUID,
            request: UpdateOutcomeRequest,
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> SuccessResponse:
            await conversation_service.update_outcome(
                user,
                conversation_id,
                request.outcome,
                resolution=request.resolution,
                action_completion_rate=request.action_completion_rate,
            )
            return SuccessResponse()

        @self.api_router.post("/conversations/{conversation_id}/intervention", response_model=SuccessResponse)
        async def initialize_intervention(
            headers: Annotated[RequestHeaders, Header()],
            conversation_id: UUID,
            request: InitializeInterventionRequest,
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> SuccessResponse:
            await conversation_service.initialize_intervention(user, conversation_id, request.initial_problem)
            return SuccessResponse()

        @self.api_router.post("/conversations/{conversation_id}/count", response_model=SuccessResponse)
        async def increment_conversation_count(
            headers: Annotated[RequestHeaders, Header()],
            conversation_id: UUID,
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> SuccessResponse:
            await conversation_service.increment_conversation_count(user, conversation_id)
            return SuccessResponse()

        @self.api_router.post("/themes/{theme_id}/close", response_model=Conversation)
        async def close_and_start_new(
            headers: Annotated[RequestHeaders, Header()],
            theme_id: ThemeId,
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> Conversation:
            """Closes the active conversation of the theme and returns the fresh one."""
            return await conversation_service.close_and_start_new(user, theme_id)

        @self.api_router.post("/themes/{theme_id}/archive", response_model=ArchiveConversationResponse)
        async def archive_conversation(
            headers: Annotated[RequestHeaders, Header()],
            theme_id: ThemeId,
            request: ArchiveConversationRequest | None = Body(default=None),
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> ArchiveConversationResponse:
            archived = await conversation_service.archive_conversation(user, theme_id, summary=request.summary if request else None)
            return ArchiveConversationResponse(archived=archived is not None, conversation=archived)

        @self.api_router.delete("/themes/{theme_id}", response_model=DeleteConversationsResponse)
        async def delete_conversation(
            headers: Annotated[RequestHeaders, Header()],
            theme_id: ThemeId,
            user: User = Depends(current_user),
            conversation_service: ConversationService = Depends(ServiceFactory.get_conversation_service),
        ) -> DeleteConversationsResponse:
            deleted = await conversation_service.delete_conversations(user, theme_id)
            return DeleteConversationsResponse(deleted=deleted)

        return self.api_router
