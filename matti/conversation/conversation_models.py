from datetime import datetime
from enum import Enum
from typing import Self
from uuid import UUID

from pydantic import BaseModel, Field

from matti.common.models import Outcome, Severity, ThemeId
from matti.conversation import ChatMessage, Conversation

PREVIEW_LENGTH = 80


class MessageRole(Enum):
    """Roles a client may write; system turns are only added by the server."""

    USER = "user"
    ASSISTANT = "assistant"


class SaveMessageRequest(BaseModel):
    role: MessageRole
    content: str = Field(..., min_length=1)
    thread_id: str | None = None


class SaveMessageResponse(BaseModel):
    success: bool = True
    message_count: int


class ConversationSummary(BaseModel):
    """History list entry with counts and a preview of the first user message."""

    id: UUID
    theme_id: ThemeId
    summary: str | None = None
    messages: list[ChatMessage]
    is_archived: bool
    archived_at: datetime | None = None
    message_count: int
    user_message_count: int
    preview_text: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_conversation(cls, conversation: Conversation) -> Self:
        user_messages = conversation.user_messages
        return cls(
            id=conversation.id,
            theme_id=conversation.theme_id,
            summary=conversation.summary,
            messages=conversation.messages,
            is_archived=conversation.is_archived,
            archived_at=conversation.archived_at,
            message_count=len(conversation.messages),
            user_message_count=len(user_messages),
            preview_text=user_messages[0].content[:PREVIEW_LENGTH] if user_messages else None,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
        )


class UpdateSummaryRequest(BaseModel):
    summary: str


class BullyingFollowUpRequest(BaseModel):
    severity: Severity


class BullyingFollowUpResponse(BaseModel):
    success: bool = True
    follow_up_date: datetime


class UpdateOutcomeRequest(BaseModel):
    outcome: Outcome
    resolution: str | None = None
    action_completion_rate: int | None = Field(default=None, ge=0, le=100)


class InitializeInterventionRequest(BaseModel):
    initial_problem: str = Field(..., min_length=1)


class ArchiveConversationRequest(BaseModel):
    summary: str | None = None


class ArchiveConversationResponse(BaseModel):
    success: bool = True
    archived: bool
    conversation: Conversation | None = None


class DeleteConversationsResponse(BaseModel):
    success: bool = True
    deleted: int
