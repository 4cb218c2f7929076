from pydantic import BaseModel

from matti.followup.follow_up_context import ConversationContext


class RecentContextResponse(BaseModel):
    context: ConversationContext
    context_prompt: str


class SweepResult(BaseModel):
    follow_ups_sent: int = 0
    follow_ups_failed: int = 0
    conversations_archived: int = 0
