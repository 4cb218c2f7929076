from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, Field

from matti.common.models import Outcome, Role, Severity, ThemeId


class ChatMessage(BaseModel):
    """A single turn stored in the conversation's JSON message array."""

    role: Role
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Conversation(BaseModel):
    id: UUID
    user_id: UUID
    theme_id: ThemeId
    thread_id: str | None = None
    messages: list[ChatMessage] = Field(default_factory=list)
    summary: str | None = None
    is_archived: bool = False
    archived_at: datetime | None = None
    bullying_detected: bool = False
    bullying_severity: Severity | None = None
    bullying_follow_up_scheduled: bool = False
    initial_problem: str | None = None
    conversation_count: int = 0
    intervention_start_date: datetime | None = None
    intervention_end_date: datetime | None = None
    outcome: Outcome | None = Outcome.IN_PROGRESS
    resolution: str | None = None
    action_completion_rate: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def user_messages(self) -> list[ChatMessage]:
        return [m for m in self.messages if m.role is Role.USER]

    def transcript(self, assistant_name: str = "Matti") -> str:
        """Plain-text rendering used as LLM input."""
        lines = []
        for message in self.messages:
            if message.role is Role.SYSTEM:
                continue
            speaker = "Gebruiker" if message.role is Role.USER else assistant_name
            lines.append(f"{speaker}: {message.content}")
        return "\n".join(lines)
