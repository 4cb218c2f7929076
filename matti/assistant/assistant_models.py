from uuid import UUID

from pydantic import BaseModel, Field

from matti.safety.bullying_detection import BullyingDetectionResult
from matti.safety.crisis_detection import CrisisDetectionResult


class AssistantMessageRequest(BaseModel):
    conversation_id: UUID
    message: str = Field(..., min_length=1, max_length=4000)
    thread_id: str | None = None


class AssistantReply(BaseModel):
    conversation_id: UUID
    reply: str
    message_count: int
    crisis: CrisisDetectionResult
    bullying: BullyingDetectionResult
    used_follow_up_context: bool = False


class WelcomeResponse(BaseModel):
    message: str
    assistant_name: str
    logo: str
    primary_color: str
