from enum import Enum

from pydantic import BaseModel


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ThemeId(Enum):
    """Topic buckets that partition a user's conversations."""

    GENERAL = "general"
    SCHOOL = "school"
    FRIENDS = "friends"
    HOME = "home"
    FEELINGS = "feelings"
    LOVE = "love"
    FREETIME = "freetime"
    FUTURE = "future"
    SELF = "self"
    BULLYING = "bullying"


class Outcome(Enum):
    UNRESOLVED = "unresolved"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    ESCALATED = "escalated"


class Severity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Requests
class RequestHeaders(BaseModel):
    x_forwarded_user: str


class SuccessResponse(BaseModel):
    success: bool = True
