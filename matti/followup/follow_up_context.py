"""
Compact context about a recent conversation, used to let the assistant open with a natural
follow-up question without loading the full history.

Theme windows: bullying and (negative) feelings are resurfaced within 3 days, the action-driven
themes within 5 days when actions are still open, freetime and general never.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, Field

from matti.action import Action, ActionStatus
from matti.common.models import Outcome, Severity, ThemeId
from matti.conversation import Conversation

MAX_CONTEXT_AGE_DAYS = 7
MAX_SUMMARY_LENGTH = 300
SUMMARY_PLACEHOLDER = "Geen samenvatting beschikbaar"


class Sentiment(Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    UNKNOWN = "unknown"


class ConversationContext(BaseModel):
    theme_id: ThemeId
    theme_name: str
    last_conversation_date: datetime
    days_ago: int
    summary: str
    pending_actions: list[str] = Field(default_factory=list)
    sentiment: Sentiment
    severity: Severity | None = None
    should_follow_up: bool = True


FOLLOW_UP_WINDOWS: dict[ThemeId, int | None] = {
    ThemeId.BULLYING: 3,
    ThemeId.FEELINGS: 3,
    ThemeId.SCHOOL: 5,
    ThemeId.FRIENDS: 5,
    ThemeId.HOME: 5,
    ThemeId.LOVE: 5,
    ThemeId.FUTURE: 5,
    ThemeId.SELF: 5,
    ThemeId.FREETIME: None,
    ThemeId.GENERAL: None,
}

# Themes that are only resurfaced while the user still has open actions.
ACTION_DRIVEN_THEMES = frozenset({ThemeId.SCHOOL, ThemeId.FRIENDS, ThemeId.HOME, ThemeId.LOVE, ThemeId.FUTURE, ThemeId.SELF})

THEME_NAMES: dict[ThemeId, str] = {
    ThemeId.GENERAL: "Algemeen",
    ThemeId.SCHOOL: "School",
    ThemeId.FRIENDS: "Vrienden",
    ThemeId.HOME: "Thuis",
    ThemeId.FEELINGS: "Gevoelens",
    ThemeId.LOVE: "Liefde",
    ThemeId.FREETIME: "Vrije tijd",
    ThemeId.FUTURE: "Toekomst",
    ThemeId.SELF: "Jezelf",
    ThemeId.BULLYING: "Pesten",
}

NEGATIVE_KEYWORDS = (
    "bang",
    "angstig",
    "verdrietig",
    "somber",
    "depressief",
    "eenzaam",
    "stress",
    "zorgen",
    "moeilijk",
    "rot",
    "slecht",
    "niet goed",
    "hulp nodig",
    "weet niet wat",
    "geen idee",
    "hopeloos",
)

POSITIVE_KEYWORDS = (
    "beter",
    "goed",
    "fijn",
    "blij",
    "gelukt",
    "trots",
    "succesvol",
    "opgelost",
    "geholpen",
    "duidelijk",
    "snap het",
    "kan het",
)


def detect_sentiment(summary: str | None, initial_problem: str | None, bullying_detected: bool) -> Sentiment:
    """Heuristic sentiment from keyword counts in the summary and initial problem."""
    if not summary and not initial_problem:
        return Sentiment.UNKNOWN
    if bullying_detected:
        return Sentiment.NEGATIVE

    text = f"{summary or ''} {initial_problem or ''}".lower()
    negative_count = sum(1 for keyword in NEGATIVE_KEYWORDS if keyword in text)
    positive_count = sum(1 for keyword in POSITIVE_KEYWORDS if keyword in text)

    if negative_count > positive_count:
        return Sentiment.NEGATIVE
    if positive_count > negative_count:
        return Sentiment.POSITIVE
    return Sentiment.NEUTRAL


def should_follow_up(theme_id: ThemeId, days_ago: int, has_actions: bool, sentiment: Sentiment, outcome: Outcome | None) -> bool:
    if outcome is Outcome.RESOLVED:
        return False

    window = FOLLOW_UP_WINDOWS.get(theme_id)
    if window is None or days_ago > window:
        return False

    if theme_id is ThemeId.BULLYING:
        return True
    if theme_id is ThemeId.FEELINGS:
        return sentiment is Sentiment.NEGATIVE
    if theme_id in ACTION_DRIVEN_THEMES:
        return has_actions
    return False


def days_since(moment: datetime, now: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int((now - moment).total_seconds() // 86400)


def get_recent_conversation_context(
    conversation: Conversation | None,
    actions: Iterable[Action],
    now: datetime | None = None,
    max_age_days: int = MAX_CONTEXT_AGE_DAYS,
) -> ConversationContext | None:
    """
    Build the follow-up context for the user's most recent conversation.

    Returns None when there is nothing to resurface: no conversation, a conversation older than
    seven days, or a theme/outcome/sentiment combination that does not warrant a follow-up.
    """
    if conversation is None:
        return None

    now = now or datetime.now(timezone.utc)
    days_ago = days_since(conversation.updated_at, now)
    if days_ago > max_age_days:
        return None

    pending_actions = [a.action_text for a in actions if a.status is ActionStatus.PENDING]
    sentiment = detect_sentiment(conversation.summary, conversation.initial_problem, conversation.bullying_detected)

    if not should_follow_up(conversation.theme_id, days_ago, bool(pending_actions), sentiment, conversation.outcome):
        return None

    summary = conversation.summary or conversation.initial_problem or SUMMARY_PLACEHOLDER
    if len(summary) > MAX_SUMMARY_LENGTH:
        summary = summary[: MAX_SUMMARY_LENGTH - 3] + "..."

    return ConversationContext(
        theme_id=conversation.theme_id,
        theme_name=THEME_NAMES[conversation.theme_id],
        last_conversation_date=conversation.updated_at,
        days_ago=days_ago,
        summary=summary,
        pending_actions=pending_actions,
        sentiment=sentiment,
        severity=conversation.bullying_severity,
    )


_SENTIMENT_LABELS = {
    Sentiment.NEGATIVE: "negatief",
    Sentiment.POSITIVE: "positief",
}


def generate_context_prompt(context: ConversationContext) -> str:
    """Short instruction block for the system prompt, kept to roughly a hundred tokens."""
    day_label = "dag" if context.days_ago == 1 else "dagen"
    lines = [
        f"RECENTE CONTEXT ({context.days_ago} {day_label} geleden):",
        f"Thema: {context.theme_name}",
    ]
    if context.summary:
        lines.append(f"Samenvatting: {context.summary}")
    if context.pending_actions:
        lines.append(f"Openstaande acties: {', '.join(context.pending_actions)}")
    if context.severity:
        lines.append(f"Ernst: {context.severity.value}")

    instruction = f"INSTRUCTIE: Vraag natuurlijk hoe het nu gaat met {context.theme_name.lower()}"
    if context.pending_actions:
        instruction += " en of het gelukt is om de acties uit te voeren"
    sentiment_label = _SENTIMENT_LABELS.get(context.sentiment, "neutraal")
    instruction += f". Wees empathisch en niet dwingend. Als het sentiment {sentiment_label} was, houd daar rekening mee."

    return "\n".join(lines) + "\n\n" + instruction
