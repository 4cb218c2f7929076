from datetime import datetime, timedelta
from uuid import UUID

from loguru import logger

from matti.chatbot.chatbot_services import ChatbotService
from matti.common.entities import utc_now
from matti.common.exceptions import ConflictException
from matti.common.models import Outcome, Role, Severity, ThemeId
from matti.conversation import ChatMessage, Conversation
from matti.conversation.conversation_repositories import ConversationRepository
from matti.user import User

BULLYING_FOLLOW_UP_DELAY = timedelta(days=3)


class ConversationService:
    """
    Service class for the theme-scoped conversation lifecycle.
    Keeps at most one active conversation per (user, theme), archives idle ones and prunes old history.
    """

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        chatbot_service: ChatbotService,
        assistant_name: str = "Matti",
        inactivity_timeout: timedelta = timedelta(minutes=30),
        max_stored_conversations: int = 10,
    ):
        self.repository = conversation_repository
        self.chatbot_service = chatbot_service
        self.assistant_name = assistant_name
        self.inactivity_timeout = inactivity_timeout
        self.max_stored_conversations = max_stored_conversations

    def _is_idle(self, conversation: Conversation, now: datetime) -> bool:
        return now - conversation.updated_at > self.inactivity_timeout

    async def _create(self, user_id: UUID, theme_id: ThemeId) -> Conversation:
        try:
            conversation = self.repository.create(user_id, theme_id)
        except ConflictException:
            # A concurrent request created it first.
            existing = self.repository.find_active(user_id, theme_id)
            if existing is None:
                raise
            return existing
        self.repository.prune(user_id, keep=self.max_stored_conversations)
        return conversation

    async def _archive(self, conversation: Conversation, summary: str | None = None) -> Conversation:
        """Summarise (when nothing is stored yet), archive, then prune the owner's history."""
        final_summary = summary or conversation.summary
        if not final_summary:
            final_summary = await self.chatbot_service.summarize_conversation(conversation, assistant_name=self.assistant_name)
        archived = self.repository.archive(conversation.id, final_summary)
        self.repository.prune(conversation.user_id, keep=self.max_stored_conversations)
        logger.info("Conversation archived", conversation_id=str(conversation.id), has_summary=bool(final_summary))
        return archived

    def _delete_empty(self, conversation: Conversation) -> None:
        self.repository.delete(conversation.id)
        logger.info("Deleted empty conversation", conversation_id=str(conversation.id))

    async def get_active_conversation(self, user: User, theme_id: ThemeId, now: datetime | None = None) -> Conversation:
        """
        Returns the active conversation for the theme, creating it on first access.
        A conversation idle for longer than the inactivity timeout is archived and replaced.
        """
        return await self.ensure_active_conversation(user.id, theme_id, now)

    async def ensure_active_conversation(self, user_id: UUID, theme_id: ThemeId, now: datetime | None = None) -> Conversation:
        now = now or utc_now()
        conversation = self.repository.find_active(user_id, theme_id)
        if conversation is None:
            return await self._create(user_id, theme_id)

        if self._is_idle(conversation, now) and conversation.user_messages:
            logger.info("Rolling over idle conversation", conversation_id=str(conversation.id), theme_id=theme_id.value)
            await self._archive(conversation)
            return await self._create(user_id, theme_id)
        return conversation

    async def get_conversation(self, user: User, conversation_id: UUID) -> Conversation:
        return self.repository.find_by_id(conversation_id, user.id)

    async def save_message(self, user: User, conversation_id: UUID, role: Role, content: str, thread_id: str | None = None) -> Conversation:
        message = ChatMessage(role=role, content=content, timestamp=utc_now())
        return self.repository.append_message(conversation_id, user.id, message, thread_id=thread_id)

    async def get_recent_conversations(self, user: User) -> list[Conversation]:
        return self.repository.list_recent(user.id, limit=self.max_stored_conversations)

    async def update_summary(self, user: User, conversation_id: UUID, summary: str) -> Conversation:
        return self.repository.update_fields(conversation_id, user.id, summary=summary)

    async def schedule_bullying_follow_up(self, user: User, conversation_id: UUID, severity: Severity) -> datetime:
        self.repository.update_fields(
            conversation_id,
            user.id,
            bullying_detected=True,
            bullying_severity=severity,
            bullying_follow_up_scheduled=True,
        )
        return utc_now() + BULLYING_FOLLOW_UP_DELAY

    async def flag_bullying(self, conversation_id: UUID, severity: Severity) -> Conversation:
        return self.repository.update_fields(conversation_id, bullying_detected=True, bullying_severity=severity)

    async def update_outcome(
        self,
        user: User,
        conversation_id: UUID,
        outcome: Outcome,
        resolution: str | None = None,
        action_completion_rate: int | None = None,
    ) -> Conversation:
        fields: dict = {"outcome": outcome}
        if resolution:
            fields["resolution"] = resolution
        if action_completion_rate is not None:
            fields["action_completion_rate"] = action_completion_rate
        if outcome is Outcome.RESOLVED:
            fields["intervention_end_date"] = utc_now()
        return self.repository.update_fields(conversation_id, user.id, **fields)

    async def initialize_intervention(self, user: User, conversation_id: UUID, initial_problem: str) -> Conversation:
        return self.repository.update_fields(
            conversation_id,
            user.id,
            initial_problem=initial_problem,
            intervention_start_date=utc_now(),
            outcome=Outcome.IN_PROGRESS,
            conversation_count=1,
        )

    async def increment_conversation_count(self, user: User, conversation_id: UUID) -> Conversation:
        return self.repository.increment_count(conversation_id, user.id)

    async def close_and_start_new(self, user: User, theme_id: ThemeId) -> Conversation:
        """
        Closes the active conversation of the theme and opens a fresh one.
        Conversations without any user message are deleted instead of archived.
        """
        conversation = self.repository.find_active(user.id, theme_id)
        if conversation is not None:
            if conversation.user_messages:
                await self._archive(conversation)
            else:
                self._delete_empty(conversation)
        return await self._create(user.id, theme_id)

    async def archive_conversation(self, user: User, theme_id: ThemeId, summary: str | None = None) -> Conversation | None:
        """
        Archives the active conversation of the theme.
        Returns None when there was nothing worth keeping; an empty conversation is deleted instead.
        """
        conversation = self.repository.find_active(user.id, theme_id)
        if conversation is None:
            return None
        if not conversation.user_messages:
            self._delete_empty(conversation)
            return None
        return await self._archive(conversation, summary=summary)

    async def delete_conversations(self, user: User, theme_id: ThemeId) -> int:
        deleted = self.repository.delete_by_theme(user.id, theme_id)
        logger.info("Deleted conversations for theme", user_id=str(user.id), theme_id=theme_id.value, count=deleted)
        return deleted

    async def archive_idle_conversations(self, now: datetime | None = None) -> int:
        """Archives every active conversation idle past the timeout. Empty ones are left for the next visit."""
        now = now or utc_now()
        archived = 0
        for conversation in self.repository.find_idle_active(before=now - self.inactivity_timeout):
            if not conversation.user_messages:
                continue
            await self._archive(conversation)
            archived += 1
        return archived
