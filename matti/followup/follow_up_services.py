from datetime import datetime
from uuid import UUID

from loguru import logger

from matti.action import Action, FollowUp
from matti.action.action_repositories import ActionRepository
from matti.chatbot.prompts.task_prompts import FOLLOW_UP_CHECK_IN
from matti.common.entities import utc_now
from matti.common.exceptions import NotFoundException
from matti.common.models import Role
from matti.conversation import ChatMessage, Conversation
from matti.conversation.conversation_repositories import ConversationRepository
from matti.conversation.conversation_services import ConversationService
from matti.followup.follow_up_context import MAX_CONTEXT_AGE_DAYS, generate_context_prompt, get_recent_conversation_context
from matti.followup.follow_up_models import RecentContextResponse, SweepResult
from matti.user import User


class FollowUpService:
    """
    Service class for resurfacing recent conversations and consuming due follow-ups.
    """

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        action_repository: ActionRepository,
        conversation_service: ConversationService,
        max_context_actions: int = 5,
        max_context_age_days: int = MAX_CONTEXT_AGE_DAYS,
    ):
        self.conversation_repository = conversation_repository
        self.action_repository = action_repository
        self.conversation_service = conversation_service
        self.max_context_actions = max_context_actions
        self.max_context_age_days = max_context_age_days

    async def get_recent_context(self, user: User, now: datetime | None = None, exclude_conversation_id: UUID | None = None) -> RecentContextResponse | None:
        conversation = self.conversation_repository.find_most_recent(user.id, exclude_id=exclude_conversation_id)
        if conversation is None:
            return None

        actions = self.action_repository.list_pending_for_theme(user.id, conversation.theme_id, limit=self.max_context_actions)
        context = get_recent_conversation_context(conversation, actions, now=now, max_age_days=self.max_context_age_days)
        if context is None:
            return None
        return RecentContextResponse(context=context, context_prompt=generate_context_prompt(context))

    async def _target_conversation(self, action: Action, now: datetime) -> Conversation:
        if action.conversation_id is not None:
            try:
                conversation = self.conversation_repository.find_by_id(action.conversation_id, action.user_id)
            except NotFoundException:
                conversation = None
            if conversation is not None and not conversation.is_archived:
                return conversation
        return await self.conversation_service.ensure_active_conversation(action.user_id, action.theme_id, now)

    async def run_follow_up_sweep(self, now: datetime | None = None) -> SweepResult:
        """
        Archives idle conversations, then posts one check-in message per action with due follow-ups.
        The latest due follow-up is marked sent and older ones skipped, in the same commit as the message.
        A failing action is logged and its follow-ups stay pending for the next run.
        """
        now = now or utc_now()
        result = SweepResult(conversations_archived=await self.conversation_service.archive_idle_conversations(now))

        due: dict[UUID, tuple[Action, list[FollowUp]]] = {}
        for follow_up, action in self.action_repository.find_due_follow_ups(now):
            due.setdefault(action.id, (action, []))[1].append(follow_up)

        for action, follow_ups in due.values():
            latest = max(follow_ups, key=lambda f: f.scheduled_for)
            skipped_ids = [f.id for f in follow_ups if f.id != latest.id]
            with logger.contextualize(follow_up_id=str(latest.id), action_id=str(action.id)):
                try:
                    conversation = await self._target_conversation(action, now)
                    self.action_repository.settle_follow_ups(latest.id, skipped_ids, now)
                    message = ChatMessage(role=Role.SYSTEM, content=FOLLOW_UP_CHECK_IN.format(action_text=action.action_text), timestamp=now)
                    self.conversation_repository.append_message(conversation.id, action.user_id, message)
                    result.follow_ups_sent += 1
                    if skipped_ids:
                        logger.info("Skipped overdue follow-ups", count=len(skipped_ids))
                except Exception:
                    logger.exception("Failed to process follow-up")
                    self.conversation_repository.rollback()
                    self.action_repository.rollback()
                    result.follow_ups_failed += 1

        logger.info("Follow-up sweep finished", **result.model_dump())
        return result
