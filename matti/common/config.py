from datetime import timedelta
from typing import Literal
import os

from loguru import logger
from pydantic import BaseModel
from sqlalchemy.orm import Session

from matti.action.action_repositories import ActionRepository
from matti.action.action_services import ActionService
from matti.assistant.assistant_services import AssistantService
from matti.chatbot import BaseChatbot, ClaudeSonnetChatbot, GeminiChatbot, OpenAIChatbot
from matti.chatbot.assistants import load_assistant
from matti.chatbot.chatbot_services import ChatbotService
from matti.common.db_connect import SessionLocal
from matti.conversation.conversation_repositories import ConversationRepository
from matti.conversation.conversation_services import ConversationService
from matti.feedback.feedback_repositories import FeedbackRepository
from matti.feedback.feedback_services import FeedbackService
from matti.followup.follow_up_services import FollowUpService
from matti.goals.goal_repositories import GoalRepository
from matti.goals.goal_services import GoalService
from matti.user.user_repository import UserRepository
from matti.user.user_services import UserService


# Application configuration settings
class AppConfig:
    """Global application configuration settings"""

    STAGE = os.getenv("STAGE", "local").lower()

    # Which persona this deployment runs: 'matti' or 'opvoedmaatje'
    ASSISTANT = load_assistant()

    # LLM provider: 'openai', 'google' or 'anthropic'
    LLM_OWNER = os.getenv("LLM_OWNER", "openai").lower()
    LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o")

    INACTIVITY_TIMEOUT_MINUTES = int(os.getenv("INACTIVITY_TIMEOUT_MINUTES", "30"))
    MAX_STORED_CONVERSATIONS = int(os.getenv("MAX_STORED_CONVERSATIONS", "10"))
    FOLLOW_UP_MAX_AGE_DAYS = int(os.getenv("FOLLOW_UP_MAX_AGE_DAYS", "7"))
    MAX_CONTEXT_ACTIONS = int(os.getenv("MAX_CONTEXT_ACTIONS", "5"))


class ChatbotProfile(BaseModel):
    temperature: float
    max_tokens: int


# coach: chat replies, plan: goal plans, structured: JSON and summaries
CHATBOT_PROFILES: dict[str, ChatbotProfile] = {
    "coach": ChatbotProfile(temperature=0.6, max_tokens=500),
    "plan": ChatbotProfile(temperature=0.5, max_tokens=500),
    "structured": ChatbotProfile(temperature=0.4, max_tokens=400),
}


# ----- Service and Repository Factories -----
class SessionFactory:
    @staticmethod
    def get_session() -> Session:
        return SessionLocal()


class ServiceFactory:
    @staticmethod
    def get_user_service() -> UserService:
        return UserService(RepositoryFactory.get_user_repository())

    @staticmethod
    def get_chatbot_service() -> ChatbotService:
        return ChatbotService(
            coach=ChatbotFactory.create_chatbot(owner=AppConfig.LLM_OWNER, model_name=AppConfig.LLM_MODEL, profile="coach"),
            planner=ChatbotFactory.create_chatbot(owner=AppConfig.LLM_OWNER, model_name=AppConfig.LLM_MODEL, profile="plan"),
            summarizer=ChatbotFactory.create_chatbot(owner=AppConfig.LLM_OWNER, model_name=AppConfig.LLM_MODEL, profile="structured"),
        )

    @staticmethod
    def get_conversation_service() -> ConversationService:
        return ConversationService(
            conversation_repository=RepositoryFactory.get_conversation_repository(),
            chatbot_service=ServiceFactory.get_chatbot_service(),
            assistant_name=AppConfig.ASSISTANT.name,
            inactivity_timeout=timedelta(minutes=AppConfig.INACTIVITY_TIMEOUT_MINUTES),
            max_stored_conversations=AppConfig.MAX_STORED_CONVERSATIONS,
        )

    @staticmethod
    def get_action_service() -> ActionService:
        return ActionService(action_repository=RepositoryFactory.get_action_repository(), goal_repository=RepositoryFactory.get_goal_repository())

    @staticmethod
    def get_goal_service() -> GoalService:
        return GoalService(
            goal_repository=RepositoryFactory.get_goal_repository(),
            action_repository=RepositoryFactory.get_action_repository(),
            chatbot_service=ServiceFactory.get_chatbot_service(),
        )

    @staticmethod
    def get_follow_up_service() -> FollowUpService:
        return FollowUpService(
            conversation_repository=RepositoryFactory.get_conversation_repository(),
            action_repository=RepositoryFactory.get_action_repository(),
            conversation_service=ServiceFactory.get_conversation_service(),
            max_context_actions=AppConfig.MAX_CONTEXT_ACTIONS,
            max_context_age_days=AppConfig.FOLLOW_UP_MAX_AGE_DAYS,
        )

    @staticmethod
    def get_feedback_service() -> FeedbackService:
        return FeedbackService(RepositoryFactory.get_feedback_repository())

    @staticmethod
    def get_assistant_service() -> AssistantService:
        return AssistantService(
            assistant=AppConfig.ASSISTANT,
            chatbot_service=ServiceFactory.get_chatbot_service(),
            conversation_service=ServiceFactory.get_conversation_service(),
            follow_up_service=ServiceFactory.get_follow_up_service(),
        )


class RepositoryFactory:
    @staticmethod
    def get_user_repository() -> UserRepository:
        return UserRepository(session=SessionFactory.get_session())

    @staticmethod
    def get_conversation_repository() -> ConversationRepository:
        return ConversationRepository(session=SessionFactory.get_session())

    @staticmethod
    def get_action_repository() -> ActionRepository:
        return ActionRepository(session=SessionFactory.get_session())

    @staticmethod
    def get_goal_repository() -> GoalRepository:
        return GoalRepository(session=SessionFactory.get_session())

    @staticmethod
    def get_feedback_repository() -> FeedbackRepository:
        return FeedbackRepository(session=SessionFactory.get_session())


class ChatbotFactory:
    @staticmethod
    def create_chatbot(owner: str, model_name: str, profile: Literal["coach", "plan", "structured"] = "coach") -> BaseChatbot:
        settings = CHATBOT_PROFILES[profile]
        if owner == "openai":
            return OpenAIChatbot(model_name=model_name, temperature=settings.temperature, max_tokens=settings.max_tokens)
        elif owner == "google":
            return GeminiChatbot(model_name=model_name, temperature=settings.temperature, max_tokens=settings.max_tokens)
        elif owner == "anthropic":
            return ClaudeSonnetChatbot(temperature=settings.temperature, max_tokens=settings.max_tokens)
        logger.error("Unknown chatbot owner", owner=owner, model_name=model_name)
        raise ValueError(f"Unknown chatbot: {owner} {model_name}")
