import json
import re

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from loguru import logger
from pydantic import ValidationError

from matti.chatbot import BaseChatbot
from matti.chatbot.chatbot_models import GoalPlan
from matti.chatbot.prompts.task_prompts import GOAL_PLAN_PROMPT, SUMMARY_PROMPT
from matti.common.exceptions import LLMResponseException
from matti.common.models import Role
from matti.conversation import ChatMessage, Conversation
from matti.goals import Goal

_CODE_FENCE = re.compile(r"```(?:json)?\n?")


def strip_code_fences(text: str) -> str:
    return _CODE_FENCE.sub("", text).strip()


class ChatbotService:
    """
    Service class for every call to the language model.
    One chatbot per usage profile: replies, goal plans and summaries.
    """

    def __init__(self, coach: BaseChatbot, planner: BaseChatbot, summarizer: BaseChatbot) -> None:
        self.coach = coach
        self.planner = planner
        self.summarizer = summarizer

    async def reply(self, system_prompt: str, history: list[ChatMessage], user_message: str) -> str:
        """Send the system prompt, the stored turns and the new user message; return the assistant text."""
        prompt: list[BaseMessage] = [SystemMessage(content=system_prompt)]
        for message in history:
            match message.role:
                case Role.USER:
                    prompt.append(HumanMessage(content=message.content))
                case Role.ASSISTANT:
                    prompt.append(AIMessage(content=message.content))
                case Role.SYSTEM:
                    prompt.append(SystemMessage(content=message.content))
        prompt.append(HumanMessage(content=user_message))
        response = await self.coach.get_text_response_async(prompt)
        return response.strip()

    async def summarize_conversation(self, conversation: Conversation, assistant_name: str = "Matti") -> str | None:
        """
        Summarise the conversation in Dutch. Any failure yields None so archival can continue.
        """
        transcript = conversation.transcript(assistant_name=assistant_name)
        if not transcript:
            return None
        try:
            summary = await self.summarizer.get_text_response_async([SystemMessage(content=SUMMARY_PROMPT), HumanMessage(content=transcript)])
        except Exception as e:
            logger.warning("Summary generation failed", conversation_id=str(conversation.id), error=str(e))
            return None
        return summary.strip() or None

    async def generate_goal_plan(self, goal: Goal, clarification_context: str) -> GoalPlan:
        prompt = GOAL_PLAN_PROMPT.format(goal_title=goal.title, goal_type=goal.goal_type.value, clarification_context=clarification_context)
        try:
            raw = await self.planner.get_text_response_async(prompt)
        except Exception as e:
            logger.exception("Goal plan request failed", goal_id=str(goal.id))
            raise LLMResponseException(f"Goal plan request failed: {e}") from e

        try:
            plan = GoalPlan.model_validate(json.loads(strip_code_fences(raw)))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Goal plan was not valid JSON", goal_id=str(goal.id), raw=raw)
            raise LLMResponseException("The goal plan returned by the language model could not be parsed") from e

        if len(plan.steps) < 2:
            raise LLMResponseException("The language model returned too few steps for the goal plan")
        return plan
