import uuid

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
import pytest

from matti.chatbot import BaseChatbot, ChatInput
from matti.chatbot.chatbot_services import ChatbotService, strip_code_fences
from matti.common.exceptions import LLMResponseException
from matti.common.models import Role, ThemeId
from matti.conversation import ChatMessage, Conversation
from matti.goals import Goal, GoalType


class ScriptedChatbot(BaseChatbot):
    """Returns a canned answer and records the prompts it received."""

    def __init__(self, answer: str = "", error: Exception | None = None):
        self.answer = answer
        self.error = error
        self.prompts: list[ChatInput] = []

    async def get_text_response_async(self, prompt: ChatInput) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.answer


def _service(coach: BaseChatbot | None = None, planner: BaseChatbot | None = None, summarizer: BaseChatbot | None = None) -> ChatbotService:
    return ChatbotService(coach or ScriptedChatbot(), planner or ScriptedChatbot(), summarizer or ScriptedChatbot())


def _goal() -> Goal:
    return Goal(id=uuid.uuid4(), user_id=uuid.uuid4(), title="Beter slapen", goal_type=GoalType.SLEEP)


def _conversation(*messages: ChatMessage) -> Conversation:
    return Conversation(id=uuid.uuid4(), user_id=uuid.uuid4(), theme_id=ThemeId.SCHOOL, messages=list(messages))


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"intro": "Hoi"}\n```') == '{"intro": "Hoi"}'
    assert strip_code_fences('{"intro": "Hoi"}') == '{"intro": "Hoi"}'


@pytest.mark.asyncio
async def test_reply_sends_history_in_order():
    coach = ScriptedChatbot("  Goed bezig!  ")
    history = [
        ChatMessage(role=Role.USER, content="Hoi"),
        ChatMessage(role=Role.ASSISTANT, content="Hey!"),
        ChatMessage(role=Role.SYSTEM, content="Check-in"),
    ]

    reply = await _service(coach=coach).reply("Je bent Matti", history, "Het lukte")

    assert reply == "Goed bezig!"
    [prompt] = coach.prompts
    assert [type(m) for m in prompt] == [SystemMessage, HumanMessage, AIMessage, SystemMessage, HumanMessage]
    assert prompt[-1].content == "Het lukte"


@pytest.mark.asyncio
async def test_summary_uses_transcript_labels():
    summarizer = ScriptedChatbot("Gesprek over huiswerk.")
    conversation = _conversation(ChatMessage(role=Role.USER, content="Ik heb veel huiswerk"), ChatMessage(role=Role.ASSISTANT, content="Vertel"))

    summary = await _service(summarizer=summarizer).summarize_conversation(conversation, assistant_name="Matti")

    assert summary == "Gesprek over huiswerk."
    transcript = summarizer.prompts[0][1].content
    assert transcript == "Gebruiker: Ik heb veel huiswerk\nMatti: Vertel"


@pytest.mark.asyncio
async def test_summary_failure_returns_none():
    summarizer = ScriptedChatbot(error=RuntimeError("rate limited"))
    conversation = _conversation(ChatMessage(role=Role.USER, content="Hoi"))

    assert await _service(summarizer=summarizer).summarize_conversation(conversation) is None


@pytest.mark.asyncio
async def test_empty_conversation_is_not_summarised():
    summarizer = ScriptedChatbot("ongebruikt")

    assert await _service(summarizer=summarizer).summarize_conversation(_conversation()) is None
    assert summarizer.prompts == []


@pytest.mark.asyncio
async def test_goal_plan_accepts_fenced_camel_case_json():
    planner = ScriptedChatbot(
        '```json\n{"intro": "Zet hem op!", "steps": [{"sequence": 1, "actionText": "Kies een bedtijd"}, {"sequence": 2, "action_text": "Leg je telefoon weg"}]}\n```'
    )

    plan = await _service(planner=planner).generate_goal_plan(_goal(), "Ik slaap pas om 1 uur")

    assert plan.intro == "Zet hem op!"
    assert [step.action_text for step in plan.steps] == ["Kies een bedtijd", "Leg je telefoon weg"]
    assert "Beter slapen" in planner.prompts[0]
    assert "Ik slaap pas om 1 uur" in planner.prompts[0]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "answer",
    [
        "Hier is je plan: stap 1...",
        '{"intro": "Hoi", "steps": [{"sequence": 1, "action_text": "Slapen"}]}',
        '{"intro": "Hoi", "steps": [{"sequence": "een"}]}',
    ],
)
async def test_unusable_goal_plan_raises(answer):
    with pytest.raises(LLMResponseException):
        await _service(planner=ScriptedChatbot(answer)).generate_goal_plan(_goal(), "context")


@pytest.mark.asyncio
async def test_goal_plan_transport_error_raises():
    with pytest.raises(LLMResponseException):
        await _service(planner=ScriptedChatbot(error=TimeoutError("timeout"))).generate_goal_plan(_goal(), "context")
