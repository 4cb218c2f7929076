from loguru import logger

from matti.assistant import generate_welcome_message
from matti.assistant.assistant_models import AssistantMessageRequest, AssistantReply, WelcomeResponse
from matti.chatbot.assistants import AssistantConfig
from matti.chatbot.chatbot_services import ChatbotService
from matti.common.exceptions import ConflictException
from matti.common.models import Role, Severity
from matti.conversation.conversation_services import ConversationService
from matti.followup.follow_up_services import FollowUpService
from matti.safety.bullying_detection import bullying_severity, detect_bullying, mentions_bullying, recommended_bullying_action
from matti.safety.crisis_detection import crisis_response_guidance, detect_crisis
from matti.user import User


class AssistantService:
    """
    Service class for a single chat turn: safety screening, prompt assembly, the model call and persistence.
    """

    def __init__(
        self,
        assistant: AssistantConfig,
        chatbot_service: ChatbotService,
        conversation_service: ConversationService,
        follow_up_service: FollowUpService,
    ):
        self.assistant = assistant
        self.chatbot_service = chatbot_service
        self.conversation_service = conversation_service
        self.follow_up_service = follow_up_service

    async def send_message(self, user: User, request: AssistantMessageRequest) -> AssistantReply:
        conversation = await self.conversation_service.get_conversation(user, request.conversation_id)
        if conversation.is_archived:
            raise ConflictException(f"Conversation with ID: {conversation.id} is archived and read-only")

        crisis = detect_crisis(request.message)
        bullying = detect_bullying(request.message)
        if crisis.detected:
            logger.warning("Crisis signal detected", conversation_id=str(conversation.id), type=crisis.type.value, severity=crisis.severity.value)

        sections = [self.assistant.system_prompt]
        if guidance := crisis_response_guidance(crisis):
            sections.append(guidance)
        if bullying.is_bullying:
            sections.append(f"PESTSIGNAAL ({bullying.severity.value}): {bullying.reasoning}\n{recommended_bullying_action(bullying.severity)}")

        used_context = False
        if not conversation.user_messages:
            recent = await self.follow_up_service.get_recent_context(user, exclude_conversation_id=conversation.id)
            if recent is not None:
                sections.append(recent.context_prompt)
                used_context = True

        reply = await self.chatbot_service.reply("\n\n".join(sections), conversation.messages, request.message)

        await self.conversation_service.save_message(user, conversation.id, Role.USER, request.message, thread_id=request.thread_id)
        updated = await self.conversation_service.save_message(user, conversation.id, Role.ASSISTANT, reply)

        transcript = [m.model_dump(mode="json") for m in updated.messages]
        if mentions_bullying(transcript):
            updated = await self.conversation_service.flag_bullying(conversation.id, Severity(bullying_severity(transcript)))

        return AssistantReply(
            conversation_id=conversation.id,
            reply=reply,
            message_count=len(updated.messages),
            crisis=crisis,
            bullying=bullying,
            used_follow_up_context=used_context,
        )

    async def welcome(self, user: User) -> WelcomeResponse:
        return WelcomeResponse(
            message=generate_welcome_message(user.name or user.username),
            assistant_name=self.assistant.name,
            logo=self.assistant.logo,
            primary_color=self.assistant.primary_color,
        )
