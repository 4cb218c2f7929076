from matti.common.controller import BaseController


def get_controllers() -> list[type[BaseController]]:
    from matti.action.action_controller import ActionController
    from matti.assistant.assistant_controller import AssistantController
    from matti.conversation.conversation_controller import ConversationController
    from matti.feedback.feedback_controller import FeedbackController
    from matti.followup.follow_up_controller import FollowUpController
    from matti.goals.goal_controller import GoalController
    from matti.user.user_controller import UserController

    return [ConversationController, ActionController, GoalController, FollowUpController, FeedbackController, AssistantController, UserController]
