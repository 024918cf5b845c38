"""AI coach chat with confirm/cancel for proposed actions."""

from fitcoach.coach.chat import CoachChatService, ConversationSession
from fitcoach.coach.schemas import ChatMessage, ChatRole, CoachReply, PendingAction, WorkoutContext

__all__ = [
    "ChatMessage",
    "ChatRole",
    "CoachChatService",
    "CoachReply",
    "ConversationSession",
    "PendingAction",
    "WorkoutContext",
]
