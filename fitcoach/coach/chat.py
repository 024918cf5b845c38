"""Coach chat service and conversation state.

CoachChatService is the thin backend wrapper. ConversationSession keeps the
visible message list and at most one pending action awaiting confirmation.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import ValidationError

from fitcoach.api.client import ApiClient
from fitcoach.api.results import ApiFailure, ApiResult
from fitcoach.coach.schemas import ChatMessage, ChatRole, CoachReply, PendingAction, WorkoutContext
from fitcoach.coaches.catalog import CoachId
from fitcoach.core.errors import ErrorKind

CHAT_ENDPOINT = "/api/coach/chat"
EXECUTE_ACTION_ENDPOINT = "/api/coach/actions/execute"

FALLBACK_REPLY = "I'm here to help! Try asking about weight, form, or exercise alternatives."
CONNECTION_ERROR_REPLY = "Having trouble connecting. Check your connection and try again."
CANCELLED_REPLY = "No problem, I won't make that change."


class CoachChatService:
    def __init__(self, client: ApiClient):
        self._client = client

    async def send_message(
        self,
        message: str,
        coach: CoachId | str,
        conversation_history: list[ChatMessage] | None = None,
        workout_context: WorkoutContext | None = None,
    ) -> ApiResult:
        """Send one chat turn.

        Args:
            message: The user's message
            coach: Coach id the reply should come from
            conversation_history: Prior messages, oldest first
            workout_context: Optional in-workout context

        Returns:
            ApiResult whose data is the raw reply body
        """
        body: dict[str, Any] = {
            "message": message.strip(),
            "coach": str(coach),
            "conversationHistory": [m.to_history_entry() for m in conversation_history or []],
        }
        if workout_context is not None:
            body["workoutContext"] = workout_context.to_payload()
        return await self._client.post(CHAT_ENDPOINT, body)

    async def execute_action(self, action: PendingAction) -> ApiResult:
        logger.info(f"[COACH_CHAT] Executing action {action.type}")
        return await self._client.post(EXECUTE_ACTION_ENDPOINT, {"action": action.to_payload()}, auth=True)


def _parse_reply(data: Any) -> CoachReply:
    if not isinstance(data, dict):
        return CoachReply(response=FALLBACK_REPLY)
    try:
        reply = CoachReply.model_validate(data)
    except ValidationError as e:
        # A malformed action must not lose the reply text
        logger.warning(f"[COACH_CHAT] Ignoring malformed pending action: {e}")
        text = data.get("response")
        reply = CoachReply(response=text if isinstance(text, str) else "")
    if not reply.response:
        reply.response = FALLBACK_REPLY
    return reply


def _failure_text(result: ApiFailure) -> str:
    if result.kind == ErrorKind.TRANSPORT:
        return CONNECTION_ERROR_REPLY
    return f"Sorry, something went wrong: {result.error}"


class ConversationSession:
    """Messages in arrival order plus a single optional pending action.

    Every user message bumps a sequence number. A reply whose request was
    superseded by a newer message is still shown, but its pending action is
    dropped so a stale proposal can never be confirmed.
    """

    def __init__(
        self,
        service: CoachChatService,
        coach: CoachId | str,
        *,
        history_limit: int = 10,
        workout_context: WorkoutContext | None = None,
    ):
        self._service = service
        self.coach = coach
        self.history_limit = history_limit
        self.workout_context = workout_context
        self.messages: list[ChatMessage] = []
        self.pending_action: PendingAction | None = None
        self._sequence = 0

    def _append(self, role: ChatRole, content: str, *, action: PendingAction | None = None, is_error: bool = False) -> ChatMessage:
        message = ChatMessage(role=role, content=content, action=action, is_error=is_error)
        self.messages.append(message)
        return message

    async def send(self, text: str) -> ChatMessage | None:
        """Send a user message and append the coach's reply.

        Returns:
            The appended coach message, or None when text is blank
        """
        if not text.strip():
            return None

        if self.pending_action is not None:
            logger.info(f"[COACH_CHAT] New message supersedes pending action {self.pending_action.type}")
        self.pending_action = None

        history = self.messages[-self.history_limit :] if self.history_limit > 0 else []
        self._append(ChatRole.USER, text.strip())
        self._sequence += 1
        sequence = self._sequence

        result = await self._service.send_message(text, self.coach, history, self.workout_context)
        superseded = sequence != self._sequence

        if isinstance(result, ApiFailure):
            logger.warning(f"[COACH_CHAT] Chat request failed: {result.error}")
            return self._append(ChatRole.COACH, _failure_text(result), is_error=True)

        reply = _parse_reply(result.data)
        action = reply.pending_action
        if action is not None and superseded:
            logger.info(f"[COACH_CHAT] Dropping action {action.type} from superseded reply")
            action = None
        if action is not None:
            self.pending_action = action
        return self._append(ChatRole.COACH, reply.response, action=action)

    async def confirm_pending_action(self) -> ChatMessage | None:
        """Execute the pending action and append the outcome.

        Returns:
            The appended outcome message, or None when nothing is pending
        """
        action = self.pending_action
        if action is None:
            return None
        self.pending_action = None

        result = await self._service.execute_action(action)
        if isinstance(result, ApiFailure):
            logger.warning(f"[COACH_CHAT] Action {action.type} failed: {result.error}")
            return self._append(ChatRole.COACH, _failure_text(result), is_error=True)

        data = result.data if isinstance(result.data, dict) else {}
        message = data.get("message") or f"Done: {action.describe()}"
        return self._append(ChatRole.COACH, str(message))

    def cancel_pending_action(self) -> ChatMessage | None:
        if self.pending_action is None:
            return None
        logger.info(f"[COACH_CHAT] Cancelled action {self.pending_action.type}")
        self.pending_action = None
        return self._append(ChatRole.COACH, CANCELLED_REPLY)
