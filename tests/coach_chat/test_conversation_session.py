"""Tests for coach chat and pending-action handling."""

import asyncio
import json

import httpx
import pytest

from fitcoach.api.results import ApiSuccess
from fitcoach.coach.chat import CANCELLED_REPLY, CONNECTION_ERROR_REPLY, CoachChatService, ConversationSession
from fitcoach.coach.schemas import ChatRole, PendingAction, WorkoutContext
from fitcoach.coaches.catalog import CoachId

ACTION = {"type": "add_workout_session", "params": {"workoutType": "cardio"}, "label": "Add a cardio session today"}


@pytest.fixture
def chat_service(api_client) -> CoachChatService:
    return CoachChatService(api_client)


@pytest.fixture
def conversation(chat_service) -> ConversationSession:
    return ConversationSession(chat_service, CoachId.DYLAN_POWER, history_limit=10)


@pytest.mark.asyncio
async def test_send_message_posts_history_and_context(chat_service, backend):
    backend.json(200, {"response": "Let's go!"})
    context = WorkoutContext(workout_title="Leg day", progress_percent=40)

    result = await chat_service.send_message(" hi coach ", CoachId.MAX_STONE, [], context)

    assert result.ok is True
    body = json.loads(backend.requests[0].content)
    assert backend.paths == ["/api/coach/chat"]
    assert body == {
        "message": "hi coach",
        "coach": "max-stone",
        "conversationHistory": [],
        "workoutContext": {"workoutTitle": "Leg day", "progressPercent": 40},
    }


@pytest.mark.asyncio
async def test_reply_is_appended_in_order(conversation, backend):
    backend.json(200, {"response": "Hello Sam"})

    reply = await conversation.send("Hi")

    assert reply.content == "Hello Sam"
    assert [(m.role, m.content) for m in conversation.messages] == [(ChatRole.USER, "Hi"), (ChatRole.COACH, "Hello Sam")]


@pytest.mark.asyncio
async def test_history_maps_coach_messages_to_assistant(conversation, backend):
    backend.json(200, {"response": "first reply"})
    backend.json(200, {"response": "second reply"})

    await conversation.send("one")
    await conversation.send("two")

    history = json.loads(backend.requests[1].content)["conversationHistory"]
    assert history == [{"role": "user", "content": "one"}, {"role": "assistant", "content": "first reply"}]


@pytest.mark.asyncio
async def test_blank_message_is_ignored(conversation, backend):
    assert await conversation.send("   ") is None
    assert backend.requests == []


@pytest.mark.asyncio
async def test_pending_action_is_held_and_confirmed(conversation, backend, session_store):
    await session_store.set_token("tok")
    backend.json(200, {"response": "Want me to add cardio?", "pendingAction": ACTION})
    backend.json(200, {"ok": True, "message": "Added a cardio session for today."})

    await conversation.send("add cardio")
    assert conversation.pending_action == PendingAction(**ACTION)

    outcome = await conversation.confirm_pending_action()

    assert outcome.content == "Added a cardio session for today."
    assert conversation.pending_action is None
    assert backend.paths[-1] == "/api/coach/actions/execute"
    assert json.loads(backend.requests[-1].content) == {"action": ACTION}


@pytest.mark.asyncio
async def test_new_message_invalidates_pending_action(conversation, backend):
    backend.json(200, {"response": "Add cardio?", "pendingAction": ACTION})
    backend.json(200, {"response": "Sure, what instead?"})

    await conversation.send("add cardio")
    await conversation.send("actually no, something else")

    assert conversation.pending_action is None


@pytest.mark.asyncio
async def test_cancel_drops_action_and_notes_it(conversation, backend):
    backend.json(200, {"response": "Add cardio?", "pendingAction": ACTION})
    await conversation.send("add cardio")

    note = conversation.cancel_pending_action()

    assert note.content == CANCELLED_REPLY
    assert conversation.pending_action is None
    assert conversation.cancel_pending_action() is None


@pytest.mark.asyncio
async def test_confirm_without_pending_action_does_nothing(conversation, backend):
    assert await conversation.confirm_pending_action() is None
    assert backend.requests == []


@pytest.mark.asyncio
async def test_failed_action_is_appended_as_coach_error(conversation, backend, session_store):
    await session_store.set_token("tok")
    backend.json(200, {"response": "Add cardio?", "pendingAction": ACTION})
    backend.json(400, {"ok": False, "error": "Invalid action schema"})

    await conversation.send("add cardio")
    outcome = await conversation.confirm_pending_action()

    assert outcome.is_error is True
    assert "Invalid action schema" in outcome.content
    assert outcome.role == ChatRole.COACH


@pytest.mark.asyncio
async def test_transport_failure_becomes_connection_message(conversation, backend):
    backend.queue(httpx.ConnectError("down"), httpx.ConnectError("still down"))

    reply = await conversation.send("hello?")

    assert reply.content == CONNECTION_ERROR_REPLY
    assert reply.is_error is True


@pytest.mark.asyncio
async def test_malformed_action_keeps_reply_text(conversation, backend):
    backend.json(200, {"response": "Here you go", "pendingAction": {"params": {}}})

    reply = await conversation.send("hi")

    assert reply.content == "Here you go"
    assert conversation.pending_action is None


class _GatedChatService:
    """Chat service whose first reply is held until released."""

    def __init__(self):
        self.release_first = asyncio.Event()
        self.calls = 0

    async def send_message(self, message, coach, conversation_history=None, workout_context=None):
        self.calls += 1
        if self.calls == 1:
            await self.release_first.wait()
            return ApiSuccess(data={"response": "late reply", "pendingAction": ACTION}, status=200)
        return ApiSuccess(data={"response": "fresh reply"}, status=200)


@pytest.mark.asyncio
async def test_superseded_reply_is_shown_but_its_action_ignored():
    service = _GatedChatService()
    conversation = ConversationSession(service, CoachId.DYLAN_POWER)

    first = asyncio.create_task(conversation.send("add cardio"))
    await asyncio.sleep(0)
    await conversation.send("never mind")
    service.release_first.set()
    late = await first

    assert late.content == "late reply"
    assert late.action is None
    assert conversation.pending_action is None
    assert [m.content for m in conversation.messages] == ["add cardio", "never mind", "fresh reply", "late reply"]
