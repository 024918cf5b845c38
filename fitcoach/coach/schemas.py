"""Coach chat schemas.

Wire shapes for POST /api/coach/chat and POST /api/coach/actions/execute,
plus the local conversation message record.
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatRole(StrEnum):
    USER = "user"
    COACH = "coach"


class PendingAction(BaseModel):
    """An action proposed by the coach that needs user confirmation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str = Field(..., min_length=1, description="Action type, e.g. add_workout_session")
    params: dict[str, Any] = Field(default_factory=dict)
    label: str = ""
    confirmation_text: str = Field(default="", alias="confirmationText")

    def describe(self) -> str:
        return self.confirmation_text or self.label or self.type.replace("_", " ")

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "params": self.params, "label": self.label}


class ChatMessage(BaseModel):
    role: ChatRole
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action: PendingAction | None = None
    is_error: bool = False

    def to_history_entry(self) -> dict[str, str]:
        """Backend history format: coach messages are sent as "assistant"."""
        return {"role": "assistant" if self.role == ChatRole.COACH else "user", "content": self.content}


class WorkoutContext(BaseModel):
    """Optional in-workout context sent with a chat turn."""

    model_config = ConfigDict(populate_by_name=True)

    workout_title: str | None = Field(default=None, alias="workoutTitle")
    workout_type: str | None = Field(default=None, alias="workoutType")
    progress_percent: int | None = Field(default=None, alias="progressPercent", ge=0, le=100)
    remaining_exercises_count: int | None = Field(default=None, alias="remainingExercisesCount", ge=0)
    user_intent_hint: str | None = Field(default=None, alias="userIntentHint")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CoachReply(BaseModel):
    """Parsed body of a successful chat response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    response: str = ""
    pending_action: PendingAction | None = Field(default=None, alias="pendingAction")
