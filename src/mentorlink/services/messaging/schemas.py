"""
Wire Schemas

Pydantic models for inbound REST payloads and WebSocket control
messages. Keys are camelCase on the wire and snake_case in Python.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic.alias_generators import to_camel

from mentorlink.domain.enums import (
    MessageType,
    SessionOutcome,
    SessionPriority,
    SessionType,
)

MAX_CONTENT_LENGTH = 4000
MAX_ATTACHMENTS = 10


class WireModel(BaseModel):
    """Base for camelCase payloads. Unknown keys are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


# =============================================================================
# MESSAGES
# =============================================================================

class AttachmentIn(WireModel):
    type: str = Field(..., min_length=1, max_length=20)
    url: str = Field(..., min_length=1, max_length=2048)
    name: str = Field(..., min_length=1, max_length=255)
    size: Optional[int] = Field(default=None, ge=0)


class MessageDraft(WireModel):
    """
    Content part of a send request, validated after access is granted.

    Text messages require non-empty content; other types may carry
    attachments only.
    """

    # Content is persisted verbatim
    model_config = ConfigDict(str_strip_whitespace=False)

    message_type: MessageType = MessageType.TEXT
    content: Optional[str] = Field(default=None, max_length=MAX_CONTENT_LENGTH)
    attachments: list[AttachmentIn] = Field(default_factory=list, max_length=MAX_ATTACHMENTS)

    @model_validator(mode="after")
    def _require_text_content(self) -> "MessageDraft":
        if self.message_type == MessageType.TEXT and not (self.content and self.content.strip()):
            raise ValueError("content is required for text messages")
        return self


class SendMessageRequest(WireModel):
    """
    POST /messages/send body.

    sender_id and sender_type are accepted for compatibility and then
    discarded; the sender is always resolved server-side.
    """

    model_config = ConfigDict(str_strip_whitespace=False)

    session_id: str = Field(..., min_length=1, max_length=64)
    content: Optional[str] = None
    message_type: Optional[str] = None
    attachments: Optional[list] = None
    student_id: Optional[str] = None
    sender_id: Optional[str] = None
    sender_type: Optional[str] = None


# =============================================================================
# SESSIONS AND PROFILES
# =============================================================================

class RegisterStudentRequest(WireModel):
    display_name: str = Field(..., min_length=1, max_length=120)
    concern_areas: list[str] = Field(default_factory=list, max_length=10)


class RegisterMentorRequest(WireModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    mentor_type: Literal["college_senior", "professional", "psychologist", "counselor"] = "counselor"
    specialization: list[str] = Field(default_factory=list, max_length=20)


class SessionRequest(WireModel):
    mentor_id: str = Field(..., min_length=1, max_length=64)
    student_id: Optional[str] = None
    category_id: Optional[str] = None
    session_type: SessionType = SessionType.CHAT
    priority: SessionPriority = SessionPriority.NORMAL
    session_title: Optional[str] = Field(default=None, max_length=200)
    initial_concern: Optional[str] = Field(default=None, max_length=2000)


class CompleteSessionRequest(WireModel):
    summary: Optional[str] = Field(default=None, max_length=4000)
    outcome: Optional[SessionOutcome] = None
    mentor_notes: Optional[str] = Field(default=None, max_length=4000)


class RateSessionRequest(WireModel):
    rating: int = Field(..., ge=1, le=5)
    feedback: Optional[str] = Field(default=None, max_length=2000)


# =============================================================================
# WEBSOCKET CONTROL MESSAGES
# =============================================================================

class JoinSessionCommand(WireModel):
    type: Literal["join_session"]
    session_id: str = Field(..., min_length=1, max_length=64)


class LeaveSessionCommand(WireModel):
    type: Literal["leave_session"]
    session_id: str = Field(..., min_length=1, max_length=64)


class TypingCommand(WireModel):
    type: Literal["typing"]
    session_id: str = Field(..., min_length=1, max_length=64)
    is_typing: bool = False


ControlCommand = Annotated[
    Union[JoinSessionCommand, LeaveSessionCommand, TypingCommand],
    Field(discriminator="type"),
]

CONTROL_COMMAND_TYPES = frozenset({"join_session", "leave_session", "typing"})

control_command_adapter: TypeAdapter[ControlCommand] = TypeAdapter(ControlCommand)
