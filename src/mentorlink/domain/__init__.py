"""
MentorLink Domain Layer

Core entities, enums and errors for mentor-student messaging.
Independent of persistence and transport.
"""

from mentorlink.domain.models import (
    Principal,
    StudentProfile,
    MentorProfile,
    MentorSession,
    SessionParticipants,
    Message,
    Attachment,
    EscalationEvent,
)
from mentorlink.domain.enums import (
    SessionStatus,
    SessionPriority,
    SenderType,
    MessageType,
    EscalationType,
    EscalationSeverity,
)

__all__ = [
    "Principal",
    "StudentProfile",
    "MentorProfile",
    "MentorSession",
    "SessionParticipants",
    "Message",
    "Attachment",
    "EscalationEvent",
    "SessionStatus",
    "SessionPriority",
    "SenderType",
    "MessageType",
    "EscalationType",
    "EscalationSeverity",
]
