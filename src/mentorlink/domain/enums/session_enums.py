"""
Session and Message Enums

Lifecycle and classification values for mentor-student sessions.
Values match the persisted strings exactly.
"""

from enum import StrEnum


class SessionStatus(StrEnum):
    """
    Session lifecycle states.

    SAFETY_NOTE: ESCALATED is sticky. Message traffic never moves a
    session out of it; only an explicit administrative action may.
    """

    ACTIVE = "active"
    """Conversation in progress."""

    COMPLETED = "completed"
    """Closed normally by the mentor (terminal)."""

    TERMINATED = "terminated"
    """Closed abnormally (terminal)."""

    ESCALATED = "escalated"
    """Crisis language detected; flagged for urgent attention."""

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.TERMINATED)


class SessionPriority(StrEnum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class SessionType(StrEnum):
    CHAT = "chat"
    VOICE_CALL = "voice_call"
    VIDEO_CALL = "video_call"


class SessionOutcome(StrEnum):
    RESOLVED = "resolved"
    ONGOING = "ongoing"
    REFERRAL_NEEDED = "referral_needed"
    EMERGENCY = "emergency"


class SenderType(StrEnum):
    """Role of a message author, always resolved server-side."""

    STUDENT = "student"
    MENTOR = "mentor"


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    VOICE = "voice"
    SYSTEM = "system"


class VerificationStatus(StrEnum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
