"""Domain models package."""

from mentorlink.domain.models.principal import Principal
from mentorlink.domain.models.profiles import StudentProfile, MentorProfile
from mentorlink.domain.models.session import MentorSession, SessionParticipants
from mentorlink.domain.models.message import Message, Attachment
from mentorlink.domain.models.escalation import EscalationEvent

__all__ = [
    "Principal",
    "StudentProfile",
    "MentorProfile",
    "MentorSession",
    "SessionParticipants",
    "Message",
    "Attachment",
    "EscalationEvent",
]
