"""Database repositories package."""

from mentorlink.infrastructure.database.repositories.base import BaseRepository
from mentorlink.infrastructure.database.repositories.profile_repository import (
    MentorProfileRepository,
    StudentProfileRepository,
)
from mentorlink.infrastructure.database.repositories.session_repository import SessionRepository
from mentorlink.infrastructure.database.repositories.message_repository import MessageRepository
from mentorlink.infrastructure.database.repositories.escalation_repository import EscalationRepository

__all__ = [
    "BaseRepository",
    "StudentProfileRepository",
    "MentorProfileRepository",
    "SessionRepository",
    "MessageRepository",
    "EscalationRepository",
]
