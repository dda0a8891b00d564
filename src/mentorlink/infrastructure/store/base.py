"""
Session Store Interface

Contract between the messaging core and durable storage.
Every method is a suspension point; each call is its own unit
of work, so two calls are never atomic together.

ARCHITECTURE: The core only depends on this interface. Swapping
PostgreSQL for another backend requires no service changes.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional, Sequence

from mentorlink.domain.enums import SessionStatus
from mentorlink.domain.models import (
    EscalationEvent,
    Message,
    MentorProfile,
    MentorSession,
    SessionParticipants,
    StudentProfile,
)


class SessionStore(ABC):
    """
    Abstract storage for sessions, messages, profiles and escalations.

    Implementations:
        SqlAlchemySessionStore - PostgreSQL / SQLite via SQLAlchemy
        InMemorySessionStore   - process-local dictionaries
    """

    # Profiles

    @abstractmethod
    async def create_student(self, profile: StudentProfile) -> StudentProfile:
        """Persist a new student profile."""

    @abstractmethod
    async def create_mentor(self, profile: MentorProfile) -> MentorProfile:
        """Persist a new mentor profile."""

    @abstractmethod
    async def get_student(self, student_id: str) -> Optional[StudentProfile]:
        """Student profile by id."""

    @abstractmethod
    async def get_mentor(self, mentor_id: str) -> Optional[MentorProfile]:
        """Mentor profile by id."""

    @abstractmethod
    async def get_student_by_user(self, user_id: str) -> Optional[StudentProfile]:
        """Student profile linked to an authenticated account."""

    @abstractmethod
    async def get_mentor_by_user(self, user_id: str) -> Optional[MentorProfile]:
        """Mentor profile linked to an authenticated account."""

    @abstractmethod
    async def list_available_mentors(
        self,
        *,
        specialization: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[MentorProfile]:
        """Active, verified mentors ordered by name, optionally by specialization."""

    # Sessions

    @abstractmethod
    async def create_session(self, session: MentorSession) -> MentorSession:
        """Persist a new session."""

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[MentorSession]:
        """Session record only."""

    @abstractmethod
    async def get_participants(self, session_id: str) -> Optional[SessionParticipants]:
        """Session joined with its student and mentor profiles."""

    @abstractmethod
    async def complete_session(
        self,
        session: MentorSession,
        expected_status: SessionStatus,
    ) -> Optional[MentorSession]:
        """
        Write the completion fields of `session` if the stored status
        is still `expected_status`. Priority is never written.

        Returns:
            The stored session, or None when the status changed meanwhile
        """

    @abstractmethod
    async def rate_session(
        self,
        session_id: str,
        rating: int,
        feedback: Optional[str],
    ) -> Optional[MentorSession]:
        """
        Set rating and feedback on a completed, unrated session.

        Returns:
            The stored session, or None when it is not completed or already rated
        """

    @abstractmethod
    async def list_sessions(
        self,
        *,
        student_id: Optional[str] = None,
        mentor_id: Optional[str] = None,
        status: Optional[SessionStatus] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[MentorSession]:
        """Sessions of one participant, most recently active first."""

    @abstractmethod
    async def session_ids_for(
        self,
        *,
        student_ids: Iterable[str] = (),
        mentor_ids: Iterable[str] = (),
    ) -> list[str]:
        """Ids of every session where any given profile participates."""

    @abstractmethod
    async def touch_session(self, session_id: str, at: datetime) -> None:
        """Bump updated_at only. Never changes status."""

    @abstractmethod
    async def escalate_session(self, session_id: str, at: datetime) -> None:
        """Set status=escalated, priority=urgent, bump updated_at."""

    # Messages

    @abstractmethod
    async def create_message(self, message: Message) -> Message:
        """Persist a message (content is immutable afterwards)."""

    @abstractmethod
    async def list_messages(
        self,
        session_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> Sequence[Message]:
        """Messages of a session in ascending sent order."""

    @abstractmethod
    async def mark_read(self, session_id: str, reader_id: str, at: datetime) -> int:
        """
        Set read_at on unread messages not sent by reader_id.

        Returns:
            Number of messages newly marked (0 when repeated)
        """

    @abstractmethod
    async def count_unread(
        self,
        session_ids: Sequence[str],
        exclude_sender_ids: Iterable[str],
    ) -> int:
        """Unread messages across sessions, excluding the reader's own."""

    # Escalations

    @abstractmethod
    async def create_escalation(self, event: EscalationEvent) -> EscalationEvent:
        """Append an escalation record."""

    @abstractmethod
    async def list_escalations(self, session_id: str) -> Sequence[EscalationEvent]:
        """Escalation records of a session, oldest first."""

    async def health_check(self) -> bool:
        """Backend reachability (override for remote stores)."""
        return True
