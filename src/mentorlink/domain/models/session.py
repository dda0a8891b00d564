"""
Mentor Session Domain Model

One bounded conversation between exactly one student and one mentor.

Lifecycle:
    active -> completed | terminated   (terminal, human action)
    any    -> escalated                (crisis detection, sticky)

SAFETY_NOTE: Message traffic only bumps updated_at. It never
changes status, so an escalated session cannot drift back to
active by itself.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from mentorlink.domain.enums import (
    SenderType,
    SessionOutcome,
    SessionPriority,
    SessionStatus,
    SessionType,
)
from mentorlink.domain.errors import SessionStateError
from mentorlink.domain.models.base import as_utc, iso, new_id, utc_now
from mentorlink.domain.models.profiles import MentorProfile, StudentProfile


@dataclass
class MentorSession:
    """
    Mentor-student session entity.

    Attributes:
        id: Unique session identifier
        student_id: Student profile id
        mentor_id: Mentor profile id
        category_id: Optional guidance category
        session_type: chat / voice_call / video_call
        status: Lifecycle status
        priority: Triage priority (urgent once escalated)
        updated_at: Freshness timestamp, bumped on every message
        rating: Student rating, set once after completion
    """

    student_id: str
    mentor_id: str
    id: str = field(default_factory=new_id)
    category_id: Optional[str] = None
    session_type: SessionType = SessionType.CHAT
    status: SessionStatus = SessionStatus.ACTIVE
    priority: SessionPriority = SessionPriority.NORMAL
    session_title: Optional[str] = None
    initial_concern: Optional[str] = None
    mentor_notes: Optional[str] = None
    summary: Optional[str] = None
    outcome: Optional[SessionOutcome] = None
    rating: Optional[int] = None
    feedback: Optional[str] = None
    duration_minutes: Optional[int] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def is_escalated(self) -> bool:
        return self.status == SessionStatus.ESCALATED

    def touch(self, at: Optional[datetime] = None) -> None:
        """Bump freshness only."""
        self.updated_at = at or utc_now()

    def escalate(self, at: Optional[datetime] = None) -> None:
        """Flag for urgent attention. Idempotent."""
        self.status = SessionStatus.ESCALATED
        self.priority = SessionPriority.URGENT
        self.touch(at)

    def complete(
        self,
        summary: Optional[str] = None,
        outcome: Optional[SessionOutcome] = None,
        mentor_notes: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> None:
        """
        Close the session normally.

        Raises:
            SessionStateError: If the session is already closed
        """
        if self.status.is_terminal:
            raise SessionStateError(f"Session is already {self.status.value}")

        ended = at or utc_now()
        began = as_utc(self.started_at) or as_utc(self.created_at)
        self.status = SessionStatus.COMPLETED
        self.summary = summary
        self.outcome = outcome
        self.mentor_notes = mentor_notes
        self.ended_at = ended
        self.duration_minutes = max(0, round((ended - began).total_seconds() / 60))
        self.touch(ended)

    def rate(self, rating: int, feedback: Optional[str] = None) -> None:
        """
        Record the student's rating.

        Raises:
            SessionStateError: If not completed or already rated
        """
        if self.status != SessionStatus.COMPLETED:
            raise SessionStateError("Only completed sessions can be rated")
        if self.rating is not None:
            raise SessionStateError("Session has already been rated")
        if not 1 <= rating <= 5:
            raise SessionStateError("Rating must be between 1 and 5")
        self.rating = rating
        self.feedback = feedback

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "studentId": self.student_id,
            "mentorId": self.mentor_id,
            "categoryId": self.category_id,
            "sessionType": self.session_type.value,
            "status": self.status.value,
            "priority": self.priority.value,
            "sessionTitle": self.session_title,
            "summary": self.summary,
            "outcome": self.outcome.value if self.outcome else None,
            "rating": self.rating,
            "duration": self.duration_minutes,
            "startedAt": iso(self.started_at),
            "endedAt": iso(self.ended_at),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


@dataclass
class SessionParticipants:
    """
    A session joined with both participant profiles.

    Either profile may be missing if the referenced row was removed;
    the access gate then simply cannot match that side.
    """

    session: MentorSession
    student: Optional[StudentProfile] = None
    mentor: Optional[MentorProfile] = None

    def display_name_for(self, role: SenderType) -> str:
        if role == SenderType.STUDENT:
            return self.student.public_name if self.student else "Student"
        return self.mentor.public_name if self.mentor else "Mentor"

    def to_dict(self) -> dict:
        return {
            "session": self.session.to_dict(),
            "student": self.student.to_dict() if self.student else None,
            "mentor": self.mentor.to_dict() if self.mentor else None,
        }
