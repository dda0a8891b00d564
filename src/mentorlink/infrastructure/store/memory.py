"""
In-Memory Session Store

Process-local SessionStore backed by dictionaries.
Used for local demos (MENTORLINK_STORE_BACKEND=memory) and tests.

Returned entities are copies, so callers observe the same
snapshot semantics as with a database round trip.
"""

import asyncio
from copy import deepcopy
from datetime import datetime
from typing import Iterable, Optional, Sequence

from mentorlink.domain.enums import SessionPriority, SessionStatus
from mentorlink.domain.models import (
    EscalationEvent,
    Message,
    MentorProfile,
    MentorSession,
    SessionParticipants,
    StudentProfile,
)
from mentorlink.infrastructure.store.base import SessionStore


class InMemorySessionStore(SessionStore):
    """Dictionary-backed store. Yields to the loop on every call like real I/O."""

    def __init__(self) -> None:
        self._students: dict[str, StudentProfile] = {}
        self._mentors: dict[str, MentorProfile] = {}
        self._sessions: dict[str, MentorSession] = {}
        self._messages: list[Message] = []
        self._escalations: list[EscalationEvent] = []

    async def _io(self) -> None:
        await asyncio.sleep(0)

    # Profiles

    async def create_student(self, profile: StudentProfile) -> StudentProfile:
        await self._io()
        self._students[profile.id] = deepcopy(profile)
        return deepcopy(profile)

    async def create_mentor(self, profile: MentorProfile) -> MentorProfile:
        await self._io()
        self._mentors[profile.id] = deepcopy(profile)
        return deepcopy(profile)

    async def get_student(self, student_id: str) -> Optional[StudentProfile]:
        await self._io()
        return deepcopy(self._students.get(student_id))

    async def get_mentor(self, mentor_id: str) -> Optional[MentorProfile]:
        await self._io()
        return deepcopy(self._mentors.get(mentor_id))

    async def get_student_by_user(self, user_id: str) -> Optional[StudentProfile]:
        await self._io()
        for profile in self._students.values():
            if profile.user_id == user_id:
                return deepcopy(profile)
        return None

    async def get_mentor_by_user(self, user_id: str) -> Optional[MentorProfile]:
        await self._io()
        for profile in self._mentors.values():
            if profile.user_id == user_id:
                return deepcopy(profile)
        return None

    async def list_available_mentors(
        self,
        *,
        specialization: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[MentorProfile]:
        await self._io()
        matches = [
            m for m in self._mentors.values()
            if m.is_available
            and (specialization is None or specialization in m.specialization)
        ]
        matches.sort(key=lambda m: (m.name, m.id))
        return [deepcopy(m) for m in matches[offset:offset + limit]]

    # Sessions

    async def create_session(self, session: MentorSession) -> MentorSession:
        await self._io()
        self._sessions[session.id] = deepcopy(session)
        return deepcopy(session)

    async def get_session(self, session_id: str) -> Optional[MentorSession]:
        await self._io()
        return deepcopy(self._sessions.get(session_id))

    async def get_participants(self, session_id: str) -> Optional[SessionParticipants]:
        await self._io()
        session = self._sessions.get(session_id)
        if session is None:
            return None
        return SessionParticipants(
            session=deepcopy(session),
            student=deepcopy(self._students.get(session.student_id)),
            mentor=deepcopy(self._mentors.get(session.mentor_id)),
        )

    async def complete_session(
        self,
        session: MentorSession,
        expected_status: SessionStatus,
    ) -> Optional[MentorSession]:
        await self._io()
        stored = self._sessions.get(session.id)
        if stored is None or stored.status != expected_status:
            return None
        stored.status = session.status
        stored.summary = session.summary
        stored.outcome = session.outcome
        stored.mentor_notes = session.mentor_notes
        stored.ended_at = session.ended_at
        stored.duration_minutes = session.duration_minutes
        stored.updated_at = session.updated_at
        return deepcopy(stored)

    async def rate_session(
        self,
        session_id: str,
        rating: int,
        feedback: Optional[str],
    ) -> Optional[MentorSession]:
        await self._io()
        stored = self._sessions.get(session_id)
        if stored is None or stored.status != SessionStatus.COMPLETED or stored.rating is not None:
            return None
        stored.rating = rating
        stored.feedback = feedback
        return deepcopy(stored)

    async def list_sessions(
        self,
        *,
        student_id: Optional[str] = None,
        mentor_id: Optional[str] = None,
        status: Optional[SessionStatus] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[MentorSession]:
        await self._io()
        matches = [
            s for s in self._sessions.values()
            if (student_id is None or s.student_id == student_id)
            and (mentor_id is None or s.mentor_id == mentor_id)
            and (status is None or s.status == status)
        ]
        matches.sort(key=lambda s: s.updated_at, reverse=True)
        return [deepcopy(s) for s in matches[offset:offset + limit]]

    async def session_ids_for(
        self,
        *,
        student_ids: Iterable[str] = (),
        mentor_ids: Iterable[str] = (),
    ) -> list[str]:
        await self._io()
        students, mentors = set(student_ids), set(mentor_ids)
        return [
            s.id for s in self._sessions.values()
            if s.student_id in students or s.mentor_id in mentors
        ]

    async def touch_session(self, session_id: str, at: datetime) -> None:
        await self._io()
        session = self._sessions.get(session_id)
        if session is not None:
            session.touch(at)

    async def escalate_session(self, session_id: str, at: datetime) -> None:
        await self._io()
        session = self._sessions.get(session_id)
        if session is not None:
            session.status = SessionStatus.ESCALATED
            session.priority = SessionPriority.URGENT
            session.touch(at)

    # Messages

    async def create_message(self, message: Message) -> Message:
        await self._io()
        self._messages.append(deepcopy(message))
        return deepcopy(message)

    async def list_messages(
        self,
        session_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> Sequence[Message]:
        await self._io()
        # Stable sort keeps insertion order for identical timestamps
        ordered = sorted(
            (m for m in self._messages if m.session_id == session_id),
            key=lambda m: m.sent_at,
        )
        return [deepcopy(m) for m in ordered[offset:offset + limit]]

    async def mark_read(self, session_id: str, reader_id: str, at: datetime) -> int:
        await self._io()
        marked = 0
        for message in self._messages:
            if (
                message.session_id == session_id
                and message.sender_id != reader_id
                and message.read_at is None
            ):
                message.read_at = at
                marked += 1
        return marked

    async def count_unread(
        self,
        session_ids: Sequence[str],
        exclude_sender_ids: Iterable[str],
    ) -> int:
        await self._io()
        sessions, excluded = set(session_ids), set(exclude_sender_ids)
        return sum(
            1 for m in self._messages
            if m.session_id in sessions
            and m.sender_id not in excluded
            and m.read_at is None
        )

    # Escalations

    async def create_escalation(self, event: EscalationEvent) -> EscalationEvent:
        await self._io()
        self._escalations.append(deepcopy(event))
        return deepcopy(event)

    async def list_escalations(self, session_id: str) -> Sequence[EscalationEvent]:
        await self._io()
        return [deepcopy(e) for e in self._escalations if e.session_id == session_id]
