"""
SQLAlchemy Session Store

SessionStore backed by PostgreSQL (asyncpg) or SQLite (aiosqlite).
Each public method opens its own database session, so every call
commits independently.
"""

from datetime import datetime
from typing import Iterable, Optional, Sequence

from mentorlink.config.logging_config import get_logger
from mentorlink.domain.enums import SessionStatus
from mentorlink.domain.models import (
    EscalationEvent,
    Message,
    MentorProfile,
    MentorSession,
    SessionParticipants,
    StudentProfile,
)
from mentorlink.infrastructure.database.connection import DatabaseManager
from mentorlink.infrastructure.database.repositories import (
    EscalationRepository,
    MentorProfileRepository,
    MessageRepository,
    SessionRepository,
    StudentProfileRepository,
)
from mentorlink.infrastructure.database.repositories.escalation_repository import (
    escalation_to_domain,
    escalation_to_row,
)
from mentorlink.infrastructure.database.repositories.message_repository import (
    message_to_domain,
    message_to_row,
)
from mentorlink.infrastructure.database.repositories.profile_repository import (
    mentor_to_domain,
    mentor_to_row,
    student_to_domain,
    student_to_row,
)
from mentorlink.infrastructure.database.repositories.session_repository import (
    session_to_domain,
    session_to_row,
)
from mentorlink.infrastructure.store.base import SessionStore

logger = get_logger(__name__)


class SqlAlchemySessionStore(SessionStore):
    """
    Durable store over an initialized DatabaseManager.

    Usage:
        db = DatabaseManager()
        await db.initialize()
        store = SqlAlchemySessionStore(db)
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    # Profiles

    async def create_student(self, profile: StudentProfile) -> StudentProfile:
        async with self._db.session() as session:
            row = await StudentProfileRepository(session).add(student_to_row(profile))
            return student_to_domain(row)

    async def create_mentor(self, profile: MentorProfile) -> MentorProfile:
        async with self._db.session() as session:
            row = await MentorProfileRepository(session).add(mentor_to_row(profile))
            return mentor_to_domain(row)

    async def get_student(self, student_id: str) -> Optional[StudentProfile]:
        async with self._db.session() as session:
            row = await StudentProfileRepository(session).get_by_id(student_id)
            return student_to_domain(row) if row else None

    async def get_mentor(self, mentor_id: str) -> Optional[MentorProfile]:
        async with self._db.session() as session:
            row = await MentorProfileRepository(session).get_by_id(mentor_id)
            return mentor_to_domain(row) if row else None

    async def get_student_by_user(self, user_id: str) -> Optional[StudentProfile]:
        async with self._db.session() as session:
            row = await StudentProfileRepository(session).get_by_user(user_id)
            return student_to_domain(row) if row else None

    async def get_mentor_by_user(self, user_id: str) -> Optional[MentorProfile]:
        async with self._db.session() as session:
            row = await MentorProfileRepository(session).get_by_user(user_id)
            return mentor_to_domain(row) if row else None

    async def list_available_mentors(
        self,
        *,
        specialization: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[MentorProfile]:
        async with self._db.session() as session:
            rows = await MentorProfileRepository(session).list_available(
                specialization=specialization, offset=offset, limit=limit
            )
            return [mentor_to_domain(row) for row in rows]

    # Sessions

    async def create_session(self, session: MentorSession) -> MentorSession:
        async with self._db.session() as db_session:
            row = await SessionRepository(db_session).add(session_to_row(session))
            return session_to_domain(row)

    async def get_session(self, session_id: str) -> Optional[MentorSession]:
        async with self._db.session() as db_session:
            row = await SessionRepository(db_session).get_by_id(session_id)
            return session_to_domain(row) if row else None

    async def get_participants(self, session_id: str) -> Optional[SessionParticipants]:
        async with self._db.session() as db_session:
            row = await SessionRepository(db_session).get_by_id(session_id)
            if row is None:
                return None
            student = await StudentProfileRepository(db_session).get_by_id(row.student_id)
            mentor = await MentorProfileRepository(db_session).get_by_id(row.mentor_id)
            return SessionParticipants(
                session=session_to_domain(row),
                student=student_to_domain(student) if student else None,
                mentor=mentor_to_domain(mentor) if mentor else None,
            )

    async def complete_session(
        self,
        session: MentorSession,
        expected_status: SessionStatus,
    ) -> Optional[MentorSession]:
        async with self._db.session() as db_session:
            repository = SessionRepository(db_session)
            if not await repository.complete(session, expected_status):
                return None
            row = await repository.get_by_id(session.id)
            return session_to_domain(row)

    async def rate_session(
        self,
        session_id: str,
        rating: int,
        feedback: Optional[str],
    ) -> Optional[MentorSession]:
        async with self._db.session() as db_session:
            repository = SessionRepository(db_session)
            if not await repository.rate(session_id, rating, feedback):
                return None
            row = await repository.get_by_id(session_id)
            return session_to_domain(row)

    async def list_sessions(
        self,
        *,
        student_id: Optional[str] = None,
        mentor_id: Optional[str] = None,
        status: Optional[SessionStatus] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[MentorSession]:
        async with self._db.session() as db_session:
            rows = await SessionRepository(db_session).list_for(
                student_id=student_id,
                mentor_id=mentor_id,
                status=status,
                offset=offset,
                limit=limit,
            )
            return [session_to_domain(row) for row in rows]

    async def session_ids_for(
        self,
        *,
        student_ids: Iterable[str] = (),
        mentor_ids: Iterable[str] = (),
    ) -> list[str]:
        async with self._db.session() as db_session:
            return await SessionRepository(db_session).ids_for(student_ids, mentor_ids)

    async def touch_session(self, session_id: str, at: datetime) -> None:
        async with self._db.session() as db_session:
            await SessionRepository(db_session).touch(session_id, at)

    async def escalate_session(self, session_id: str, at: datetime) -> None:
        async with self._db.session() as db_session:
            await SessionRepository(db_session).escalate(session_id, at)
        logger.info("Session escalated in store", session_id=session_id)

    # Messages

    async def create_message(self, message: Message) -> Message:
        async with self._db.session() as db_session:
            row = await MessageRepository(db_session).add(message_to_row(message))
            return message_to_domain(row)

    async def list_messages(
        self,
        session_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> Sequence[Message]:
        async with self._db.session() as db_session:
            rows = await MessageRepository(db_session).list_for_session(
                session_id, offset=offset, limit=limit
            )
            return [message_to_domain(row) for row in rows]

    async def mark_read(self, session_id: str, reader_id: str, at: datetime) -> int:
        async with self._db.session() as db_session:
            return await MessageRepository(db_session).mark_read(session_id, reader_id, at)

    async def count_unread(
        self,
        session_ids: Sequence[str],
        exclude_sender_ids: Iterable[str],
    ) -> int:
        async with self._db.session() as db_session:
            return await MessageRepository(db_session).count_unread(
                session_ids, exclude_sender_ids
            )

    # Escalations

    async def create_escalation(self, event: EscalationEvent) -> EscalationEvent:
        async with self._db.session() as db_session:
            row = await EscalationRepository(db_session).add(escalation_to_row(event))
            return escalation_to_domain(row)

    async def list_escalations(self, session_id: str) -> Sequence[EscalationEvent]:
        async with self._db.session() as db_session:
            rows = await EscalationRepository(db_session).list_for_session(session_id)
            return [escalation_to_domain(row) for row in rows]

    async def health_check(self) -> bool:
        return await self._db.health_check()
