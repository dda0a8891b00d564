"""
Session Repository

Data access for mentor sessions.

SAFETY_NOTE: Every write here is column-targeted. `touch` only writes
updated_at, `complete` is a compare-and-set on the status it was read
with and never writes priority, and `rate` only writes rating and
feedback. None of them can revert a concurrent escalation.
"""

from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mentorlink.domain.enums import (
    SessionOutcome,
    SessionPriority,
    SessionStatus,
    SessionType,
)
from mentorlink.domain.models import MentorSession
from mentorlink.domain.models.base import as_utc
from mentorlink.infrastructure.database.models.session_model import MentorSessionModel
from mentorlink.infrastructure.database.repositories.base import BaseRepository


def session_to_domain(row: MentorSessionModel) -> MentorSession:
    return MentorSession(
        id=row.id,
        student_id=row.student_id,
        mentor_id=row.mentor_id,
        category_id=row.category_id,
        session_type=SessionType(row.session_type),
        status=SessionStatus(row.status),
        priority=SessionPriority(row.priority),
        session_title=row.session_title,
        initial_concern=row.initial_concern,
        mentor_notes=row.mentor_notes,
        summary=row.summary,
        outcome=SessionOutcome(row.outcome) if row.outcome else None,
        rating=row.rating,
        feedback=row.feedback,
        duration_minutes=row.duration,
        started_at=as_utc(row.started_at),
        ended_at=as_utc(row.ended_at),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def session_to_row(session: MentorSession) -> MentorSessionModel:
    return MentorSessionModel(
        id=session.id,
        student_id=session.student_id,
        mentor_id=session.mentor_id,
        category_id=session.category_id,
        session_type=session.session_type.value,
        status=session.status.value,
        priority=session.priority.value,
        session_title=session.session_title,
        initial_concern=session.initial_concern,
        mentor_notes=session.mentor_notes,
        summary=session.summary,
        outcome=session.outcome.value if session.outcome else None,
        rating=session.rating,
        feedback=session.feedback,
        duration=session.duration_minutes,
        started_at=session.started_at,
        ended_at=session.ended_at,
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


class SessionRepository(BaseRepository[MentorSessionModel]):
    """Repository for mentor sessions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(MentorSessionModel, session)

    async def list_for(
        self,
        *,
        student_id: Optional[str] = None,
        mentor_id: Optional[str] = None,
        status: Optional[SessionStatus] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[MentorSessionModel]:
        """
        Sessions filtered by participant and status.

        Returns:
            Rows ordered by updated_at, newest first
        """
        query = select(MentorSessionModel)
        if student_id is not None:
            query = query.where(MentorSessionModel.student_id == student_id)
        if mentor_id is not None:
            query = query.where(MentorSessionModel.mentor_id == mentor_id)
        if status is not None:
            query = query.where(MentorSessionModel.status == status.value)
        result = await self._session.execute(
            query.order_by(MentorSessionModel.updated_at.desc()).offset(offset).limit(limit)
        )
        return result.scalars().all()

    async def ids_for(
        self,
        student_ids: Iterable[str],
        mentor_ids: Iterable[str],
    ) -> list[str]:
        students, mentors = list(student_ids), list(mentor_ids)
        clauses = []
        if students:
            clauses.append(MentorSessionModel.student_id.in_(students))
        if mentors:
            clauses.append(MentorSessionModel.mentor_id.in_(mentors))
        if not clauses:
            return []
        result = await self._session.execute(
            select(MentorSessionModel.id).where(or_(*clauses))
        )
        return list(result.scalars().all())

    async def touch(self, session_id: str, at: datetime) -> None:
        await self._session.execute(
            update(MentorSessionModel)
            .where(MentorSessionModel.id == session_id)
            .values(updated_at=at)
            .execution_options(synchronize_session=False)
        )

    async def escalate(self, session_id: str, at: datetime) -> None:
        await self._session.execute(
            update(MentorSessionModel)
            .where(MentorSessionModel.id == session_id)
            .values(
                status=SessionStatus.ESCALATED.value,
                priority=SessionPriority.URGENT.value,
                updated_at=at,
            )
            .execution_options(synchronize_session=False)
        )

    async def complete(self, session: MentorSession, expected_status: SessionStatus) -> bool:
        """
        Write completion fields if the row still has `expected_status`.

        Returns:
            False when the status changed since it was read
        """
        result = await self._session.execute(
            update(MentorSessionModel)
            .where(
                MentorSessionModel.id == session.id,
                MentorSessionModel.status == expected_status.value,
            )
            .values(
                status=session.status.value,
                summary=session.summary,
                outcome=session.outcome.value if session.outcome else None,
                mentor_notes=session.mentor_notes,
                ended_at=session.ended_at,
                duration=session.duration_minutes,
                updated_at=session.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def rate(self, session_id: str, rating: int, feedback: Optional[str]) -> bool:
        result = await self._session.execute(
            update(MentorSessionModel)
            .where(
                MentorSessionModel.id == session_id,
                MentorSessionModel.status == SessionStatus.COMPLETED.value,
                MentorSessionModel.rating.is_(None),
            )
            .values(rating=rating, feedback=feedback)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
