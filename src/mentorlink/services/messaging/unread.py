"""
Unread Aggregator

Counts a principal's unread messages across every session they
participate in.

Consistent with the fetch path: mark-read stamps every message not
sent by the reader's profile, and this count excludes messages sent
by any of the principal's own profiles.
"""

from dataclasses import dataclass

from mentorlink.domain.models import Principal
from mentorlink.infrastructure.store import SessionStore


@dataclass
class UnreadSummary:
    count: int = 0
    session_count: int = 0

    def to_dict(self) -> dict:
        return {"unreadCount": self.count, "sessions": self.session_count}


class UnreadAggregator:
    def __init__(self, store: SessionStore) -> None:
        self._store = store

    async def unread_count(self, principal: Principal) -> UnreadSummary:
        """
        Unread messages addressed to the principal.

        An authenticated user may hold both a student and a mentor
        profile; both are included. Unknown principals count zero.
        """
        student_ids: list[str] = []
        mentor_ids: list[str] = []

        if principal.is_authenticated:
            student = await self._store.get_student_by_user(principal.user_id)
            mentor = await self._store.get_mentor_by_user(principal.user_id)
            if student is not None:
                student_ids.append(student.id)
            if mentor is not None:
                mentor_ids.append(mentor.id)
        else:
            student = await self._store.get_student(principal.anonymous_student_id)
            if student is not None and student.is_anonymous:
                student_ids.append(student.id)

        if not student_ids and not mentor_ids:
            return UnreadSummary()

        session_ids = await self._store.session_ids_for(
            student_ids=student_ids,
            mentor_ids=mentor_ids,
        )
        if not session_ids:
            return UnreadSummary()

        count = await self._store.count_unread(session_ids, student_ids + mentor_ids)
        return UnreadSummary(count=count, session_count=len(session_ids))
