"""
Unit Tests - Session Store Backends

The same behaviour is checked against the in-memory store and the
SQLAlchemy store on aiosqlite.
"""

from datetime import timedelta

import pytest

from mentorlink.domain.enums import (
    EscalationSeverity,
    EscalationType,
    SenderType,
    SessionPriority,
    SessionStatus,
    VerificationStatus,
)
from mentorlink.domain.models import (
    Attachment,
    EscalationEvent,
    Message,
    MentorProfile,
    MentorSession,
    StudentProfile,
)
from mentorlink.domain.models.base import utc_now
from mentorlink.infrastructure.database import DatabaseManager
from mentorlink.infrastructure.store import InMemorySessionStore, SqlAlchemySessionStore


@pytest.fixture(params=["memory", "sql"])
async def backend(request):
    if request.param == "memory":
        yield InMemorySessionStore()
        return

    db = DatabaseManager(url="sqlite+aiosqlite:///:memory:")
    await db.initialize()
    await db.create_schema()
    yield SqlAlchemySessionStore(db)
    await db.close()


@pytest.fixture
async def pair(backend):
    student = await backend.create_student(
        StudentProfile(user_id="u-student", display_name="Riya", concern_areas=["exams"])
    )
    mentor = await backend.create_mentor(
        MentorProfile(
            user_id="u-mentor",
            name="Dr. Mehta",
            email="mehta@example.org",
            verification_status=VerificationStatus.VERIFIED,
        )
    )
    session = await backend.create_session(MentorSession(student_id=student.id, mentor_id=mentor.id))
    return student, mentor, session


def _message(session, sender_id, sender_type, content, sent_at):
    return Message(
        session_id=session.id,
        sender_id=sender_id,
        sender_type=sender_type,
        content=content,
        sent_at=sent_at,
    )


class TestProfiles:
    async def test_lookup_by_id_and_user(self, backend, pair):
        student, mentor, _ = pair

        assert (await backend.get_student(student.id)).concern_areas == ["exams"]
        assert (await backend.get_student_by_user("u-student")).id == student.id
        assert (await backend.get_mentor_by_user("u-mentor")).id == mentor.id
        assert (await backend.get_mentor(mentor.id)).is_available
        assert await backend.get_student_by_user("nobody") is None
        assert await backend.get_mentor("missing") is None

    async def test_available_mentors(self, backend, pair):
        _, mentor, _ = pair
        await backend.create_mentor(
            MentorProfile(
                name="Avery",
                email="avery@example.org",
                specialization=["anxiety", "exams"],
                verification_status=VerificationStatus.VERIFIED,
            )
        )
        await backend.create_mentor(
            MentorProfile(name="Pending", email="pending@example.org", specialization=["anxiety"])
        )
        await backend.create_mentor(
            MentorProfile(
                name="Retired",
                email="retired@example.org",
                specialization=["anxiety"],
                verification_status=VerificationStatus.VERIFIED,
                is_active=False,
            )
        )

        listed = await backend.list_available_mentors()
        assert [m.name for m in listed] == ["Avery", "Dr. Mehta"]

        anxiety = await backend.list_available_mentors(specialization="anxiety")
        assert [m.name for m in anxiety] == ["Avery"]
        assert await backend.list_available_mentors(specialization="anx") == []

        second_page = await backend.list_available_mentors(offset=1, limit=1)
        assert [m.id for m in second_page] == [mentor.id]


class TestSessions:
    async def test_participants(self, backend, pair):
        student, mentor, session = pair

        participants = await backend.get_participants(session.id)

        assert participants.session.id == session.id
        assert participants.student.id == student.id
        assert participants.mentor.name == "Dr. Mehta"
        assert await backend.get_participants("missing") is None

    async def test_touch_keeps_status(self, backend, pair):
        _, _, session = pair
        later = utc_now() + timedelta(minutes=1)

        await backend.touch_session(session.id, later)

        stored = await backend.get_session(session.id)
        assert stored.updated_at == later
        assert stored.status == SessionStatus.ACTIVE

    async def test_escalate_sets_status_and_priority(self, backend, pair):
        _, _, session = pair

        await backend.escalate_session(session.id, utc_now())
        await backend.touch_session(session.id, utc_now())

        stored = await backend.get_session(session.id)
        assert stored.status == SessionStatus.ESCALATED
        assert stored.priority == SessionPriority.URGENT

    async def test_complete_session_writes_completion(self, backend, pair):
        _, _, session = pair
        session.complete(summary="done")

        stored = await backend.complete_session(session, SessionStatus.ACTIVE)

        assert stored.status == SessionStatus.COMPLETED
        assert stored.summary == "done"
        assert stored.duration_minutes is not None
        assert (await backend.get_session(session.id)).status == SessionStatus.COMPLETED

    async def test_complete_session_refuses_changed_status(self, backend, pair):
        _, _, session = pair
        await backend.escalate_session(session.id, utc_now())
        session.complete(summary="done")

        assert await backend.complete_session(session, SessionStatus.ACTIVE) is None

        stored = await backend.get_session(session.id)
        assert stored.status == SessionStatus.ESCALATED
        assert stored.priority == SessionPriority.URGENT
        assert stored.summary is None

    async def test_complete_session_never_writes_priority(self, backend, pair):
        _, _, session = pair
        await backend.escalate_session(session.id, utc_now())
        snapshot = await backend.get_session(session.id)
        snapshot.priority = SessionPriority.NORMAL
        snapshot.complete()

        stored = await backend.complete_session(snapshot, SessionStatus.ESCALATED)

        assert stored.status == SessionStatus.COMPLETED
        assert stored.priority == SessionPriority.URGENT

    async def test_rate_session_only_once_and_only_completed(self, backend, pair):
        _, _, session = pair
        assert await backend.rate_session(session.id, 5, None) is None

        session.complete()
        await backend.complete_session(session, SessionStatus.ACTIVE)
        rated = await backend.rate_session(session.id, 4, "helpful")

        assert rated.rating == 4
        assert rated.feedback == "helpful"
        assert rated.status == SessionStatus.COMPLETED
        assert await backend.rate_session(session.id, 1, None) is None
        assert (await backend.get_session(session.id)).rating == 4

    async def test_rate_session_leaves_escalation(self, backend, pair):
        _, _, session = pair
        session.complete()
        await backend.complete_session(session, SessionStatus.ACTIVE)
        await backend.escalate_session(session.id, utc_now())

        assert await backend.rate_session(session.id, 5, None) is None
        assert (await backend.get_session(session.id)).status == SessionStatus.ESCALATED

    async def test_list_and_ids(self, backend, pair):
        student, mentor, session = pair
        newer = await backend.create_session(
            MentorSession(student_id=student.id, mentor_id=mentor.id, updated_at=utc_now() + timedelta(seconds=5))
        )

        listed = await backend.list_sessions(mentor_id=mentor.id)
        assert [s.id for s in listed] == [newer.id, session.id]

        active = await backend.list_sessions(student_id=student.id, status=SessionStatus.ACTIVE, limit=1)
        assert len(active) == 1

        ids = await backend.session_ids_for(student_ids=[student.id])
        assert sorted(ids) == sorted([session.id, newer.id])
        assert await backend.session_ids_for() == []


class TestMessages:
    async def test_listing_is_in_sent_order(self, backend, pair):
        student, mentor, session = pair
        base = utc_now()
        await backend.create_message(_message(session, mentor.id, SenderType.MENTOR, "second", base + timedelta(seconds=1)))
        await backend.create_message(_message(session, student.id, SenderType.STUDENT, "first", base))

        listed = await backend.list_messages(session.id)

        assert [m.content for m in listed] == ["first", "second"]
        assert [m.content for m in await backend.list_messages(session.id, offset=1, limit=1)] == ["second"]

    async def test_attachments_round_trip(self, backend, pair):
        student, _, session = pair
        message = _message(session, student.id, SenderType.STUDENT, None, utc_now())
        message.attachments = [Attachment(type="file", url="https://x/notes.pdf", name="notes.pdf", size=10)]

        await backend.create_message(message)

        stored = (await backend.list_messages(session.id))[0]
        assert stored.attachments[0].name == "notes.pdf"
        assert stored.is_encrypted

    async def test_mark_read_and_unread_counts(self, backend, pair):
        student, mentor, session = pair
        now = utc_now()
        await backend.create_message(_message(session, student.id, SenderType.STUDENT, "a", now))
        await backend.create_message(_message(session, student.id, SenderType.STUDENT, "b", now + timedelta(seconds=1)))
        await backend.create_message(_message(session, mentor.id, SenderType.MENTOR, "c", now + timedelta(seconds=2)))

        assert await backend.count_unread([session.id], [mentor.id]) == 2
        assert await backend.count_unread([session.id], [student.id]) == 1
        assert await backend.count_unread([], [mentor.id]) == 0

        assert await backend.mark_read(session.id, mentor.id, utc_now()) == 2
        assert await backend.mark_read(session.id, mentor.id, utc_now()) == 0
        assert await backend.count_unread([session.id], [mentor.id]) == 0
        assert await backend.count_unread([session.id], [student.id]) == 1


class TestEscalations:
    async def test_append_and_list(self, backend, pair):
        student, mentor, session = pair
        event = await backend.create_escalation(
            EscalationEvent(
                session_id=session.id,
                student_id=student.id,
                mentor_id=mentor.id,
                escalation_type=EscalationType.SELF_HARM,
                severity=EscalationSeverity.CRITICAL,
                trigger_keywords=["hurt myself"],
            )
        )

        events = await backend.list_escalations(session.id)

        assert [e.id for e in events] == [event.id]
        assert events[0].trigger_keywords == ["hurt myself"]
        assert events[0].escalation_type == EscalationType.SELF_HARM
        assert await backend.list_escalations("missing") == []
