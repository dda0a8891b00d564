"""
Unit Tests - Unread Aggregator
"""

from mentorlink.domain.enums import SenderType
from mentorlink.domain.models import Message, MentorSession, Principal, StudentProfile


class TestUnreadAggregator:
    """Tests for unread counts across a principal's sessions."""

    async def test_each_incoming_message_counts_once(self, container, seed):
        before = await container.unread.unread_count(seed.mentor_principal)

        await container.messages.send(seed.session.id, seed.student_principal, "Hello")
        after = await container.unread.unread_count(seed.mentor_principal)

        assert after.count == before.count + 1

    async def test_own_messages_never_count(self, container, seed):
        await container.messages.send(seed.session.id, seed.mentor_principal, "Hi there")

        summary = await container.unread.unread_count(seed.mentor_principal)
        assert summary.count == 0

    async def test_fetch_clears_unread(self, container, seed):
        await container.messages.send(seed.session.id, seed.student_principal, "a")
        await container.messages.send(seed.session.id, seed.student_principal, "b")

        await container.messages.fetch_messages(seed.session.id, seed.mentor_principal)

        assert (await container.unread.unread_count(seed.mentor_principal)).count == 0

    async def test_counts_span_all_sessions(self, container, seed):
        await container.messages.send(seed.session.id, seed.student_principal, "a")
        await container.messages.send(seed.anonymous_session.id, seed.anonymous_principal, "b")

        summary = await container.unread.unread_count(seed.mentor_principal)

        assert summary.count == 2
        assert summary.to_dict() == {"unreadCount": 2, "sessions": 2}

    async def test_anonymous_student_counts_mentor_replies(self, container, seed):
        await container.messages.send(seed.anonymous_session.id, seed.mentor_principal, "Welcome")

        summary = await container.unread.unread_count(seed.anonymous_principal)
        assert summary.count == 1

    async def test_non_anonymous_profile_id_counts_zero(self, container, seed):
        await container.messages.send(seed.session.id, seed.mentor_principal, "Welcome")

        summary = await container.unread.unread_count(Principal.anonymous(seed.student.id))
        assert summary.count == 0

    async def test_unknown_principal_counts_zero(self, container, seed):
        summary = await container.unread.unread_count(seed.outsider_principal)
        assert summary.to_dict() == {"unreadCount": 0, "sessions": 0}

    async def test_user_with_both_profiles_sums_both_sides(self, container, store, seed):
        # The mentor's account also studies with another mentor
        own_student = await store.create_student(
            StudentProfile(user_id=seed.mentor.user_id, display_name="Mehta")
        )
        other_session = await store.create_session(
            MentorSession(student_id=own_student.id, mentor_id=seed.other_mentor.id)
        )
        await container.messages.send(seed.session.id, seed.student_principal, "to mentor")
        await store.create_message(
            _mentor_reply(other_session.id, seed.other_mentor.id)
        )

        summary = await container.unread.unread_count(seed.mentor_principal)
        assert summary.count == 2


def _mentor_reply(session_id: str, mentor_id: str) -> Message:
    return Message(session_id=session_id, sender_id=mentor_id, sender_type=SenderType.MENTOR, content="hi")
