"""
Unit Tests - Message Service

Tests the send path (gate, validation, persist, fan-out, detection)
and the fetch path (ordering and mark-read).
"""

import pytest

from mentorlink.domain.enums import SenderType, SessionStatus
from mentorlink.domain.errors import (
    AccessDeniedError,
    MessageValidationError,
    SessionNotFoundError,
)
from mentorlink.services.messaging import MessageService
from mentorlink.services.safety import EmergencyDetector, EmergencyScan


class ExplodingDetector(EmergencyDetector):
    def scan(self, content):
        raise RuntimeError("detector offline")


class TestSend:
    """Tests for message ingestion and fan-out."""

    async def test_send_persists_with_resolved_sender(self, container, store, seed):
        message = await container.messages.send(seed.session.id, seed.student_principal, "Hello")

        assert message.sender_id == seed.student.id
        assert message.sender_type == SenderType.STUDENT
        stored = await store.list_messages(seed.session.id)
        assert [m.id for m in stored] == [message.id]

    async def test_forged_sender_fields_are_ignored(self, container, store, seed):
        message = await container.messages.send_payload(
            seed.mentor_principal,
            {
                "sessionId": seed.session.id,
                "content": "How are you feeling?",
                "senderId": seed.student.id,
                "senderType": "student",
            },
        )

        assert message.sender_type == SenderType.MENTOR
        assert message.sender_id == seed.mentor.id

    async def test_send_bumps_session_freshness(self, container, store, seed):
        message = await container.messages.send(seed.session.id, seed.student_principal, "Hello")

        session = await store.get_session(seed.session.id)
        assert session.updated_at == message.sent_at
        assert session.status == SessionStatus.ACTIVE

    async def test_broadcast_reaches_all_members_including_sender(self, container, seed, connect):
        student_conn, student_socket = connect(seed.student_principal)
        mentor_conn, mentor_socket = connect(seed.mentor_principal)
        _, idle_socket = connect(seed.mentor_principal)
        container.membership.join(seed.session.id, student_conn)
        container.membership.join(seed.session.id, mentor_conn)

        message = await container.messages.send(seed.session.id, seed.student_principal, "Hello")
        await container.registry.drain()

        for socket in (student_socket, mentor_socket):
            pushed = socket.of_type("new_message")
            assert len(pushed) == 1
            assert pushed[0]["message"]["id"] == message.id
            assert pushed[0]["message"]["senderName"] == "Riya"
        assert idle_socket.sent == []

    async def test_unknown_session(self, container, seed):
        with pytest.raises(SessionNotFoundError):
            await container.messages.send("missing", seed.student_principal, "Hello")

    async def test_outsider_is_denied_before_validation(self, container, store, seed):
        with pytest.raises(AccessDeniedError):
            await container.messages.send(seed.session.id, seed.outsider_principal, "")
        assert await store.list_messages(seed.session.id) == []

    async def test_content_too_long_reports_field(self, container, store, seed):
        with pytest.raises(MessageValidationError) as exc_info:
            await container.messages.send(seed.session.id, seed.student_principal, "x" * 4001)

        assert any(d["field"] == "content" for d in exc_info.value.details)
        assert await store.list_messages(seed.session.id) == []

    async def test_empty_text_rejected(self, container, seed):
        with pytest.raises(MessageValidationError) as exc_info:
            await container.messages.send(seed.session.id, seed.student_principal, "   ")
        assert exc_info.value.details

    async def test_content_whitespace_is_preserved(self, container, store, seed):
        content = "  indented\n  code\n"

        message = await container.messages.send_payload(
            seed.student_principal, {"sessionId": seed.session.id, "content": content}
        )

        assert message.content == content
        assert (await store.list_messages(seed.session.id))[0].content == content

    async def test_attachment_only_image_message(self, container, seed):
        message = await container.messages.send(
            seed.session.id,
            seed.student_principal,
            None,
            "image",
            [{"type": "image", "url": "https://cdn.example.org/a.png", "name": "a.png", "size": 12}],
        )

        assert message.content is None
        assert message.attachments[0].size == 12

    async def test_payload_without_session_id(self, container, seed):
        with pytest.raises(MessageValidationError) as exc_info:
            await container.messages.send_payload(seed.student_principal, {"content": "hi"})
        assert exc_info.value.details[0]["field"] == "sessionId"

    async def test_touch_failure_does_not_fail_send(self, container, store, seed, monkeypatch):
        async def broken_touch(session_id, at):
            raise ConnectionError("db gone")

        monkeypatch.setattr(store, "touch_session", broken_touch)

        message = await container.messages.send(seed.session.id, seed.student_principal, "Hello")

        assert [m.id for m in await store.list_messages(seed.session.id)] == [message.id]

    async def test_detector_failure_does_not_fail_send(self, container, store, seed):
        service = MessageService(
            store,
            container.gate,
            container.membership,
            ExplodingDetector(),
            container.escalations,
        )

        message = await service.send(seed.session.id, seed.student_principal, "I want to die")

        assert message.id
        session = await store.get_session(seed.session.id)
        assert session.status == SessionStatus.ACTIVE

    async def test_crisis_message_escalates(self, container, store, seed):
        await container.messages.send(seed.session.id, seed.student_principal, "I feel hopeless")

        session = await store.get_session(seed.session.id)
        assert session.status == SessionStatus.ESCALATED
        events = await store.list_escalations(seed.session.id)
        assert len(events) == 1
        assert events[0].trigger_keywords == ["hopeless"]

    async def test_sending_to_completed_session_is_allowed(self, container, store, seed):
        session = await store.get_session(seed.session.id)
        session.complete()
        await store.complete_session(session, SessionStatus.ACTIVE)

        message = await container.messages.send(seed.session.id, seed.mentor_principal, "One more thing")
        assert message.session_id == seed.session.id


class TestFetch:
    """Tests for paging and mark-read."""

    async def test_messages_in_sent_order_with_names(self, container, seed):
        for principal, text in (
            (seed.student_principal, "first"),
            (seed.mentor_principal, "second"),
            (seed.student_principal, "third"),
        ):
            await container.messages.send(seed.session.id, principal, text)

        page = await container.messages.fetch_messages(seed.session.id, seed.mentor_principal)
        data = page.to_dict()

        assert [m["content"] for m in data["messages"]] == ["first", "second", "third"]
        assert [m["senderName"] for m in data["messages"]] == ["Riya", "Dr. Mehta", "Riya"]
        assert data["page"] == 1
        assert data["hasMore"] is False

    async def test_fetch_marks_other_side_read_once(self, container, store, seed):
        await container.messages.send(seed.session.id, seed.student_principal, "a")
        await container.messages.send(seed.session.id, seed.student_principal, "b")
        own = await container.messages.send(seed.session.id, seed.mentor_principal, "c")

        first = await container.messages.fetch_messages(seed.session.id, seed.mentor_principal)
        second = await container.messages.fetch_messages(seed.session.id, seed.mentor_principal)

        assert first.marked_read == 2
        assert second.marked_read == 0
        stored = {m.id: m for m in await store.list_messages(seed.session.id)}
        assert stored[own.id].read_at is None

    async def test_paging_and_limit_clamp(self, container, seed):
        for i in range(5):
            await container.messages.send(seed.session.id, seed.student_principal, f"m{i}")

        page = await container.messages.fetch_messages(
            seed.session.id, seed.mentor_principal, page=2, limit=2
        )
        assert [m.content for m in page.messages] == ["m2", "m3"]
        assert page.to_dict()["hasMore"] is True

        clamped = await container.messages.fetch_messages(
            seed.session.id, seed.mentor_principal, page=0, limit=10_000
        )
        assert clamped.page == 1
        assert clamped.limit == 200

    async def test_outsider_cannot_fetch(self, container, seed):
        with pytest.raises(AccessDeniedError):
            await container.messages.fetch_messages(seed.session.id, seed.outsider_principal)
