"""
Message Ingestion and Fan-out

Send path, in order:
1. Access gate resolves role and member id (never client input)
2. Content validation (field-level errors)
3. Persist the message
4. Bump session freshness (separate write, best effort)
5. Broadcast `new_message` to current session members
6. Run emergency detection on the content, synchronously

Fetch path: list messages in sent order, then mark the other side's
messages read for the caller. Re-marking is a no-op.

SAFETY-CRITICAL: Detection runs on every persisted message. A failure
in detection or escalation is logged and reported, but never fails the
send that already persisted and broadcast the message.

PRIVACY: Message content is never logged.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from pydantic import ValidationError

from mentorlink.config.logging_config import get_logger
from mentorlink.domain.enums import SenderType
from mentorlink.domain.errors import MessageValidationError
from mentorlink.domain.models import Attachment, Message, MentorSession, Principal
from mentorlink.domain.models.base import utc_now
from mentorlink.infrastructure.metrics import (
    ESCALATION_FAILURES_TOTAL,
    MESSAGE_SEND_DURATION,
    MESSAGES_SENT_TOTAL,
    track_detection,
)
from mentorlink.infrastructure.monitoring import capture_exception_with_context
from mentorlink.infrastructure.store import SessionStore
from mentorlink.services.messaging.access_control import AccessControlGate
from mentorlink.services.messaging.schemas import MessageDraft, SendMessageRequest
from mentorlink.services.realtime import SessionMembershipIndex
from mentorlink.services.safety import EmergencyDetector, EmergencyScan, EscalationService

logger = get_logger(__name__)


@dataclass
class MessagePage:
    """One page of a session's messages, oldest first."""

    session_id: str
    messages: Sequence[Message]
    page: int
    limit: int
    marked_read: int = 0
    sender_names: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "messages": [
                m.to_dict(sender_name=self.sender_names.get(m.sender_type.value))
                for m in self.messages
            ],
            "page": self.page,
            "limit": self.limit,
            "hasMore": len(self.messages) == self.limit,
        }


class MessageService:
    """
    Usage:
        service = MessageService(store, gate, membership, detector, escalations)
        message = await service.send(session_id, principal, "Hello")
        page = await service.fetch_messages(session_id, principal)
    """

    def __init__(
        self,
        store: SessionStore,
        gate: AccessControlGate,
        membership: SessionMembershipIndex,
        detector: EmergencyDetector,
        escalations: EscalationService,
        default_page_size: int = 50,
        max_page_size: int = 200,
    ) -> None:
        self._store = store
        self._gate = gate
        self._membership = membership
        self._detector = detector
        self._escalations = escalations
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    async def send(
        self,
        session_id: str,
        principal: Principal,
        content: Optional[str],
        message_type: Any = "text",
        attachments: Optional[Sequence[Any]] = None,
    ) -> Message:
        """
        Persist a message and fan it out.

        Raises:
            SessionNotFoundError: Session does not exist
            AccessDeniedError: Principal is not a participant
            MessageValidationError: Content failed validation
        """
        started = time.perf_counter()
        decision = await self._gate.require(session_id, principal)
        draft = self._validate(content, message_type, attachments)

        message = await self._store.create_message(
            Message(
                session_id=session_id,
                sender_id=decision.member_id,
                sender_type=decision.role,
                message_type=draft.message_type,
                content=draft.content,
                attachments=[Attachment(**a.model_dump()) for a in draft.attachments],
                sent_at=utc_now(),
            )
        )
        MESSAGES_SENT_TOTAL.labels(sender_type=message.sender_type.value).inc()

        try:
            await self._store.touch_session(session_id, message.sent_at)
        except Exception as e:
            logger.error(
                "Session freshness update failed",
                session_id=session_id,
                message_id=message.id,
                error=type(e).__name__,
            )

        delivered = self._membership.broadcast(
            session_id,
            {
                "type": "new_message",
                "message": message.to_dict(sender_name=decision.display_name),
            },
        )
        logger.info(
            "Message sent",
            session_id=session_id,
            message_id=message.id,
            sender_type=message.sender_type.value,
            delivered=delivered,
        )

        await self._detect(decision.participants.session, message)
        MESSAGE_SEND_DURATION.observe(time.perf_counter() - started)
        return message

    async def send_payload(self, principal: Principal, payload: Mapping[str, Any]) -> Message:
        """
        Send from a raw request body. senderId/senderType are discarded.

        Raises:
            MessageValidationError: Body is not an object or lacks sessionId
        """
        try:
            request = SendMessageRequest.model_validate(payload)
        except ValidationError as e:
            raise MessageValidationError.from_pydantic(e.errors()) from e

        if request.sender_id is not None or request.sender_type is not None:
            logger.info(
                "Ignoring client-supplied sender fields",
                session_id=request.session_id,
            )

        return await self.send(
            request.session_id,
            principal,
            request.content,
            request.message_type or "text",
            request.attachments,
        )

    def _validate(
        self,
        content: Optional[str],
        message_type: Any,
        attachments: Optional[Sequence[Any]],
    ) -> MessageDraft:
        try:
            return MessageDraft.model_validate({
                "content": content,
                "messageType": message_type,
                "attachments": list(attachments or []),
            })
        except ValidationError as e:
            raise MessageValidationError.from_pydantic(e.errors()) from e

    async def _detect(self, session: MentorSession, message: Message) -> Optional[EmergencyScan]:
        try:
            scan = self._detector.scan(message.content)
            if not scan.is_emergency:
                return scan
            track_detection(c.value for c in scan.categories)
            await self._escalations.escalate(session, message, scan)
            return scan
        except Exception as e:
            ESCALATION_FAILURES_TOTAL.inc()
            logger.error(
                "Emergency handling failed after send",
                session_id=session.id,
                message_id=message.id,
                error=type(e).__name__,
            )
            capture_exception_with_context(e, session_id=session.id)
            return None

    async def fetch_messages(
        self,
        session_id: str,
        principal: Principal,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> MessagePage:
        """
        Page through a session's messages and mark the other side's as read.

        Raises:
            SessionNotFoundError: Session does not exist
            AccessDeniedError: Principal is not a participant
        """
        decision = await self._gate.require(session_id, principal)
        page = max(1, page)
        limit = min(max(1, limit or self._default_page_size), self._max_page_size)

        messages = await self._store.list_messages(
            session_id, offset=(page - 1) * limit, limit=limit
        )
        marked = await self._store.mark_read(session_id, decision.member_id, utc_now())
        if marked:
            logger.debug("Messages marked read", session_id=session_id, count=marked)

        participants = decision.participants
        return MessagePage(
            session_id=session_id,
            messages=messages,
            page=page,
            limit=limit,
            marked_read=marked,
            sender_names={
                role.value: participants.display_name_for(role)
                for role in SenderType
            },
        )
