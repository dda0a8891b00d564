"""
Escalation Service

Acts on an emergency match:
1. Escalate the session (status escalated, priority urgent)
2. Append an EscalationEvent audit record
3. Broadcast the crisis notice to every current session member

SAFETY-CRITICAL: The crisis notice broadcast is attempted on every
match, even when the store writes fail. It is best effort and never
raises. Escalation is one-way; nothing here reverts it.

PRIVACY: Matched phrases are audit data and are stored, but message
content is never logged.
"""

from typing import Optional

from mentorlink.config.logging_config import get_logger
from mentorlink.domain.enums import EscalationType
from mentorlink.domain.models import EscalationEvent, Message, MentorSession
from mentorlink.domain.models.base import utc_now
from mentorlink.infrastructure.metrics import track_escalation
from mentorlink.infrastructure.monitoring import capture_safety_event
from mentorlink.infrastructure.store import SessionStore
from mentorlink.services.realtime import SessionMembershipIndex
from mentorlink.services.safety.emergency_detector import CATEGORY_SEVERITY, EmergencyScan

logger = get_logger(__name__)


class EscalationService:
    """
    Usage:
        service = EscalationService(store, membership, alert_message)
        event = await service.escalate(session, message, scan)
    """

    def __init__(
        self,
        store: SessionStore,
        membership: SessionMembershipIndex,
        alert_message: str,
    ) -> None:
        self._store = store
        self._membership = membership
        self._alert_message = alert_message

    async def escalate(
        self,
        session: MentorSession,
        message: Optional[Message],
        scan: EmergencyScan,
    ) -> EscalationEvent:
        """
        Escalate a session after a crisis match.

        Raises:
            Exception: Store failures propagate after the alert broadcast
        """
        try:
            return await self._record(session, message, scan)
        finally:
            self.broadcast_alert(session.id)

    async def _record(
        self,
        session: MentorSession,
        message: Optional[Message],
        scan: EmergencyScan,
    ) -> EscalationEvent:
        detected_at = utc_now()
        escalation_type = scan.primary_category or EscalationType.IMMEDIATE_DANGER
        severity = CATEGORY_SEVERITY[escalation_type]

        await self._store.escalate_session(session.id, detected_at)
        event = await self._store.create_escalation(
            EscalationEvent(
                session_id=session.id,
                student_id=session.student_id,
                mentor_id=session.mentor_id,
                message_id=message.id if message else None,
                escalation_type=escalation_type,
                severity=severity,
                trigger_keywords=list(scan.matched_terms),
                detected_at=detected_at,
            )
        )

        track_escalation(escalation_type.value, severity.value)
        logger.warning(
            "Session escalated",
            session_id=session.id,
            escalation_id=event.id,
            escalation_type=escalation_type.value,
            severity=severity.value,
            matched_terms=len(scan.matched_terms),
        )
        capture_safety_event(
            "Mentor session escalated",
            extra={
                "session_id": session.id,
                "escalation_type": escalation_type.value,
                "severity": severity.value,
            },
        )
        return event

    def broadcast_alert(self, session_id: str) -> int:
        """Push the crisis notice to current members. Never raises."""
        try:
            return self._membership.broadcast(
                session_id,
                {"type": "emergency_alert", "message": self._alert_message},
            )
        except Exception as e:
            logger.error(
                "Emergency alert broadcast failed",
                session_id=session_id,
                error=type(e).__name__,
            )
            return 0
