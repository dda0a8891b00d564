"""
Access Control Gate

Decides whether a principal may read or write a session, and
resolves the role and member id the caller acts as.

SECURITY: The resolved member id and role are the only values ever
persisted as a message's sender. Client-supplied sender fields are
never consulted.

Rules:
- Authenticated user: matches the student's linked user id, else the
  mentor's linked user id.
- Anonymous student: matches the session's student profile id, and
  only if that profile is flagged anonymous.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from mentorlink.config.logging_config import get_logger
from mentorlink.domain.enums import SenderType
from mentorlink.domain.errors import AccessDeniedError, SessionNotFoundError
from mentorlink.domain.models import Principal, SessionParticipants
from mentorlink.infrastructure.store import SessionStore

logger = get_logger(__name__)


class AccessOutcome(StrEnum):
    GRANTED = "granted"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass
class AccessDecision:
    """
    Outcome of an access check.

    Attributes:
        outcome: granted / not_found / forbidden
        role: Resolved caller role when granted
        member_id: Resolved profile id when granted
        participants: Session with profiles (None when not found)
    """

    session_id: str
    outcome: AccessOutcome
    role: Optional[SenderType] = None
    member_id: Optional[str] = None
    participants: Optional[SessionParticipants] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == AccessOutcome.GRANTED

    @property
    def display_name(self) -> Optional[str]:
        if not self.allowed or self.participants is None:
            return None
        return self.participants.display_name_for(self.role)


def resolve_member(
    participants: SessionParticipants,
    principal: Principal,
) -> Optional[tuple[SenderType, str]]:
    """Role and profile id the principal holds in this session, or None."""
    student, mentor = participants.student, participants.mentor

    if principal.is_authenticated:
        if student is not None and student.user_id and student.user_id == principal.user_id:
            return SenderType.STUDENT, student.id
        if mentor is not None and mentor.user_id and mentor.user_id == principal.user_id:
            return SenderType.MENTOR, mentor.id
        return None

    if (
        student is not None
        and student.id == principal.anonymous_student_id
        and student.is_anonymous
    ):
        return SenderType.STUDENT, student.id
    return None


class AccessControlGate:
    """
    Usage:
        gate = AccessControlGate(store)
        decision = await gate.can_access(session_id, principal)
        if decision.allowed:
            ...
        decision = await gate.require(session_id, principal)  # raises
    """

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    async def can_access(self, session_id: str, principal: Principal) -> AccessDecision:
        participants = await self._store.get_participants(session_id)
        if participants is None:
            return AccessDecision(session_id=session_id, outcome=AccessOutcome.NOT_FOUND)

        resolved = resolve_member(participants, principal)
        if resolved is None:
            logger.info(
                "Session access denied",
                session_id=session_id,
                principal_kind=principal.kind,
            )
            return AccessDecision(
                session_id=session_id,
                outcome=AccessOutcome.FORBIDDEN,
                participants=participants,
            )

        role, member_id = resolved
        return AccessDecision(
            session_id=session_id,
            outcome=AccessOutcome.GRANTED,
            role=role,
            member_id=member_id,
            participants=participants,
        )

    async def require(self, session_id: str, principal: Principal) -> AccessDecision:
        """
        Raises:
            SessionNotFoundError: Session does not exist
            AccessDeniedError: Principal is not a participant
        """
        decision = await self.can_access(session_id, principal)
        if decision.outcome == AccessOutcome.NOT_FOUND:
            raise SessionNotFoundError(session_id)
        if decision.outcome == AccessOutcome.FORBIDDEN:
            raise AccessDeniedError(session_id)
        return decision
