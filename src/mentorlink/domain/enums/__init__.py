"""Domain enums package."""

from mentorlink.domain.enums.session_enums import (
    SessionStatus,
    SessionPriority,
    SessionType,
    SessionOutcome,
    SenderType,
    MessageType,
    VerificationStatus,
)
from mentorlink.domain.enums.escalation_enums import (
    EscalationType,
    EscalationSeverity,
    EscalationStatus,
    EscalationActionTaken,
)

__all__ = [
    "SessionStatus",
    "SessionPriority",
    "SessionType",
    "SessionOutcome",
    "SenderType",
    "MessageType",
    "VerificationStatus",
    "EscalationType",
    "EscalationSeverity",
    "EscalationStatus",
    "EscalationActionTaken",
]
