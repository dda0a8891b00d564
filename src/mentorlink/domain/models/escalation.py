"""
Escalation Event

Append-only audit record written whenever crisis language is detected
in a session. Only a human reviewer may later change status/notes.

LEGAL_REVIEW_REQUIRED: Retention of escalation records has legal
implications and must follow the data retention policy.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from mentorlink.domain.enums import (
    EscalationActionTaken,
    EscalationSeverity,
    EscalationStatus,
    EscalationType,
)
from mentorlink.domain.models.base import iso, new_id, utc_now


@dataclass
class EscalationEvent:
    """
    Escalation audit record.

    Attributes:
        session_id: Escalated session
        message_id: Message whose content triggered detection
        escalation_type: Most urgent matched category
        severity: Severity derived from the category
        trigger_keywords: Every matched phrase
        action_taken: Automated action (crisis helpline notice)
    """

    session_id: str
    student_id: str
    mentor_id: str
    escalation_type: EscalationType
    severity: EscalationSeverity
    id: str = field(default_factory=new_id)
    message_id: Optional[str] = None
    trigger_keywords: list[str] = field(default_factory=list)
    detected_at: datetime = field(default_factory=utc_now)
    action_taken: Optional[EscalationActionTaken] = EscalationActionTaken.CRISIS_HELPLINE
    follow_up_required: bool = True
    status: EscalationStatus = EscalationStatus.OPEN
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "studentId": self.student_id,
            "mentorId": self.mentor_id,
            "messageId": self.message_id,
            "escalationType": self.escalation_type.value,
            "severity": self.severity.value,
            "triggerKeywords": list(self.trigger_keywords),
            "detectedAt": iso(self.detected_at),
            "actionTaken": self.action_taken.value if self.action_taken else None,
            "followUpRequired": self.follow_up_required,
            "status": self.status.value,
            "notes": self.notes,
        }
