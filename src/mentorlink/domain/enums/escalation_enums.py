"""
Escalation Enums

Classification of crisis escalations raised by the emergency detector.

SAFETY-CRITICAL: Category names are shared with the human review
tooling and must stay stable.
"""

from enum import StrEnum


class EscalationType(StrEnum):
    """Crisis category, ordered roughly by urgency."""

    SUICIDAL_IDEATION = "suicidal_ideation"
    SELF_HARM = "self_harm"
    IMMEDIATE_DANGER = "immediate_danger"
    ABUSE = "abuse"
    DEPRESSION = "depression"


class EscalationSeverity(StrEnum):
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    EscalationSeverity.MEDIUM: 1,
    EscalationSeverity.HIGH: 2,
    EscalationSeverity.CRITICAL: 3,
}


class EscalationStatus(StrEnum):
    """Review state. Only a human reviewer moves past OPEN."""

    OPEN = "open"
    HANDLED = "handled"
    RESOLVED = "resolved"


class EscalationActionTaken(StrEnum):
    COUNSELOR_REFERRAL = "counselor_referral"
    EMERGENCY_CONTACT = "emergency_contact"
    CRISIS_HELPLINE = "crisis_helpline"
    PARENT_NOTIFIED = "parent_notified"
