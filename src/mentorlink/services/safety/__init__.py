"""Safety services: crisis detection and session escalation."""

from mentorlink.services.safety.emergency_detector import (
    CATEGORY_SEVERITY,
    CRISIS_KEYWORDS,
    EmergencyDetector,
    EmergencyScan,
    KeywordEmergencyDetector,
    PredicateEmergencyDetector,
)
from mentorlink.services.safety.escalation_service import EscalationService

__all__ = [
    "CATEGORY_SEVERITY",
    "CRISIS_KEYWORDS",
    "EmergencyDetector",
    "EmergencyScan",
    "KeywordEmergencyDetector",
    "PredicateEmergencyDetector",
    "EscalationService",
]
