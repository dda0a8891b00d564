"""
Emergency Detector

Scans message content for crisis-indicating language.

SAFETY-CRITICAL: This is a deliberately simple, auditable keyword
gate, not a classifier. Over-triggering is the accepted failure mode.
Every message is scanned; callers must never skip detection.

LEGAL_REVIEW_REQUIRED: The phrase list has clinical and legal
implications. Changes need review.

ARCHITECTURE: Detectors are pluggable behind EmergencyDetector so the
list (or a future classifier) can change without touching escalation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from mentorlink.domain.enums import EscalationSeverity, EscalationType

# CLINICAL_VALIDATION_REQUIRED
# Phrases are matched as case-insensitive substrings.
CRISIS_KEYWORDS: dict[EscalationType, tuple[str, ...]] = {
    EscalationType.SUICIDAL_IDEATION: (
        "suicide",
        "suicidal",
        "kill myself",
        "end it all",
        "want to die",
        "end my life",
        "no reason to live",
        "better off dead",
    ),
    EscalationType.SELF_HARM: (
        "hurt myself",
        "self harm",
        "self-harm",
        "cutting",
        "overdose",
    ),
    EscalationType.IMMEDIATE_DANGER: (
        "emergency",
        "crisis",
        "danger",
        "threatened",
    ),
    EscalationType.ABUSE: (
        "abuse",
        "assault",
        "violence",
    ),
    EscalationType.DEPRESSION: (
        "hopeless",
        "can't go on",
    ),
}

# Most urgent first; the first matched category names the escalation
CATEGORY_PRIORITY: tuple[EscalationType, ...] = (
    EscalationType.SUICIDAL_IDEATION,
    EscalationType.SELF_HARM,
    EscalationType.IMMEDIATE_DANGER,
    EscalationType.ABUSE,
    EscalationType.DEPRESSION,
)

CATEGORY_SEVERITY: dict[EscalationType, EscalationSeverity] = {
    EscalationType.SUICIDAL_IDEATION: EscalationSeverity.CRITICAL,
    EscalationType.SELF_HARM: EscalationSeverity.CRITICAL,
    EscalationType.IMMEDIATE_DANGER: EscalationSeverity.HIGH,
    EscalationType.ABUSE: EscalationSeverity.HIGH,
    EscalationType.DEPRESSION: EscalationSeverity.MEDIUM,
}


@dataclass
class EmergencyScan:
    """
    Result of scanning one message.

    Attributes:
        is_emergency: True if any phrase matched
        matched_terms: Every matched phrase, in list order
        categories: Matched categories, most urgent first
    """

    is_emergency: bool = False
    matched_terms: list[str] = field(default_factory=list)
    categories: list[EscalationType] = field(default_factory=list)

    @property
    def primary_category(self) -> Optional[EscalationType]:
        return self.categories[0] if self.categories else None

    @property
    def severity(self) -> Optional[EscalationSeverity]:
        category = self.primary_category
        return CATEGORY_SEVERITY[category] if category else None

    def to_dict(self) -> dict:
        return {
            "isEmergency": self.is_emergency,
            "matchedTerms": list(self.matched_terms),
            "categories": [c.value for c in self.categories],
        }


class EmergencyDetector(ABC):
    """Pluggable crisis detector."""

    @abstractmethod
    def scan(self, content: Optional[str]) -> EmergencyScan:
        """Scan content. Must not raise on empty or None content."""

    def is_emergency(self, content: Optional[str]) -> bool:
        return self.scan(content).is_emergency


class KeywordEmergencyDetector(EmergencyDetector):
    """
    Case-insensitive substring match against a curated phrase list.

    Usage:
        detector = KeywordEmergencyDetector(extra_keywords=["run away"])
        scan = detector.scan("I want to end it all")
        scan.is_emergency      # True
        scan.primary_category  # EscalationType.SUICIDAL_IDEATION
    """

    def __init__(
        self,
        keywords: Optional[dict[EscalationType, Iterable[str]]] = None,
        extra_keywords: Iterable[str] = (),
        extra_category: EscalationType = EscalationType.IMMEDIATE_DANGER,
    ) -> None:
        source = keywords if keywords is not None else CRISIS_KEYWORDS
        self._keywords: dict[EscalationType, list[str]] = {
            category: [phrase.lower() for phrase in phrases if phrase.strip()]
            for category, phrases in source.items()
        }
        extras = [phrase.lower() for phrase in extra_keywords if phrase.strip()]
        if extras:
            self._keywords.setdefault(extra_category, []).extend(extras)

    @property
    def keywords(self) -> dict[EscalationType, list[str]]:
        return {category: list(phrases) for category, phrases in self._keywords.items()}

    def scan(self, content: Optional[str]) -> EmergencyScan:
        if not content:
            return EmergencyScan()

        lowered = content.lower()
        matched: list[str] = []
        hit: set[EscalationType] = set()
        for category, phrases in self._keywords.items():
            for phrase in phrases:
                if phrase in lowered:
                    if phrase not in matched:
                        matched.append(phrase)
                    hit.add(category)

        categories = [c for c in CATEGORY_PRIORITY if c in hit]
        categories += sorted(c for c in hit if c not in CATEGORY_PRIORITY)
        return EmergencyScan(is_emergency=bool(matched), matched_terms=matched, categories=categories)


class PredicateEmergencyDetector(EmergencyDetector):
    """Adapts a plain `content -> bool` predicate (e.g. an external classifier)."""

    def __init__(
        self,
        predicate: Callable[[str], bool],
        category: EscalationType = EscalationType.IMMEDIATE_DANGER,
    ) -> None:
        self._predicate = predicate
        self._category = category

    def scan(self, content: Optional[str]) -> EmergencyScan:
        if not content or not self._predicate(content):
            return EmergencyScan()
        return EmergencyScan(is_emergency=True, categories=[self._category])
