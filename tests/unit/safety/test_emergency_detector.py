"""
Unit Tests - Emergency Detector

SAFETY-CRITICAL: These tests pin the crisis phrase gate. A phrase
that stops matching is a safety regression.
"""

import pytest

from mentorlink.domain.enums import EscalationSeverity, EscalationType
from mentorlink.services.safety import (
    CRISIS_KEYWORDS,
    KeywordEmergencyDetector,
    PredicateEmergencyDetector,
)


class TestKeywordEmergencyDetector:
    """Tests for the keyword crisis gate."""

    @pytest.fixture
    def detector(self) -> KeywordEmergencyDetector:
        return KeywordEmergencyDetector()

    @pytest.mark.parametrize("phrase", [p for phrases in CRISIS_KEYWORDS.values() for p in phrases])
    def test_every_phrase_matches(self, detector, phrase):
        assert detector.is_emergency(f"lately {phrase} is all I think about")

    def test_case_insensitive(self, detector):
        scan = detector.scan("I Want To DIE")
        assert scan.is_emergency
        assert scan.matched_terms == ["want to die"]

    def test_substring_match_over_triggers(self, detector):
        # "endangered" contains "danger"; over-triggering is accepted
        assert detector.is_emergency("we studied endangered species")

    @pytest.mark.parametrize("content", [None, "", "Thanks, see you next week"])
    def test_benign_content(self, detector, content):
        scan = detector.scan(content)
        assert not scan.is_emergency
        assert scan.primary_category is None
        assert scan.severity is None

    def test_most_urgent_category_is_primary(self, detector):
        scan = detector.scan("I feel hopeless and I want to kill myself")

        assert scan.categories == [EscalationType.SUICIDAL_IDEATION, EscalationType.DEPRESSION]
        assert scan.severity == EscalationSeverity.CRITICAL

    def test_depression_is_medium(self, detector):
        assert detector.scan("everything feels hopeless").severity == EscalationSeverity.MEDIUM

    def test_extra_keywords(self):
        detector = KeywordEmergencyDetector(extra_keywords=["Run Away", "  "])

        scan = detector.scan("I am going to run away tonight")

        assert scan.is_emergency
        assert scan.primary_category == EscalationType.IMMEDIATE_DANGER
        assert "run away" in detector.keywords[EscalationType.IMMEDIATE_DANGER]

    def test_custom_keyword_table(self):
        detector = KeywordEmergencyDetector(keywords={EscalationType.ABUSE: ["bullied"]})

        assert detector.is_emergency("I get bullied every day")
        assert not detector.is_emergency("I want to die")

    def test_to_dict(self, detector):
        assert detector.scan("self-harm").to_dict() == {
            "isEmergency": True,
            "matchedTerms": ["self-harm"],
            "categories": ["self_harm"],
        }


class TestPredicateEmergencyDetector:
    def test_wraps_predicate(self):
        detector = PredicateEmergencyDetector(lambda text: "red flag" in text, EscalationType.ABUSE)

        assert detector.scan("a red flag here").primary_category == EscalationType.ABUSE
        assert not detector.is_emergency("all fine")
        assert not detector.is_emergency(None)
