"""
Participant Profiles

Student and mentor profiles as consumed by the messaging core.
Only the fields the core reasons about are modelled here; the
rest of the profile data belongs to the CRUD layer.

PRIVACY: Anonymous students have no linked user_id. Their profile
id doubles as their credential and must not be logged in full.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from mentorlink.domain.enums import VerificationStatus
from mentorlink.domain.models.base import iso, new_id, utc_now


@dataclass
class StudentProfile:
    """
    Student profile.

    Attributes:
        id: Profile id (also the anonymous principal id)
        user_id: Linked account, None for anonymous students
        is_anonymous: Whether the profile may be used without auth
        display_name: Name shown to the mentor
        concern_areas: Areas the student wants guidance on
    """

    id: str = field(default_factory=new_id)
    user_id: Optional[str] = None
    is_anonymous: bool = False
    display_name: Optional[str] = None
    concern_areas: list[str] = field(default_factory=list)
    is_active: bool = True
    joined_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def public_name(self) -> str:
        return self.display_name or "Student"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "isAnonymous": self.is_anonymous,
            "displayName": self.display_name,
            "concernAreas": list(self.concern_areas),
            "isActive": self.is_active,
            "joinedAt": iso(self.joined_at),
        }


@dataclass
class MentorProfile:
    """
    Mentor profile.

    Only verified, active mentors can be requested for new sessions.
    """

    id: str = field(default_factory=new_id)
    user_id: Optional[str] = None
    name: str = ""
    email: str = ""
    mentor_type: str = "counselor"
    specialization: list[str] = field(default_factory=list)
    verification_status: VerificationStatus = VerificationStatus.PENDING
    is_active: bool = True
    is_online: bool = False
    total_sessions: int = 0
    joined_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def public_name(self) -> str:
        return self.name or "Mentor"

    @property
    def is_available(self) -> bool:
        return self.is_active and self.verification_status == VerificationStatus.VERIFIED

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "mentorType": self.mentor_type,
            "specialization": list(self.specialization),
            "verificationStatus": self.verification_status.value,
            "isOnline": self.is_online,
            "totalSessions": self.total_sessions,
        }
