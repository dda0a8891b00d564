"""
Database ORM models package.
"""

from mentorlink.infrastructure.database.models.profile_models import (
    StudentProfileModel,
    MentorProfileModel,
)
from mentorlink.infrastructure.database.models.session_model import (
    MentorSessionModel,
    SessionMessageModel,
    EscalationModel,
)

__all__ = [
    "StudentProfileModel",
    "MentorProfileModel",
    "MentorSessionModel",
    "SessionMessageModel",
    "EscalationModel",
]
