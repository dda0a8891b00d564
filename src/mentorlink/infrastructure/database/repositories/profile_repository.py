"""
Profile Repositories

Data access for student and mentor profiles, plus the mapping
between ORM rows and domain profiles.
"""

import json
from typing import Optional, Sequence

from sqlalchemy import String, cast, select
from sqlalchemy.ext.asyncio import AsyncSession

from mentorlink.domain.enums import VerificationStatus
from mentorlink.domain.models import MentorProfile, StudentProfile
from mentorlink.domain.models.base import as_utc
from mentorlink.infrastructure.database.models.profile_models import (
    MentorProfileModel,
    StudentProfileModel,
)
from mentorlink.infrastructure.database.repositories.base import BaseRepository


def student_to_domain(row: StudentProfileModel) -> StudentProfile:
    return StudentProfile(
        id=row.id,
        user_id=row.user_id,
        is_anonymous=row.is_anonymous,
        display_name=row.display_name,
        concern_areas=list(row.concern_areas or []),
        is_active=row.is_active,
        joined_at=as_utc(row.joined_at),
        updated_at=as_utc(row.updated_at),
    )


def student_to_row(profile: StudentProfile) -> StudentProfileModel:
    return StudentProfileModel(
        id=profile.id,
        user_id=profile.user_id,
        is_anonymous=profile.is_anonymous,
        display_name=profile.display_name,
        concern_areas=list(profile.concern_areas),
        is_active=profile.is_active,
        joined_at=profile.joined_at,
        updated_at=profile.updated_at,
    )


def mentor_to_domain(row: MentorProfileModel) -> MentorProfile:
    return MentorProfile(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        email=row.email,
        mentor_type=row.mentor_type,
        specialization=list(row.specialization or []),
        verification_status=VerificationStatus(row.verification_status),
        is_active=row.is_active,
        is_online=row.is_online,
        total_sessions=row.total_sessions,
        joined_at=as_utc(row.joined_at),
        updated_at=as_utc(row.updated_at),
    )


def mentor_to_row(profile: MentorProfile) -> MentorProfileModel:
    return MentorProfileModel(
        id=profile.id,
        user_id=profile.user_id,
        name=profile.name,
        email=profile.email,
        mentor_type=profile.mentor_type,
        specialization=list(profile.specialization),
        verification_status=profile.verification_status.value,
        is_active=profile.is_active,
        is_online=profile.is_online,
        total_sessions=profile.total_sessions,
        joined_at=profile.joined_at,
        updated_at=profile.updated_at,
    )


class StudentProfileRepository(BaseRepository[StudentProfileModel]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(StudentProfileModel, session)

    async def get_by_user(self, user_id: str) -> Optional[StudentProfileModel]:
        """Student row linked to an account, oldest first if duplicated."""
        result = await self._session.execute(
            select(StudentProfileModel)
            .where(StudentProfileModel.user_id == user_id)
            .order_by(StudentProfileModel.joined_at)
            .limit(1)
        )
        return result.scalar_one_or_none()


class MentorProfileRepository(BaseRepository[MentorProfileModel]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(MentorProfileModel, session)

    async def get_by_user(self, user_id: str) -> Optional[MentorProfileModel]:
        result = await self._session.execute(
            select(MentorProfileModel)
            .where(MentorProfileModel.user_id == user_id)
            .order_by(MentorProfileModel.joined_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_available(
        self,
        *,
        specialization: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Sequence[MentorProfileModel]:
        """
        Active, verified mentors ordered by name.

        The specialization filter matches the JSON-encoded element inside
        the serialized array, which reads the same on JSONB and on sqlite JSON.
        """
        query = select(MentorProfileModel).where(
            MentorProfileModel.is_active.is_(True),
            MentorProfileModel.verification_status == VerificationStatus.VERIFIED.value,
        )
        if specialization:
            query = query.where(
                cast(MentorProfileModel.specialization, String).contains(
                    json.dumps(specialization), autoescape=True
                )
            )
        result = await self._session.execute(
            query.order_by(MentorProfileModel.name, MentorProfileModel.id).offset(offset).limit(limit)
        )
        return result.scalars().all()
