"""
Escalation Repository

Append-only access to emergency escalation records.
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mentorlink.domain.enums import (
    EscalationActionTaken,
    EscalationSeverity,
    EscalationStatus,
    EscalationType,
)
from mentorlink.domain.models import EscalationEvent
from mentorlink.domain.models.base import as_utc
from mentorlink.infrastructure.database.models.session_model import EscalationModel
from mentorlink.infrastructure.database.repositories.base import BaseRepository


def escalation_to_domain(row: EscalationModel) -> EscalationEvent:
    return EscalationEvent(
        id=row.id,
        session_id=row.session_id,
        student_id=row.student_id,
        mentor_id=row.mentor_id,
        message_id=row.message_id,
        escalation_type=EscalationType(row.escalation_type),
        severity=EscalationSeverity(row.severity),
        trigger_keywords=list(row.trigger_keywords or []),
        detected_at=as_utc(row.detected_at),
        action_taken=EscalationActionTaken(row.action_taken) if row.action_taken else None,
        follow_up_required=row.follow_up_required,
        status=EscalationStatus(row.status),
        notes=row.notes,
        created_at=as_utc(row.created_at),
    )


def escalation_to_row(event: EscalationEvent) -> EscalationModel:
    return EscalationModel(
        id=event.id,
        session_id=event.session_id,
        student_id=event.student_id,
        mentor_id=event.mentor_id,
        message_id=event.message_id,
        escalation_type=event.escalation_type.value,
        severity=event.severity.value,
        trigger_keywords=list(event.trigger_keywords),
        detected_at=event.detected_at,
        action_taken=event.action_taken.value if event.action_taken else None,
        follow_up_required=event.follow_up_required,
        status=event.status.value,
        notes=event.notes,
        created_at=event.created_at,
    )


class EscalationRepository(BaseRepository[EscalationModel]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(EscalationModel, session)

    async def list_for_session(self, session_id: str) -> Sequence[EscalationModel]:
        result = await self._session.execute(
            select(EscalationModel)
            .where(EscalationModel.session_id == session_id)
            .order_by(EscalationModel.detected_at.asc())
        )
        return result.scalars().all()
