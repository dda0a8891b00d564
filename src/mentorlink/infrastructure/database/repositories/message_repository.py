"""
Message Repository

Data access for session messages and their read state.

PRIVACY: Content passes through untouched and is never logged here.
"""

from datetime import datetime
from typing import Iterable, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mentorlink.domain.enums import MessageType, SenderType
from mentorlink.domain.models import Attachment, Message
from mentorlink.domain.models.base import as_utc
from mentorlink.infrastructure.database.models.session_model import SessionMessageModel
from mentorlink.infrastructure.database.repositories.base import BaseRepository


def message_to_domain(row: SessionMessageModel) -> Message:
    return Message(
        id=row.id,
        session_id=row.session_id,
        sender_id=row.sender_id,
        sender_type=SenderType(row.sender_type),
        message_type=MessageType(row.message_type),
        content=row.content,
        attachments=[Attachment.from_dict(item) for item in row.attachments or []],
        is_encrypted=row.is_encrypted,
        read_at=as_utc(row.read_at),
        sent_at=as_utc(row.sent_at),
    )


def message_to_row(message: Message) -> SessionMessageModel:
    return SessionMessageModel(
        id=message.id,
        session_id=message.session_id,
        sender_id=message.sender_id,
        sender_type=message.sender_type.value,
        message_type=message.message_type.value,
        content=message.content,
        attachments=[a.to_dict() for a in message.attachments],
        is_encrypted=message.is_encrypted,
        read_at=message.read_at,
        sent_at=message.sent_at,
    )


class MessageRepository(BaseRepository[SessionMessageModel]):
    """Repository for session messages."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(SessionMessageModel, session)

    async def list_for_session(
        self,
        session_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> Sequence[SessionMessageModel]:
        """Page of messages, oldest first."""
        result = await self._session.execute(
            select(SessionMessageModel)
            .where(SessionMessageModel.session_id == session_id)
            .order_by(SessionMessageModel.sent_at.asc())
            .offset(offset)
            .limit(limit)
        )
        return result.scalars().all()

    async def mark_read(self, session_id: str, reader_id: str, at: datetime) -> int:
        """
        Stamp read_at on the other side's unread messages.

        Returns:
            Rows updated (0 on a repeated call)
        """
        result = await self._session.execute(
            update(SessionMessageModel)
            .where(
                SessionMessageModel.session_id == session_id,
                SessionMessageModel.sender_id != reader_id,
                SessionMessageModel.read_at.is_(None),
            )
            .values(read_at=at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def count_unread(
        self,
        session_ids: Sequence[str],
        exclude_sender_ids: Iterable[str],
    ) -> int:
        if not session_ids:
            return 0
        query = select(func.count()).select_from(SessionMessageModel).where(
            SessionMessageModel.session_id.in_(list(session_ids)),
            SessionMessageModel.read_at.is_(None),
        )
        excluded = list(exclude_sender_ids)
        if excluded:
            query = query.where(SessionMessageModel.sender_id.not_in(excluded))
        result = await self._session.execute(query)
        return result.scalar_one()
