"""
Base Repository Pattern

Generic async data access shared by all repositories.
Repositories operate on a caller-owned AsyncSession; they flush
but never commit. The unit of work is the caller's session block.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from mentorlink.infrastructure.database.connection import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Generic base repository with async CRUD operations.

    Usage:
        class MessageRepository(BaseRepository[SessionMessageModel]):
            ...

        repo = MessageRepository(session)
        row = await repo.get_by_id(message_id)
    """

    def __init__(self, model: Type[ModelT], session: AsyncSession) -> None:
        """
        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self._model = model
        self._session = session

    async def get_by_id(self, id: str) -> Optional[ModelT]:
        """Row by primary key, or None."""
        return await self._session.get(self._model, id)

    async def add(self, entity: ModelT) -> ModelT:
        """
        Insert a new row and flush so server defaults are populated.

        Returns:
            The flushed row
        """
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        return entity
