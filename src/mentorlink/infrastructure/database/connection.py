"""
Database Connection Management

Async SQLAlchemy engine and session factory with:
- Connection pooling (PostgreSQL) / static pool (in-memory SQLite)
- Health checks
- Graceful shutdown
- One committed unit of work per `session()` block

SECURITY: Connection strings contain credentials and must
never be logged.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from mentorlink.config import get_settings
from mentorlink.config.logging_config import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all ORM models."""


class DatabaseManager:
    """
    Manages database connections and sessions.

    Usage:
        db = DatabaseManager()
        await db.initialize()
        async with db.session() as session:
            ...
        await db.close()
    """

    def __init__(self, url: Optional[str] = None, echo: bool = False) -> None:
        """
        Args:
            url: Async database URL (defaults to configured URL)
            echo: Log SQL statements
        """
        self._url = url
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    async def initialize(self) -> None:
        """Create the engine and session factory. Safe to call twice."""
        if self._engine is not None:
            logger.warning("Database already initialized")
            return

        settings = get_settings()
        url = self._url or settings.database.async_url

        if url.startswith("sqlite"):
            # In-memory databases only exist on a single shared connection
            self._engine = create_async_engine(
                url,
                echo=self._echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self._engine = create_async_engine(
                url,
                pool_size=settings.database.pool_size,
                max_overflow=settings.database.max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
                echo=self._echo,
            )

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Database engine initialized", dialect=self._engine.dialect.name)

    async def create_schema(self) -> None:
        """Create all tables (tests and local development; production uses Alembic)."""
        # Import models so they register on Base.metadata
        from mentorlink.infrastructure.database import models  # noqa: F401

        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Dispose the engine and its pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session that commits on success and rolls back on error.

        Yields:
            AsyncSession: Database session
        """
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Return True if a trivial query round-trips."""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None
