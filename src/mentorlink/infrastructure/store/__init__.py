"""Session store interface and adapters."""

from mentorlink.infrastructure.store.base import SessionStore
from mentorlink.infrastructure.store.memory import InMemorySessionStore
from mentorlink.infrastructure.store.sql import SqlAlchemySessionStore

__all__ = ["SessionStore", "InMemorySessionStore", "SqlAlchemySessionStore"]
