"""Realtime delivery: connections, session membership and typing relay."""

from mentorlink.services.realtime.connection_registry import (
    Connection,
    ConnectionRegistry,
    Transport,
    new_connection_id,
)
from mentorlink.services.realtime.membership import SessionMembershipIndex
from mentorlink.services.realtime.typing_relay import TypingRelay

__all__ = [
    "Connection",
    "ConnectionRegistry",
    "Transport",
    "new_connection_id",
    "SessionMembershipIndex",
    "TypingRelay",
]
