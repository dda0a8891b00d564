"""
Session Membership Index

Maps session ids to the connections currently receiving that
session's live events, and fans payloads out through the
ConnectionRegistry.

INVARIANT: A session with no members is removed from the index,
so memory stays bounded as sessions churn.

CONCURRENCY: Mutated only from the owning event loop. No awaits
happen between reading and writing a member set.
"""

from typing import Any, Iterable, Optional

from mentorlink.config.logging_config import get_logger
from mentorlink.infrastructure.metrics import SESSION_MEMBERSHIPS
from mentorlink.services.realtime.connection_registry import ConnectionRegistry

logger = get_logger(__name__)


class SessionMembershipIndex:
    """
    Session id -> set of connection ids.

    A connection may hold several memberships at once (multi-session
    clients); a session may have several connections (multi-tab).
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry
        self._members: dict[str, set[str]] = {}

    def join(self, session_id: str, connection_id: str) -> None:
        members = self._members.setdefault(session_id, set())
        if connection_id not in members:
            members.add(connection_id)
            SESSION_MEMBERSHIPS.inc()
        logger.info(
            "Connection joined session",
            session_id=session_id,
            connection_id=connection_id,
            members=len(members),
        )

    def leave(self, session_id: str, connection_id: str) -> None:
        members = self._members.get(session_id)
        if members is None or connection_id not in members:
            return
        members.discard(connection_id)
        SESSION_MEMBERSHIPS.dec()
        if not members:
            del self._members[session_id]

    def leave_all(self, connection_id: str) -> list[str]:
        """
        Remove a connection from every session it joined.

        Returns:
            Ids of the sessions it was removed from
        """
        left = [sid for sid, members in self._members.items() if connection_id in members]
        for session_id in left:
            self.leave(session_id, connection_id)
        if left:
            logger.info("Connection left all sessions", connection_id=connection_id, sessions=len(left))
        return left

    def members_of(self, session_id: str) -> frozenset[str]:
        return frozenset(self._members.get(session_id, ()))

    def is_member(self, session_id: str, connection_id: str) -> bool:
        return connection_id in self._members.get(session_id, ())

    def sessions_of(self, connection_id: str) -> list[str]:
        return [sid for sid, members in self._members.items() if connection_id in members]

    def broadcast(
        self,
        session_id: str,
        payload: dict[str, Any],
        exclude: Optional[Iterable[str]] = None,
    ) -> int:
        """
        Push a payload to every member of a session.

        Delivery is best effort: a dead recipient is skipped and the
        remaining members still receive the payload.

        Returns:
            Number of connections the payload was queued for
        """
        skipped = set(exclude or ())
        delivered = 0
        # Snapshot; registry sends never mutate membership
        for connection_id in sorted(self.members_of(session_id)):
            if connection_id in skipped:
                continue
            if self._registry.send(connection_id, payload):
                delivered += 1
        return delivered

    @property
    def session_count(self) -> int:
        return len(self._members)
