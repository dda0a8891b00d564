"""
Typing Relay

Ephemeral typing-state relay. Nothing is persisted.

Membership is the authorization: a connection that never joined
a session (or whose join was refused) cannot relay into it.
"""

from mentorlink.config.logging_config import get_logger
from mentorlink.infrastructure.metrics import TYPING_RELAYS_TOTAL
from mentorlink.services.realtime.membership import SessionMembershipIndex

logger = get_logger(__name__)


class TypingRelay:
    def __init__(self, membership: SessionMembershipIndex) -> None:
        self._membership = membership

    def relay_typing(self, session_id: str, origin_connection_id: str, is_typing: bool) -> int:
        """
        Forward a typing indicator to every other member of the session.

        Returns:
            Number of connections notified (0 when the origin is not a member)
        """
        if not self._membership.is_member(session_id, origin_connection_id):
            TYPING_RELAYS_TOTAL.labels(result="not_member").inc()
            logger.debug(
                "Typing relay refused for non-member",
                session_id=session_id,
                connection_id=origin_connection_id,
            )
            return 0

        TYPING_RELAYS_TOTAL.labels(result="relayed").inc()
        return self._membership.broadcast(
            session_id,
            {
                "type": "typing_indicator",
                "sessionId": session_id,
                "isTyping": bool(is_typing),
                "connectionId": origin_connection_id,
            },
            exclude=[origin_connection_id],
        )
