"""
Messaging WebSocket

Live channel for mentor sessions. Clients connect with
`?token=<jwt>` or `?studentId=<anonymous id>`, then send control
messages:

    {"type": "join_session",  "sessionId": "..."}
    {"type": "leave_session", "sessionId": "..."}
    {"type": "typing",        "sessionId": "...", "isTyping": true}

Server pushes: connection_established, joined_session, new_message,
typing_indicator, emergency_alert, error.

SECURITY: A refused join (unknown session or not a participant) gets
no reply at all, so session existence is never revealed.
Messages are sent over REST, not over this socket.
"""

import json
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from mentorlink.config.logging_config import bind_connection_context, clear_context, get_logger
from mentorlink.domain.errors import AuthenticationError
from mentorlink.domain.models import Principal
from mentorlink.domain.models.base import iso, utc_now
from mentorlink.infrastructure.auth import ANONYMOUS_TOKEN, bearer_token
from mentorlink.infrastructure.metrics import WEBSOCKET_CONNECTIONS
from mentorlink.services.container import ServiceContainer
from mentorlink.services.messaging.schemas import (
    CONTROL_COMMAND_TYPES,
    JoinSessionCommand,
    LeaveSessionCommand,
    TypingCommand,
    control_command_adapter,
)
from mentorlink.services.realtime import new_connection_id

logger = get_logger(__name__)

INVALID_FORMAT = {"type": "error", "message": "Invalid message format"}


class SocketSession:
    """
    One client connection and its control-message handling.

    All pushes, including direct replies, go through the registry
    outbox so they are written in order by a single writer.
    """

    def __init__(
        self,
        container: ServiceContainer,
        connection_id: str,
        principal: Optional[Principal],
    ) -> None:
        self.container = container
        self.connection_id = connection_id
        self.principal = principal

    def push(self, payload: dict) -> bool:
        return self.container.registry.send(self.connection_id, payload)

    async def handle_raw(self, raw: str) -> None:
        """Parse and dispatch one client frame."""
        try:
            data = json.loads(raw)
        except ValueError:
            self.push(INVALID_FORMAT)
            return

        if not isinstance(data, dict):
            self.push(INVALID_FORMAT)
            return

        if data.get("type") not in CONTROL_COMMAND_TYPES:
            logger.debug("Ignoring unknown control message", message_type=str(data.get("type"))[:40])
            return

        try:
            command = control_command_adapter.validate_python(data)
        except ValidationError:
            self.push(INVALID_FORMAT)
            return

        if isinstance(command, JoinSessionCommand):
            await self.join(command.session_id)
        elif isinstance(command, LeaveSessionCommand):
            self.container.membership.leave(command.session_id, self.connection_id)
        elif isinstance(command, TypingCommand):
            self.container.typing.relay_typing(
                command.session_id, self.connection_id, command.is_typing
            )

    async def join(self, session_id: str) -> bool:
        """Subscribe after an access check. Refusals are silent."""
        if self.principal is None:
            return False
        try:
            decision = await self.container.gate.can_access(session_id, self.principal)
        except Exception as e:
            logger.error("Join access check failed", session_id=session_id, error=type(e).__name__)
            return False

        if not decision.allowed:
            return False

        self.container.membership.join(session_id, self.connection_id)
        self.push({
            "type": "joined_session",
            "sessionId": session_id,
            "message": "Successfully joined session",
        })
        return True

    def close(self) -> None:
        """Release memberships and the registry slot. Safe to call twice."""
        self.container.membership.leave_all(self.connection_id)
        self.container.registry.unregister(self.connection_id)


def _resolve_principal(websocket: WebSocket, container: ServiceContainer) -> Optional[Principal]:
    token = websocket.query_params.get("token") or bearer_token(
        websocket.headers.get("authorization")
    )
    student_id = websocket.query_params.get("studentId")
    if (token and token != ANONYMOUS_TOKEN) or student_id:
        return container.verifier.resolve(token, student_id)
    return None


async def messaging_socket(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for live session events.

    Connections without credentials are accepted but cannot join
    any session. An invalid token is refused with policy violation.
    """
    container: ServiceContainer = websocket.app.state.container

    try:
        principal = _resolve_principal(websocket, container)
    except AuthenticationError:
        logger.info("WebSocket rejected: invalid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    connection_id = new_connection_id()
    session = SocketSession(container, connection_id, principal)
    container.registry.register(connection_id, websocket, principal)
    WEBSOCKET_CONNECTIONS.inc()
    bind_connection_context(connection_id, principal.kind if principal else "none")
    logger.info("WebSocket connected")

    try:
        session.push({
            "type": "connection_established",
            "connectionId": connection_id,
            "timestamp": iso(utc_now()),
        })

        while True:
            raw = await websocket.receive_text()
            await session.handle_raw(raw)

    except WebSocketDisconnect:
        logger.info("WebSocket disconnected")
    except Exception as e:
        logger.error("WebSocket error", error=type(e).__name__)
    finally:
        session.close()
        WEBSOCKET_CONNECTIONS.dec()
        clear_context()
