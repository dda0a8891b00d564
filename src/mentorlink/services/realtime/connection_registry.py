"""
Connection Registry

Owns every live transport in the process, keyed by an opaque
connection id.

Each connection gets an outbox: a bounded asyncio.Queue drained by a
dedicated writer task. `send` only enqueues, so a slow or dead
recipient never stalls the caller, and pushes to one connection are
written in the order they were enqueued.

CONCURRENCY: Mutated only from the event loop that owns it.
A multi-threaded host must serialize access to this object.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol
from uuid import uuid4

from mentorlink.config.logging_config import get_logger
from mentorlink.domain.models import Principal
from mentorlink.infrastructure.metrics import DELIVERY_FAILURES, FANOUT_DELIVERIES

logger = get_logger(__name__)


class Transport(Protocol):
    """Anything that can push a JSON-serializable payload (e.g. a WebSocket)."""

    async def send_json(self, data: Any) -> None: ...


@dataclass
class Connection:
    """
    One live transport and its outbox.

    Attributes:
        connection_id: Opaque id handed to the client on connect
        principal: Identity resolved at connect time, if any
        closed: Set once the transport has failed or been closed
    """

    connection_id: str
    transport: Transport
    principal: Optional[Principal] = None
    outbox: asyncio.Queue = field(default_factory=asyncio.Queue)
    writer: Optional[asyncio.Task] = None
    closed: bool = False


def new_connection_id() -> str:
    return uuid4().hex


class ConnectionRegistry:
    """
    Registry of live connections.

    Usage:
        registry = ConnectionRegistry()
        registry.register(connection_id, websocket, principal)
        registry.send(connection_id, {"type": "connection_established"})
        registry.unregister(connection_id)
    """

    def __init__(self, outbox_size: int = 256) -> None:
        self._outbox_size = outbox_size
        self._connections: dict[str, Connection] = {}

    def register(
        self,
        connection_id: str,
        transport: Transport,
        principal: Optional[Principal] = None,
    ) -> Connection:
        """
        Record a transport and start its writer task.

        Must be called from within the running event loop.
        """
        if connection_id in self._connections:
            self.unregister(connection_id)

        connection = Connection(
            connection_id=connection_id,
            transport=transport,
            principal=principal,
            outbox=asyncio.Queue(maxsize=self._outbox_size),
        )
        connection.writer = asyncio.create_task(
            self._write_loop(connection),
            name=f"ws-writer-{connection_id}",
        )
        self._connections[connection_id] = connection
        logger.debug("Connection registered", connection_id=connection_id)
        return connection

    def unregister(self, connection_id: str) -> None:
        """Forget a connection and stop its writer. Unknown ids are ignored."""
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return
        connection.closed = True
        if connection.writer is not None:
            connection.writer.cancel()
        logger.debug("Connection unregistered", connection_id=connection_id)

    def exists(self, connection_id: str) -> bool:
        connection = self._connections.get(connection_id)
        return connection is not None and not connection.closed

    def get(self, connection_id: str) -> Optional[Connection]:
        return self._connections.get(connection_id)

    def mark_closed(self, connection_id: str) -> None:
        """Stop delivering to a connection without forgetting it yet."""
        connection = self._connections.get(connection_id)
        if connection is not None:
            connection.closed = True

    def send(self, connection_id: str, payload: dict[str, Any]) -> bool:
        """
        Enqueue a push for one connection.

        Never raises. Unknown, closed or saturated connections are
        logged and skipped.

        Returns:
            True if the payload was queued
        """
        connection = self._connections.get(connection_id)
        if connection is None or connection.closed:
            DELIVERY_FAILURES.labels(reason="unknown_connection").inc()
            logger.debug("Skipping push to unknown connection", connection_id=connection_id)
            return False

        try:
            connection.outbox.put_nowait(payload)
        except asyncio.QueueFull:
            DELIVERY_FAILURES.labels(reason="outbox_full").inc()
            logger.warning(
                "Outbox full, dropping push",
                connection_id=connection_id,
                event_type=payload.get("type"),
            )
            return False

        FANOUT_DELIVERIES.labels(event_type=str(payload.get("type", "unknown"))).inc()
        return True

    async def _write_loop(self, connection: Connection) -> None:
        while True:
            payload = await connection.outbox.get()
            try:
                if not connection.closed:
                    await connection.transport.send_json(payload)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # Remaining queued pushes are discarded; the fetch path recovers them
                connection.closed = True
                DELIVERY_FAILURES.labels(reason="transport_error").inc()
                logger.warning(
                    "Push failed, connection marked closed",
                    connection_id=connection.connection_id,
                    error=type(e).__name__,
                )
            finally:
                connection.outbox.task_done()

    async def drain(self) -> None:
        """Wait until every queued push has been written or discarded."""
        await asyncio.gather(
            *(c.outbox.join() for c in list(self._connections.values()) if not c.writer.done())
        )

    async def close(self) -> None:
        """Stop all writers (application shutdown)."""
        writers = [c.writer for c in self._connections.values() if c.writer is not None]
        for connection_id in list(self._connections):
            self.unregister(connection_id)
        await asyncio.gather(*writers, return_exceptions=True)

    @property
    def connection_ids(self) -> list[str]:
        return list(self._connections)

    def __len__(self) -> int:
        return len(self._connections)
