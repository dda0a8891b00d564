"""WebSocket routes."""

from mentorlink.api.routes.messaging_socket import messaging_socket

__all__ = ["messaging_socket"]
