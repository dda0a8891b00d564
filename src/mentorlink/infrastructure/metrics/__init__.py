"""Metrics infrastructure package."""

from mentorlink.infrastructure.metrics.prometheus_metrics import (
    # Connection metrics
    WEBSOCKET_CONNECTIONS,
    SESSION_MEMBERSHIPS,
    # Messaging metrics
    MESSAGES_SENT_TOTAL,
    FANOUT_DELIVERIES,
    DELIVERY_FAILURES,
    TYPING_RELAYS_TOTAL,
    MESSAGE_SEND_DURATION,
    # Safety metrics
    EMERGENCY_DETECTIONS_TOTAL,
    ESCALATION_EVENTS_TOTAL,
    ESCALATION_FAILURES_TOTAL,
    # Helpers
    track_detection,
    track_escalation,
    update_system_info,
    # Router
    metrics_router,
)

__all__ = [
    "WEBSOCKET_CONNECTIONS",
    "SESSION_MEMBERSHIPS",
    "MESSAGES_SENT_TOTAL",
    "FANOUT_DELIVERIES",
    "DELIVERY_FAILURES",
    "TYPING_RELAYS_TOTAL",
    "MESSAGE_SEND_DURATION",
    "EMERGENCY_DETECTIONS_TOTAL",
    "ESCALATION_EVENTS_TOTAL",
    "ESCALATION_FAILURES_TOTAL",
    "track_detection",
    "track_escalation",
    "update_system_info",
    "metrics_router",
]
