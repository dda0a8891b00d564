"""
Prometheus Metrics

Messaging and safety metrics for MentorLink observability.
Exposed at /metrics for Prometheus scraping.

ARCHITECTURE: Services only increment/observe. Metrics never
block delivery and never carry message content or profile ids.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)
from fastapi import APIRouter, Response

from mentorlink import __version__

# =============================================================================
# CONNECTION METRICS
# =============================================================================

WEBSOCKET_CONNECTIONS = Gauge(
    "mentorlink_websocket_connections",
    "Active WebSocket connections",
)

SESSION_MEMBERSHIPS = Gauge(
    "mentorlink_session_memberships",
    "Connection-to-session memberships currently held",
)

# =============================================================================
# MESSAGING METRICS
# =============================================================================

MESSAGES_SENT_TOTAL = Counter(
    "mentorlink_messages_sent_total",
    "Messages persisted, by server-resolved sender role",
    ["sender_type"],  # student, mentor
)

FANOUT_DELIVERIES = Counter(
    "mentorlink_fanout_deliveries_total",
    "Pushes enqueued for connected clients",
    ["event_type"],  # new_message, typing_indicator, emergency_alert, ...
)

DELIVERY_FAILURES = Counter(
    "mentorlink_delivery_failures_total",
    "Pushes that could not be delivered",
    ["reason"],  # unknown_connection, outbox_full, transport_error
)

TYPING_RELAYS_TOTAL = Counter(
    "mentorlink_typing_relays_total",
    "Typing indicators relayed",
    ["result"],  # relayed, not_member
)

MESSAGE_SEND_DURATION = Histogram(
    "mentorlink_message_send_duration_seconds",
    "Time to persist and fan out a message",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# =============================================================================
# SAFETY METRICS
# =============================================================================

EMERGENCY_DETECTIONS_TOTAL = Counter(
    "mentorlink_emergency_detections_total",
    "Messages matching crisis language, by category",
    ["category"],
)

ESCALATION_EVENTS_TOTAL = Counter(
    "mentorlink_escalation_events_total",
    "Escalation records written",
    ["escalation_type", "severity"],
)

ESCALATION_FAILURES_TOTAL = Counter(
    "mentorlink_escalation_failures_total",
    "Escalations that raised after the message was delivered",
)

# =============================================================================
# SYSTEM INFO
# =============================================================================

SYSTEM_INFO = Info(
    "mentorlink_system",
    "MentorLink system information",
)

SYSTEM_INFO.info({
    "version": __version__,
    "environment": "development",
})


def update_system_info(environment: str, version: str = __version__) -> None:
    """Update system info metric with current environment."""
    SYSTEM_INFO.info({
        "version": version,
        "environment": environment,
    })


def track_escalation(escalation_type: str, severity: str) -> None:
    ESCALATION_EVENTS_TOTAL.labels(escalation_type=escalation_type, severity=severity).inc()


def track_detection(categories) -> None:
    for category in categories:
        EMERGENCY_DETECTIONS_TOTAL.labels(category=category).inc()


# =============================================================================
# METRICS ENDPOINT
# =============================================================================

metrics_router = APIRouter(tags=["metrics"])


@metrics_router.get("/metrics")
async def metrics() -> Response:
    """Prometheus text exposition."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )
