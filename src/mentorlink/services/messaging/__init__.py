"""Messaging services: access control, send/fetch, unread counts and session lifecycle."""

from mentorlink.services.messaging.access_control import (
    AccessControlGate,
    AccessDecision,
    AccessOutcome,
    resolve_member,
)
from mentorlink.services.messaging.message_service import MessagePage, MessageService
from mentorlink.services.messaging.session_service import SessionLifecycleService
from mentorlink.services.messaging.unread import UnreadAggregator, UnreadSummary

__all__ = [
    "AccessControlGate",
    "AccessDecision",
    "AccessOutcome",
    "resolve_member",
    "MessagePage",
    "MessageService",
    "SessionLifecycleService",
    "UnreadAggregator",
    "UnreadSummary",
]
