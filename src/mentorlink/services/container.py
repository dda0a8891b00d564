"""
Service Container

Wires the messaging core together around one SessionStore. The
container is owned by the application (stored on `app.state`); no
component is a module-level singleton.
"""

from dataclasses import dataclass
from typing import Optional

from mentorlink.config.settings import Settings
from mentorlink.infrastructure.auth import TokenVerifier
from mentorlink.infrastructure.store import SessionStore
from mentorlink.services.messaging import (
    AccessControlGate,
    MessageService,
    SessionLifecycleService,
    UnreadAggregator,
)
from mentorlink.services.realtime import ConnectionRegistry, SessionMembershipIndex, TypingRelay
from mentorlink.services.safety import (
    EmergencyDetector,
    EscalationService,
    KeywordEmergencyDetector,
)


@dataclass
class ServiceContainer:
    store: SessionStore
    verifier: TokenVerifier
    registry: ConnectionRegistry
    membership: SessionMembershipIndex
    typing: TypingRelay
    gate: AccessControlGate
    detector: EmergencyDetector
    escalations: EscalationService
    messages: MessageService
    unread: UnreadAggregator
    sessions: SessionLifecycleService

    async def close(self) -> None:
        await self.registry.close()


def build_container(
    settings: Settings,
    store: SessionStore,
    detector: Optional[EmergencyDetector] = None,
) -> ServiceContainer:
    """
    Build every service for one process.

    Args:
        settings: Application settings
        store: Storage backend
        detector: Crisis detector override (defaults to the keyword list)
    """
    registry = ConnectionRegistry(outbox_size=settings.realtime.outbox_size)
    membership = SessionMembershipIndex(registry)
    gate = AccessControlGate(store)
    detector = detector or KeywordEmergencyDetector(
        extra_keywords=settings.safety.extra_crisis_keywords,
    )
    escalations = EscalationService(store, membership, settings.safety.crisis_alert_message)

    return ServiceContainer(
        store=store,
        verifier=TokenVerifier(settings.jwt, allow_passthrough=settings.allows_token_passthrough()),
        registry=registry,
        membership=membership,
        typing=TypingRelay(membership),
        gate=gate,
        detector=detector,
        escalations=escalations,
        messages=MessageService(
            store,
            gate,
            membership,
            detector,
            escalations,
            default_page_size=settings.realtime.default_page_size,
            max_page_size=settings.realtime.max_page_size,
        ),
        unread=UnreadAggregator(store),
        sessions=SessionLifecycleService(
            store,
            gate,
            verify_mentors_on_registration=settings.auto_verifies_mentors(),
        ),
    )
