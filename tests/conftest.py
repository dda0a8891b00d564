"""Tests configuration and fixtures."""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from mentorlink.config import Settings
from mentorlink.domain.enums import VerificationStatus
from mentorlink.domain.models import (
    MentorProfile,
    MentorSession,
    Principal,
    StudentProfile,
)
from mentorlink.infrastructure.store import InMemorySessionStore
from mentorlink.main import create_application
from mentorlink.services.container import ServiceContainer, build_container

STUDENT_USER = "student-user-1"
MENTOR_USER = "mentor-user-1"
OUTSIDER_USER = "outsider-user-1"


class RecordingTransport:
    """Stands in for a WebSocket; records every pushed payload."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail = fail

    async def send_json(self, data: Any) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.sent.append(data)

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [p for p in self.sent if p.get("type") == event_type]


@dataclass
class Seed:
    """Profiles and sessions shared by most tests."""

    student: StudentProfile
    anonymous_student: StudentProfile
    mentor: MentorProfile
    other_mentor: MentorProfile
    session: MentorSession
    anonymous_session: MentorSession

    @property
    def student_principal(self) -> Principal:
        return Principal.authenticated(STUDENT_USER)

    @property
    def mentor_principal(self) -> Principal:
        return Principal.authenticated(MENTOR_USER)

    @property
    def anonymous_principal(self) -> Principal:
        return Principal.anonymous(self.anonymous_student.id)

    @property
    def outsider_principal(self) -> Principal:
        return Principal.authenticated(OUTSIDER_USER)


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: in-memory store, fixed JWT secret."""
    return Settings(
        env="development",
        debug=True,
        store_backend="memory",
    )


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


async def seed_store(store) -> Seed:
    """Create two students, two mentors and two active sessions."""
    student = await store.create_student(
        StudentProfile(user_id=STUDENT_USER, display_name="Riya")
    )
    anonymous_student = await store.create_student(
        StudentProfile(is_anonymous=True, display_name="Quiet Owl")
    )
    mentor = await store.create_mentor(
        MentorProfile(
            user_id=MENTOR_USER,
            name="Dr. Mehta",
            email="mehta@example.org",
            verification_status=VerificationStatus.VERIFIED,
        )
    )
    other_mentor = await store.create_mentor(
        MentorProfile(
            user_id="mentor-user-2",
            name="Sam",
            email="sam@example.org",
            verification_status=VerificationStatus.PENDING,
        )
    )
    session = await store.create_session(
        MentorSession(student_id=student.id, mentor_id=mentor.id)
    )
    anonymous_session = await store.create_session(
        MentorSession(student_id=anonymous_student.id, mentor_id=mentor.id)
    )
    return Seed(
        student=student,
        anonymous_student=anonymous_student,
        mentor=mentor,
        other_mentor=other_mentor,
        session=session,
        anonymous_session=anonymous_session,
    )


@pytest.fixture
async def seed(store: InMemorySessionStore) -> Seed:
    return await seed_store(store)


@pytest.fixture
async def container(test_settings: Settings, store: InMemorySessionStore):
    services = build_container(test_settings, store)
    yield services
    await services.close()


@pytest.fixture
def connect(container: ServiceContainer):
    """
    Register a recording transport on the container's registry.

    Usage (inside an async test):
        connection_id, transport = connect(principal=seed.mentor_principal)
    """
    counter = iter(range(1, 10_000))

    def _connect(
        principal: Optional[Principal] = None,
        transport: Optional[RecordingTransport] = None,
        connection_id: Optional[str] = None,
    ) -> tuple[str, RecordingTransport]:
        transport = transport or RecordingTransport()
        connection_id = connection_id or f"conn-{next(counter)}"
        container.registry.register(connection_id, transport, principal)
        return connection_id, transport

    return _connect


@pytest.fixture
def make_transport():
    """Factory for standalone transports (e.g. RecordingTransport(fail=True))."""
    return RecordingTransport


@pytest.fixture
def auth_headers(container: ServiceContainer):
    """Build an Authorization header carrying a freshly signed token."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {container.verifier.issue(user_id)}"}

    return _headers


@pytest.fixture
async def api_client(test_settings: Settings, container: ServiceContainer, seed: Seed):
    """HTTP client bound to an app sharing the test container and seeded store."""
    app = create_application(test_settings, container=container)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@dataclass
class SocketEnv:
    client: TestClient
    container: ServiceContainer
    seed: Seed

    def token_for(self, user_id: str) -> str:
        return self.container.verifier.issue(user_id)

    def headers_for(self, user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token_for(user_id)}"}


@pytest.fixture
def socket_env(test_settings: Settings):
    """
    Synchronous app + TestClient for WebSocket tests.

    The store is seeded before the client starts; the app's own
    event loop then owns every connection writer.
    """
    store = InMemorySessionStore()
    seeded = asyncio.run(seed_store(store))
    services = build_container(test_settings, store)
    app = create_application(test_settings, container=services)
    with TestClient(app) as client:
        yield SocketEnv(client=client, container=services, seed=seeded)
