"""
Session Lifecycle Service

Everything around a conversation that is not the message path:
student and mentor registration, the available-mentor roster, session
request, listing, detail, completion by the mentor, rating by the
student, and the escalation audit trail.

SAFETY_NOTE: Completion is refused for terminal sessions only. An
escalated session can still be completed by its mentor. Completion and
rating write only their own columns, and completion only lands if the
status is unchanged since it was read, so neither can undo a concurrent
escalation.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from mentorlink.config.logging_config import get_logger
from mentorlink.domain.enums import SenderType, SessionStatus, VerificationStatus
from mentorlink.domain.errors import (
    AccessDeniedError,
    AuthenticationError,
    MessageValidationError,
    ProfileExistsError,
    ProfileNotFoundError,
    SessionStateError,
)
from mentorlink.domain.models import (
    EscalationEvent,
    MentorProfile,
    MentorSession,
    Principal,
    SessionParticipants,
    StudentProfile,
)
from mentorlink.domain.models.base import utc_now
from mentorlink.infrastructure.store import SessionStore
from mentorlink.services.messaging.access_control import AccessControlGate
from mentorlink.services.messaging.schemas import (
    CompleteSessionRequest,
    RateSessionRequest,
    RegisterMentorRequest,
    RegisterStudentRequest,
    SessionRequest,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(model: type[ModelT], payload: Mapping[str, Any]) -> ModelT:
    """Validate a request body into `model` or raise MessageValidationError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise MessageValidationError.from_pydantic(e.errors()) from e


@dataclass
class ParticipantProfiles:
    student: Optional[StudentProfile] = None
    mentor: Optional[MentorProfile] = None


class SessionLifecycleService:
    def __init__(
        self,
        store: SessionStore,
        gate: AccessControlGate,
        verify_mentors_on_registration: bool = False,
    ) -> None:
        self._store = store
        self._gate = gate
        self._verify_mentors_on_registration = verify_mentors_on_registration

    async def resolve_profiles(self, principal: Principal) -> ParticipantProfiles:
        """Profiles the principal may act as. Anonymous ids must be flagged anonymous."""
        if principal.is_authenticated:
            return ParticipantProfiles(
                student=await self._store.get_student_by_user(principal.user_id),
                mentor=await self._store.get_mentor_by_user(principal.user_id),
            )
        student = await self._store.get_student(principal.anonymous_student_id)
        if student is None or not student.is_anonymous:
            return ParticipantProfiles()
        return ParticipantProfiles(student=student)

    async def register_student(
        self,
        payload: Mapping[str, Any],
        principal: Optional[Principal] = None,
    ) -> StudentProfile:
        """
        Create a student profile.

        Without an authenticated principal the profile is anonymous and
        its id becomes the caller's credential.
        """
        request = parse_payload(RegisterStudentRequest, payload)
        user_id = principal.user_id if principal and principal.is_authenticated else None
        if user_id is not None:
            existing = await self._store.get_student_by_user(user_id)
            if existing is not None:
                return existing

        profile = await self._store.create_student(
            StudentProfile(
                user_id=user_id,
                is_anonymous=user_id is None,
                display_name=request.display_name,
                concern_areas=request.concern_areas,
            )
        )
        logger.info("Student registered", anonymous=profile.is_anonymous)
        return profile

    async def register_mentor(
        self,
        principal: Optional[Principal],
        payload: Mapping[str, Any],
    ) -> MentorProfile:
        """
        Create a mentor profile for an authenticated account.

        New mentors start `pending` and cannot be requested until
        verified, unless registration verifies them (development only).

        Raises:
            AuthenticationError: No authenticated principal
            ProfileExistsError: The account already has a mentor profile
        """
        if principal is None or not principal.is_authenticated:
            raise AuthenticationError()
        request = parse_payload(RegisterMentorRequest, payload)
        if await self._store.get_mentor_by_user(principal.user_id) is not None:
            raise ProfileExistsError("mentor")

        profile = await self._store.create_mentor(
            MentorProfile(
                user_id=principal.user_id,
                name=request.name,
                email=request.email,
                mentor_type=request.mentor_type,
                specialization=request.specialization,
                verification_status=(
                    VerificationStatus.VERIFIED
                    if self._verify_mentors_on_registration
                    else VerificationStatus.PENDING
                ),
            )
        )
        logger.info(
            "Mentor registered",
            mentor_id=profile.id,
            verification_status=profile.verification_status.value,
        )
        return profile

    async def list_available_mentors(
        self,
        specialization: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Sequence[MentorProfile]:
        """Mentors that can be requested right now, by name."""
        page, limit = max(1, page), min(max(1, limit), 100)
        return await self._store.list_available_mentors(
            specialization=specialization or None,
            offset=(page - 1) * limit,
            limit=limit,
        )

    async def request_session(
        self,
        principal: Principal,
        payload: Mapping[str, Any],
    ) -> MentorSession:
        """
        Open an active session with an available mentor.

        Raises:
            ProfileNotFoundError: No student profile, or mentor unavailable
        """
        request = parse_payload(SessionRequest, payload)
        student = (await self.resolve_profiles(principal)).student
        if student is None:
            raise ProfileNotFoundError("student")

        mentor = await self._store.get_mentor(request.mentor_id)
        if mentor is None or not mentor.is_available:
            raise ProfileNotFoundError("mentor", "Mentor not found or unavailable")

        now = utc_now()
        session = await self._store.create_session(
            MentorSession(
                student_id=student.id,
                mentor_id=mentor.id,
                category_id=request.category_id,
                session_type=request.session_type,
                priority=request.priority,
                session_title=request.session_title,
                initial_concern=request.initial_concern,
                status=SessionStatus.ACTIVE,
                started_at=now,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info(
            "Session requested",
            session_id=session.id,
            session_type=session.session_type.value,
            priority=session.priority.value,
        )
        return session

    async def list_sessions(
        self,
        principal: Principal,
        status: Optional[SessionStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Sequence[MentorSession]:
        """
        Sessions of the caller, most recently active first.

        A user holding both profiles sees their student sessions.
        """
        profiles = await self.resolve_profiles(principal)
        page, limit = max(1, page), min(max(1, limit), 100)
        offset = (page - 1) * limit

        if profiles.student is not None:
            return await self._store.list_sessions(
                student_id=profiles.student.id, status=status, offset=offset, limit=limit
            )
        if profiles.mentor is not None:
            return await self._store.list_sessions(
                mentor_id=profiles.mentor.id, status=status, offset=offset, limit=limit
            )
        return []

    async def get_session(self, session_id: str, principal: Principal) -> SessionParticipants:
        decision = await self._gate.require(session_id, principal)
        return decision.participants

    async def complete_session(
        self,
        session_id: str,
        principal: Principal,
        payload: Mapping[str, Any],
    ) -> MentorSession:
        """
        Raises:
            AccessDeniedError: Caller is not the session's mentor
            SessionStateError: Session already closed, or its status changed
                while completing
        """
        request = parse_payload(CompleteSessionRequest, payload)
        decision = await self._gate.require(session_id, principal)
        if decision.role != SenderType.MENTOR:
            raise AccessDeniedError(session_id)

        session = decision.participants.session
        read_status = session.status
        session.complete(
            summary=request.summary,
            outcome=request.outcome,
            mentor_notes=request.mentor_notes,
        )
        stored = await self._store.complete_session(session, read_status)
        if stored is None:
            logger.warning("Session changed while completing", session_id=session_id)
            raise SessionStateError("Session changed while completing; reload and retry")
        logger.info(
            "Session completed",
            session_id=session_id,
            duration_minutes=stored.duration_minutes,
        )
        return stored

    async def rate_session(
        self,
        session_id: str,
        principal: Principal,
        payload: Mapping[str, Any],
    ) -> MentorSession:
        """
        Raises:
            AccessDeniedError: Caller is not the session's student
            SessionStateError: Not completed, or already rated
        """
        request = parse_payload(RateSessionRequest, payload)
        decision = await self._gate.require(session_id, principal)
        if decision.role != SenderType.STUDENT:
            raise AccessDeniedError(session_id)

        session = decision.participants.session
        session.rate(request.rating, request.feedback)
        stored = await self._store.rate_session(session_id, request.rating, request.feedback)
        if stored is None:
            raise SessionStateError("Session is not completed or has already been rated")
        logger.info("Session rated", session_id=session_id, rating=stored.rating)
        return stored

    async def list_escalations(
        self,
        session_id: str,
        principal: Principal,
    ) -> Sequence[EscalationEvent]:
        """Escalation audit trail, visible to the session's mentor only."""
        decision = await self._gate.require(session_id, principal)
        if decision.role != SenderType.MENTOR:
            raise AccessDeniedError(session_id)
        return await self._store.list_escalations(session_id)
