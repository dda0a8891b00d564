"""
API Dependencies

Resolve the service container and the calling principal for
request handlers.

Principal sources, in order:
1. `Authorization: Bearer <jwt>` (the literal token `anonymous` is ignored)
2. `studentId` query parameter (anonymous student)
"""

from typing import Optional

from fastapi import Depends, Header, Query, Request

from mentorlink.domain.errors import AuthenticationError
from mentorlink.domain.models import Principal
from mentorlink.infrastructure.auth import ANONYMOUS_TOKEN, bearer_token
from mentorlink.services.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("Service container not initialized")
    return container


async def get_optional_principal(
    authorization: Optional[str] = Header(default=None),
    student_id: Optional[str] = Query(default=None, alias="studentId"),
    container: ServiceContainer = Depends(get_container),
) -> Optional[Principal]:
    """
    Principal if credentials were presented, else None.

    Raises:
        AuthenticationError: A bearer token was presented but is invalid
    """
    token = bearer_token(authorization)
    if (token and token != ANONYMOUS_TOKEN) or student_id:
        return container.verifier.resolve(token, student_id)
    return None


async def get_principal(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise AuthenticationError()
    return principal


def principal_or_body(
    principal: Optional[Principal],
    payload: object,
) -> Principal:
    """Fall back to a `studentId` carried in the JSON body (anonymous sends)."""
    if principal is not None:
        return principal
    if isinstance(payload, dict):
        student_id = payload.get("studentId")
        if isinstance(student_id, str) and student_id:
            return Principal.anonymous(student_id)
    raise AuthenticationError()
