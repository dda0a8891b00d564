"""
Session Endpoints

Request, list, read, complete and rate mentor sessions, and read
the escalation audit trail.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from mentorlink.api.dependencies import (
    get_container,
    get_optional_principal,
    get_principal,
    principal_or_body,
)
from mentorlink.domain.enums import SessionStatus
from mentorlink.domain.models import Principal
from mentorlink.services.container import ServiceContainer

router = APIRouter()


@router.post("/request", status_code=status.HTTP_201_CREATED, summary="Request a session")
async def request_session(
    payload: Any = Body(default=None),
    principal: Optional[Principal] = Depends(get_optional_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    caller = principal_or_body(principal, payload)
    session = await container.sessions.request_session(caller, payload or {})
    return {"session": session.to_dict()}


@router.get("", summary="List own sessions")
async def list_sessions(
    session_status: Optional[SessionStatus] = Query(default=None, alias="status"),
    page: int = Query(default=1),
    limit: int = Query(default=20),
    principal: Principal = Depends(get_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    sessions = await container.sessions.list_sessions(principal, session_status, page, limit)
    return {"sessions": [s.to_dict() for s in sessions], "page": page}


@router.get("/{session_id}", summary="Session detail")
async def get_session(
    session_id: str,
    principal: Principal = Depends(get_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    participants = await container.sessions.get_session(session_id, principal)
    return participants.to_dict()


@router.post("/{session_id}/complete", summary="Complete a session (mentor)")
async def complete_session(
    session_id: str,
    payload: Any = Body(default=None),
    principal: Principal = Depends(get_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    session = await container.sessions.complete_session(session_id, principal, payload or {})
    return {"session": session.to_dict()}


@router.post("/{session_id}/rate", summary="Rate a completed session (student)")
async def rate_session(
    session_id: str,
    payload: Any = Body(default=None),
    principal: Principal = Depends(get_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    session = await container.sessions.rate_session(session_id, principal, payload or {})
    return {"session": session.to_dict()}


@router.get("/{session_id}/escalations", summary="Escalation audit trail (mentor)")
async def list_escalations(
    session_id: str,
    principal: Principal = Depends(get_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    events = await container.sessions.list_escalations(session_id, principal)
    return {"escalations": [e.to_dict() for e in events]}
