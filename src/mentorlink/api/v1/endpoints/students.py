"""Student registration and the available-mentor roster."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from mentorlink.api.dependencies import get_container, get_optional_principal
from mentorlink.domain.models import Principal
from mentorlink.services.container import ServiceContainer

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Register a student")
async def register_student(
    payload: Any = Body(default=None),
    principal: Optional[Principal] = Depends(get_optional_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    """
    Without a bearer token the profile is anonymous; the returned
    `studentId` is then the caller's credential for every other call.
    """
    profile = await container.sessions.register_student(payload or {}, principal)
    return {"student": profile.to_dict(), "studentId": profile.id}


@router.get("/mentors/available", summary="List mentors open to new sessions")
async def list_available_mentors(
    category: Optional[str] = Query(default=None),
    page: int = Query(default=1),
    limit: int = Query(default=20),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    """Active, verified mentors; `category` filters by specialization."""
    mentors = await container.sessions.list_available_mentors(category, page, limit)
    return {
        "mentors": [m.to_dict() for m in mentors],
        "pagination": {"page": page, "limit": limit, "total": len(mentors)},
    }
