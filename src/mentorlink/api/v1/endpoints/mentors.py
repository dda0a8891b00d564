"""Mentor registration endpoint."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status

from mentorlink.api.dependencies import get_container, get_optional_principal
from mentorlink.domain.models import Principal
from mentorlink.services.container import ServiceContainer

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Register as a mentor")
async def register_mentor(
    payload: Any = Body(default=None),
    principal: Optional[Principal] = Depends(get_optional_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    """Requires a bearer token; 409 if the account already has a mentor profile."""
    profile = await container.sessions.register_mentor(principal, payload or {})
    return {"mentor": profile.to_dict()}
