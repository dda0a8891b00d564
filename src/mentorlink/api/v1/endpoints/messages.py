"""
Message Endpoints

Fetch (with mark-read side effect), send and unread count.
The live WebSocket channel only accelerates delivery; these
endpoints are the ground truth.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from mentorlink.api.dependencies import (
    get_container,
    get_optional_principal,
    get_principal,
    principal_or_body,
)
from mentorlink.domain.models import Principal
from mentorlink.services.container import ServiceContainer

router = APIRouter()


@router.get("/session/{session_id}", summary="Fetch session messages")
async def get_session_messages(
    session_id: str,
    page: int = Query(default=1),
    limit: Optional[int] = Query(default=None),
    principal: Principal = Depends(get_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    """
    Messages in sent order. Every message from the other participant
    is marked read as a side effect.
    """
    result = await container.messages.fetch_messages(session_id, principal, page, limit)
    return result.to_dict()


@router.post("/send", status_code=status.HTTP_201_CREATED, summary="Send a message")
async def send_message(
    payload: Any = Body(default=None),
    principal: Optional[Principal] = Depends(get_optional_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    """
    Persist and broadcast a message. `senderId`/`senderType` in the
    body are ignored; the sender is resolved from the caller.
    """
    caller = principal_or_body(principal, payload)
    message = await container.messages.send_payload(caller, payload)
    return {"message": message.to_dict()}


@router.get("/unread", summary="Unread message count")
async def get_unread_count(
    principal: Principal = Depends(get_principal),
    container: ServiceContainer = Depends(get_container),
) -> dict:
    summary = await container.unread.unread_count(principal)
    return summary.to_dict()
