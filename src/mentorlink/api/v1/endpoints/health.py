"""
Health Check Endpoints

Liveness and readiness probes for load balancers and Kubernetes.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from mentorlink import __version__
from mentorlink.api.dependencies import get_container
from mentorlink.config import get_settings
from mentorlink.services.container import ServiceContainer

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str


class ReadinessResponse(BaseModel):
    """Readiness with per-component health."""

    ready: bool
    components: dict


@router.get("", response_model=HealthResponse, summary="Health check")
async def health_check() -> HealthResponse:
    """Returns 200 while the process is running."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=get_settings().env,
    )


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness check")
async def readiness_check(
    container: ServiceContainer = Depends(get_container),
) -> ReadinessResponse:
    """
    Checks the session store round trip and reports live connection counts.
    """
    components: dict = {}
    try:
        components["store"] = await container.store.health_check()
    except Exception:
        components["store"] = False
    components["connections"] = len(container.registry)
    components["activeSessions"] = container.membership.session_count

    return ReadinessResponse(ready=bool(components["store"]), components=components)
