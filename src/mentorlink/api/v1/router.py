"""
API v1 Router

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter

from mentorlink.api.v1.endpoints.health import router as health_router
from mentorlink.api.v1.endpoints.messages import router as messages_router
from mentorlink.api.v1.endpoints.mentors import router as mentors_router
from mentorlink.api.v1.endpoints.sessions import router as sessions_router
from mentorlink.api.v1.endpoints.students import router as students_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["Health"])
api_router.include_router(messages_router, prefix="/messages", tags=["Messages"])
api_router.include_router(mentors_router, prefix="/mentors", tags=["Mentors"])
api_router.include_router(sessions_router, prefix="/sessions", tags=["Sessions"])
api_router.include_router(students_router, prefix="/students", tags=["Students"])
