"""
MentorLink FastAPI Application Entry Point

Application factory with:
- Lifespan management (store, service container, shutdown)
- CORS configuration
- Error handling middleware and domain exception handlers
- REST routers, the messaging WebSocket and /metrics
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mentorlink import __version__
from mentorlink.api.middleware import ErrorHandlerMiddleware, register_exception_handlers
from mentorlink.api.routes import messaging_socket
from mentorlink.api.v1.router import api_router
from mentorlink.config import Settings, get_settings
from mentorlink.config.logging_config import configure_logging, get_logger
from mentorlink.infrastructure.database import DatabaseManager
from mentorlink.infrastructure.metrics import metrics_router, update_system_info
from mentorlink.infrastructure.monitoring import init_sentry
from mentorlink.infrastructure.store import (
    InMemorySessionStore,
    SessionStore,
    SqlAlchemySessionStore,
)
from mentorlink.services.container import ServiceContainer, build_container

logger = get_logger(__name__)


async def open_store(settings: Settings) -> tuple[SessionStore, Optional[DatabaseManager]]:
    """Create the configured store backend."""
    if settings.store_backend == "memory":
        logger.warning("Using in-memory session store; data is lost on restart")
        return InMemorySessionStore(), None

    db = DatabaseManager(url=settings.database.async_url, echo=settings.debug)
    await db.initialize()
    if settings.create_schema_on_startup:
        await db.create_schema()
        logger.info("Database schema ensured")
    return SqlAlchemySessionStore(db), db


def create_application(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings override (defaults to environment settings)
        container: Prebuilt services (tests); built at startup otherwise

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        db: Optional[DatabaseManager] = None
        logger.info("Starting MentorLink", env=settings.env, version=__version__)

        init_sentry(
            settings.sentry.dsn,
            environment=settings.env,
            sample_rate=settings.sentry.sample_rate,
            traces_sample_rate=settings.sentry.traces_sample_rate,
        )
        update_system_info(settings.env)

        try:
            if getattr(app.state, "container", None) is None:
                store, db = await open_store(settings)
                app.state.container = build_container(settings, store)
            yield
        finally:
            logger.info("Shutting down MentorLink")
            current = getattr(app.state, "container", None)
            if current is not None:
                await current.close()
            if db is not None:
                await db.close()
            logger.info("MentorLink shutdown complete")

    app = FastAPI(
        title="MentorLink API",
        description="Real-time mentor-student messaging with crisis escalation",
        version=__version__,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)

    app.include_router(api_router, prefix=f"/api/{settings.api_version}")
    app.include_router(metrics_router)
    app.add_api_websocket_route(settings.realtime.path, messaging_socket)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "name": "MentorLink API",
            "version": __version__,
            "status": "operational",
        }

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "mentorlink.main:app",
        host="0.0.0.0",
        port=8000,
        reload=_settings.env == "development",
        log_level=_settings.log_level.lower(),
    )
