"""
MentorLink Logging Configuration

Structured logging built on structlog:
- Console rendering in development, JSON elsewhere
- Correlation ID per HTTP request, connection ID per WebSocket
- Redaction of credentials and of conversation content

PRIVACY: Student/mentor message bodies must never reach log sinks.
Any key that looks like content or a credential is replaced before rendering.
"""

import logging
import sys
from typing import Any

import structlog

from mentorlink import __version__
from mentorlink.config.settings import Settings


# Key fragments whose values are never rendered
REDACTED_KEY_FRAGMENTS: frozenset[str] = frozenset({
    "password",
    "token",
    "secret",
    "authorization",
    "bearer",
    "credential",
    "content",
    "feedback",
    "initial_concern",
})


def _redact(key: str, value: Any) -> Any:
    lowered = key.lower()
    if any(fragment in lowered for fragment in REDACTED_KEY_FRAGMENTS):
        return "[REDACTED]"
    if isinstance(value, dict):
        return {k: _redact(k, v) for k, v in value.items()}
    return value


def _redact_private_fields(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Replace values of sensitive keys (credentials, message bodies)."""
    return {key: _redact(key, value) for key, value in event_dict.items()}


def _add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    event_dict.setdefault("service", "mentorlink")
    event_dict.setdefault("version", __version__)
    return event_dict


def build_processors(json_output: bool) -> list[Any]:
    """
    Assemble the structlog processor chain.

    Args:
        json_output: Render JSON lines instead of colored console output

    Returns:
        Ordered processor list
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        _redact_private_fields,
        _add_service_context,
    ]

    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    return processors


def configure_logging(settings: Settings) -> None:
    """
    Configure structlog and the stdlib root logger.

    Call once at process start, before the first logger is used.

    Args:
        settings: Application settings
    """
    level = getattr(logging, settings.log_level.upper())

    structlog.configure(
        processors=build_processors(json_output=settings.env != "development"),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    for noisy in ("uvicorn.access", "websockets", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger (typically get_logger(__name__))."""
    return structlog.get_logger(name)


def bind_correlation_id(correlation_id: str) -> None:
    """Attach a request correlation ID to every log line in this context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def bind_connection_context(connection_id: str, principal_kind: str) -> None:
    """Attach WebSocket connection identity to every log line in this context."""
    structlog.contextvars.bind_contextvars(
        connection_id=connection_id,
        principal_kind=principal_kind,
    )


def clear_context() -> None:
    """Clear all context variables (call at end of request or connection)."""
    structlog.contextvars.clear_contextvars()
