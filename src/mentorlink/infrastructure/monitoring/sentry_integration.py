"""
Sentry Error Tracking Integration

Error tracking with sensitive data scrubbing. Errors are correlated
with session ids only.

SECURITY: Tokens and message content are stripped before any event
leaves the process. send_default_pii stays off.
"""

import re
from typing import Any, Optional

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from mentorlink import __version__
from mentorlink.config.logging_config import get_logger

logger = get_logger(__name__)

SENSITIVE_PATTERNS = [
    r"token[\"']?\s*[:=]\s*[\"']?[^\"'\s,}&]+",
    r"secret[\"']?\s*[:=]\s*[\"']?[^\"'\s,}]+",
    r"password[\"']?\s*[:=]\s*[\"']?[^\"'\s,}]+",
    r"bearer\s+[a-zA-Z0-9\-._~+/]+=*",
]

SENSITIVE_KEYS = frozenset({
    "password",
    "token",
    "secret",
    "authorization",
    "bearer",
    "credential",
    "jwt",
    "content",
    "feedback",
    "initial_concern",
    "initialconcern",
    "mentor_notes",
    "mentornotes",
})

REDACTED = "[REDACTED]"


def _scrub_string(value: str) -> str:
    for pattern in SENSITIVE_PATTERNS:
        value = re.sub(pattern, REDACTED, value, flags=re.IGNORECASE)
    return value


def _scrub(value: Any) -> Any:
    """Recursively scrub dicts, lists and strings."""
    if isinstance(value, dict):
        scrubbed = {}
        for key, item in value.items():
            key_lower = str(key).lower().replace("-", "_")
            if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
                scrubbed[key] = REDACTED
            else:
                scrubbed[key] = _scrub(item)
        return scrubbed
    if isinstance(value, list):
        return [_scrub(item) for item in value]
    if isinstance(value, str):
        return _scrub_string(value)
    return value


def before_send(event: dict, hint: dict) -> Optional[dict]:
    """Scrub request data, query strings, breadcrumbs and extras."""
    request = event.get("request")
    if request:
        for field in ("data", "headers"):
            if field in request:
                request[field] = _scrub(request[field])
        if isinstance(request.get("query_string"), str):
            request["query_string"] = _scrub_string(request["query_string"])

    for breadcrumb in event.get("breadcrumbs", {}).get("values", []):
        if isinstance(breadcrumb.get("data"), dict):
            breadcrumb["data"] = _scrub(breadcrumb["data"])

    if "extra" in event:
        event["extra"] = _scrub(event["extra"])
    return event


def before_breadcrumb(breadcrumb: dict, hint: dict) -> Optional[dict]:
    # SQL parameters may contain message content
    if breadcrumb.get("category") == "query":
        breadcrumb.pop("data", None)
    if "message" in breadcrumb and isinstance(breadcrumb["message"], str):
        breadcrumb["message"] = _scrub_string(breadcrumb["message"])
    return breadcrumb


def init_sentry(
    dsn: str,
    environment: str = "development",
    release: str = f"mentorlink@{__version__}",
    sample_rate: float = 1.0,
    traces_sample_rate: float = 0.1,
) -> bool:
    """
    Initialize Sentry error tracking.

    Returns:
        True when Sentry was enabled
    """
    if not dsn:
        logger.warning("Sentry DSN not configured, error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        sample_rate=sample_rate,
        traces_sample_rate=traces_sample_rate,
        before_send=before_send,
        before_breadcrumb=before_breadcrumb,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            AsyncioIntegration(),
            LoggingIntegration(level=None, event_level=None),
        ],
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )
    logger.info("Sentry initialized", environment=environment, release=release)
    return True


def capture_exception_with_context(
    exception: Exception,
    session_id: Optional[str] = None,
    extra: Optional[dict] = None,
) -> Optional[str]:
    """
    Capture exception tagged with the session it happened in.

    Returns: Sentry event ID (None when Sentry is disabled)
    """
    with sentry_sdk.new_scope() as scope:
        if session_id:
            scope.set_tag("session_id", session_id)
        if extra:
            for key, value in _scrub(extra).items():
                scope.set_extra(key, value)
        return scope.capture_exception(exception)


def capture_safety_event(message: str, extra: Optional[dict] = None) -> Optional[str]:
    """Record an escalation as a warning-level Sentry message."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("category", "safety")
        if extra:
            for key, value in _scrub(extra).items():
                scope.set_extra(key, value)
        return scope.capture_message(message, level="warning")
