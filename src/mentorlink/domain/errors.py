"""
Domain Errors

Exception hierarchy raised by the messaging core.
The HTTP layer maps each type to a status code; the WebSocket
layer drops them silently so session existence is never leaked.
"""

from typing import Any, Optional


class MentorLinkError(Exception):
    """Base exception for all domain errors."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class AuthenticationError(MentorLinkError):
    """No usable principal could be resolved from the request."""

    status_code = 401
    public_message = "Authentication required"


class SessionNotFoundError(MentorLinkError):
    """Referenced session does not exist."""

    status_code = 404
    public_message = "Session not found"

    def __init__(self, session_id: str) -> None:
        super().__init__()
        self.session_id = session_id


class ProfileNotFoundError(MentorLinkError):
    """Referenced student or mentor profile does not exist (or is unavailable)."""

    status_code = 404
    public_message = "Profile not found"

    def __init__(self, kind: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"{kind.capitalize()} profile not found")
        self.kind = kind


class ProfileExistsError(MentorLinkError):
    """Caller already holds a profile of the requested kind."""

    status_code = 409
    public_message = "Profile already exists"

    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind.capitalize()} profile already exists")
        self.kind = kind


class AccessDeniedError(MentorLinkError):
    """Principal is resolved but is not a participant of the session."""

    status_code = 403
    public_message = "Access denied"

    def __init__(self, session_id: str) -> None:
        super().__init__()
        self.session_id = session_id


class MessageValidationError(MentorLinkError):
    """
    Payload failed schema validation.

    Attributes:
        details: Field-level errors, one dict per failing field
            ({"field": "content", "message": "...", "type": "..."})
    """

    status_code = 400
    public_message = "Validation error"

    def __init__(self, details: list[dict[str, Any]]) -> None:
        super().__init__()
        self.details = details

    @classmethod
    def from_pydantic(cls, errors: list[dict[str, Any]]) -> "MessageValidationError":
        """Build from pydantic's ValidationError.errors() output."""
        return cls([
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in errors
        ])


class SessionStateError(MentorLinkError):
    """Requested lifecycle transition is not allowed from the current state."""

    status_code = 409
    public_message = "Invalid session state"
