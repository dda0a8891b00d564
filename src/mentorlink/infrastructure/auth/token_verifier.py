"""
Token Verification and Principal Resolution

Turns transport credentials into a Principal:
- Bearer JWT (python-jose, `sub` claim) -> authenticated user
- studentId without a usable token      -> anonymous student

SECURITY: A token that is present but invalid is rejected outright.
It never silently degrades to the anonymous path.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import uuid4

from jose import JWTError, jwt

from mentorlink.config.settings import JWTSettings
from mentorlink.domain.errors import AuthenticationError
from mentorlink.domain.models import Principal

ANONYMOUS_TOKEN = "anonymous"


class TokenVerifier:
    """
    Verifies bearer tokens and extracts the account id.

    In development with passthrough enabled, a token that is not a
    JWT is taken verbatim as the user id.
    """

    def __init__(self, settings: JWTSettings, allow_passthrough: bool = False) -> None:
        self._secret = settings.secret_key.get_secret_value()
        self._algorithm = settings.algorithm
        self._allow_passthrough = allow_passthrough

    def verify(self, token: str) -> str:
        """
        Args:
            token: Raw bearer token

        Returns:
            Authenticated user id

        Raises:
            AuthenticationError: Token cannot be verified
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            if self._allow_passthrough:
                return token
            raise AuthenticationError("Invalid or expired token") from e

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationError("Token has no subject")
        return str(subject)

    def issue(self, user_id: str, expires_in: timedelta = timedelta(hours=1)) -> str:
        """Sign a short-lived access token (local tooling and tests)."""
        claims: dict[str, Any] = {
            "sub": str(user_id),
            "jti": uuid4().hex,
            "exp": datetime.now(timezone.utc) + expires_in,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def resolve(self, token: Optional[str], student_id: Optional[str]) -> Principal:
        """
        Resolve the caller identity.

        Raises:
            AuthenticationError: Neither a valid token nor a studentId
        """
        if token and token != ANONYMOUS_TOKEN:
            return Principal.authenticated(self.verify(token))
        if student_id:
            return Principal.anonymous(student_id)
        raise AuthenticationError()


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer ...` header value."""
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()
