"""Authentication adapter."""

from mentorlink.infrastructure.auth.token_verifier import (
    ANONYMOUS_TOKEN,
    TokenVerifier,
    bearer_token,
)

__all__ = ["ANONYMOUS_TOKEN", "TokenVerifier", "bearer_token"]
