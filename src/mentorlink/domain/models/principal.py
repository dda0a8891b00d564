"""
Principal

The resolved identity of a caller. Exactly one of the two
identifiers is set: an authenticated user id (from a verified
bearer token) or an anonymous student profile id.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Principal:
    """
    Caller identity consumed by the access gate and unread aggregator.

    Attributes:
        user_id: Authenticated account id (linked from profiles)
        anonymous_student_id: Student profile id presented without auth
    """

    user_id: Optional[str] = None
    anonymous_student_id: Optional[str] = None

    def __post_init__(self) -> None:
        if bool(self.user_id) == bool(self.anonymous_student_id):
            raise ValueError("Principal needs exactly one of user_id or anonymous_student_id")

    @classmethod
    def authenticated(cls, user_id: str) -> "Principal":
        return cls(user_id=user_id)

    @classmethod
    def anonymous(cls, student_id: str) -> "Principal":
        return cls(anonymous_student_id=student_id)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def kind(self) -> str:
        return "user" if self.is_authenticated else "anonymous_student"
