"""
Mentor Session Database Models

ORM models for sessions, their messages, and escalation records.

PRIVACY: Message content is sensitive and flagged encrypted.
Messages and escalations are never deleted (audit trail).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from mentorlink.domain.models.base import new_id
from mentorlink.infrastructure.database.connection import Base
from mentorlink.infrastructure.database.models.profile_models import JSONType


class MentorSessionModel(Base):
    """Table: mentor_student_sessions"""

    __tablename__ = "mentor_student_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    student_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("student_profiles.id"), nullable=False, index=True
    )
    mentor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("mentor_profiles.id"), nullable=False, index=True
    )
    category_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    session_type: Mapped[str] = mapped_column(String(20), default="chat", nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default="active",
        nullable=False,
        index=True,
        doc="active, completed, terminated, escalated",
    )
    priority: Mapped[str] = mapped_column(
        String(10), default="normal", nullable=False, doc="low, normal, high, urgent"
    )
    session_title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    initial_concern: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mentor_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    outcome: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, doc="Minutes")
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
        doc="Freshness timestamp, bumped on every message",
    )

    def __repr__(self) -> str:
        return f"<MentorSessionModel(id={self.id}, status='{self.status}', priority='{self.priority}')>"


class SessionMessageModel(Base):
    """Table: mentor_student_messages"""

    __tablename__ = "mentor_student_messages"
    __table_args__ = (
        Index("ix_messages_session_sent", "session_id", "sent_at"),
        Index("ix_messages_unread", "session_id", "read_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    session_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("mentor_student_sessions.id"), nullable=False
    )
    sender_id: Mapped[str] = mapped_column(String(36), nullable=False, doc="Student or mentor profile id")
    sender_type: Mapped[str] = mapped_column(String(10), nullable=False, doc="student or mentor")
    message_type: Mapped[str] = mapped_column(String(10), default="text", nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    attachments: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)
    is_encrypted: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<SessionMessageModel(id={self.id}, session_id={self.session_id}, sender_type='{self.sender_type}')>"


class EscalationModel(Base):
    """Table: emergency_escalations"""

    __tablename__ = "emergency_escalations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    session_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("mentor_student_sessions.id"), nullable=False, index=True
    )
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("student_profiles.id"), nullable=False)
    mentor_id: Mapped[str] = mapped_column(String(36), ForeignKey("mentor_profiles.id"), nullable=False)
    message_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    escalation_type: Mapped[str] = mapped_column(String(30), nullable=False)
    severity: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    trigger_keywords: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)
    detected_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    action_taken: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    follow_up_required: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    status: Mapped[str] = mapped_column(String(10), default="open", nullable=False, index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<EscalationModel(id={self.id}, type='{self.escalation_type}', severity='{self.severity}')>"
