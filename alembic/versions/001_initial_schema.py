"""Initial schema - profiles, mentor sessions, messages, escalations

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the MentorLink database schema:
- student_profiles: Students, including anonymous ones
- mentor_profiles: Verified mentors
- mentor_student_sessions: One row per mentor-student conversation
- mentor_student_messages: Session messages (never deleted)
- emergency_escalations: Append-only crisis audit trail
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'student_profiles',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('display_name', sa.String(120), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('concern_areas', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_student_profiles_user_id', 'student_profiles', ['user_id'])

    op.create_table(
        'mentor_profiles',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('mentor_type', sa.String(30), nullable=False),
        sa.Column('specialization', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('verification_status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_online', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('total_sessions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_mentor_profiles_user_id', 'mentor_profiles', ['user_id'])
    op.create_index('ix_mentor_profiles_verification_status', 'mentor_profiles', ['verification_status'])

    op.create_table(
        'mentor_student_sessions',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('student_id', sa.String(36), nullable=False),
        sa.Column('mentor_id', sa.String(36), nullable=False),
        sa.Column('category_id', sa.String(36), nullable=True),
        sa.Column('session_type', sa.String(20), nullable=False, server_default='chat'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('priority', sa.String(10), nullable=False, server_default='normal'),
        sa.Column('session_title', sa.String(200), nullable=True),
        sa.Column('initial_concern', sa.Text(), nullable=True),
        sa.Column('mentor_notes', sa.Text(), nullable=True),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('outcome', sa.String(20), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['student_id'], ['student_profiles.id']),
        sa.ForeignKeyConstraint(['mentor_id'], ['mentor_profiles.id']),
        sa.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='ck_sessions_rating_range'),
    )
    op.create_index('ix_mentor_student_sessions_student_id', 'mentor_student_sessions', ['student_id'])
    op.create_index('ix_mentor_student_sessions_mentor_id', 'mentor_student_sessions', ['mentor_id'])
    op.create_index('ix_mentor_student_sessions_status', 'mentor_student_sessions', ['status'])
    op.create_index('ix_mentor_student_sessions_updated_at', 'mentor_student_sessions', ['updated_at'])

    # Messages are never deleted; no ON DELETE CASCADE
    op.create_table(
        'mentor_student_messages',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('session_id', sa.String(36), nullable=False),
        sa.Column('sender_id', sa.String(36), nullable=False),
        sa.Column('sender_type', sa.String(10), nullable=False),
        sa.Column('message_type', sa.String(10), nullable=False, server_default='text'),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('attachments', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('is_encrypted', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['session_id'], ['mentor_student_sessions.id']),
    )
    op.create_index('ix_messages_session_sent', 'mentor_student_messages', ['session_id', 'sent_at'])
    op.create_index('ix_messages_unread', 'mentor_student_messages', ['session_id', 'read_at'])

    op.create_table(
        'emergency_escalations',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('session_id', sa.String(36), nullable=False),
        sa.Column('student_id', sa.String(36), nullable=False),
        sa.Column('mentor_id', sa.String(36), nullable=False),
        sa.Column('message_id', sa.String(36), nullable=True),
        sa.Column('escalation_type', sa.String(30), nullable=False),
        sa.Column('severity', sa.String(10), nullable=False),
        sa.Column('trigger_keywords', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('detected_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('action_taken', sa.String(30), nullable=True),
        sa.Column('follow_up_required', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('status', sa.String(10), nullable=False, server_default='open'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['session_id'], ['mentor_student_sessions.id']),
        sa.ForeignKeyConstraint(['student_id'], ['student_profiles.id']),
        sa.ForeignKeyConstraint(['mentor_id'], ['mentor_profiles.id']),
    )
    op.create_index('ix_emergency_escalations_session_id', 'emergency_escalations', ['session_id'])
    op.create_index('ix_emergency_escalations_severity', 'emergency_escalations', ['severity'])
    op.create_index('ix_emergency_escalations_status', 'emergency_escalations', ['status'])


def downgrade() -> None:
    op.drop_table('emergency_escalations')
    op.drop_table('mentor_student_messages')
    op.drop_table('mentor_student_sessions')
    op.drop_table('mentor_profiles')
    op.drop_table('student_profiles')
