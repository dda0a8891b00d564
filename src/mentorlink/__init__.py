"""
MentorLink - Anonymous Mentor-Student Support Backend

Real-time mentor/student messaging with session-scoped fan-out,
typing relay, unread tracking and crisis escalation.
"""

__version__ = "0.1.0"
