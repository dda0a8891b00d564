"""
Database infrastructure components.
"""

from mentorlink.infrastructure.database.connection import Base, DatabaseManager

__all__ = [
    "Base",
    "DatabaseManager",
]
