"""Database models for VoxStory.

SQLAlchemy models for:
- Users and their story preferences
- Projects (generated stories with narrated audio)

All models use async SQLAlchemy (asyncpg for PostgreSQL, aiosqlite for SQLite).
"""

from .database import Base, Database
from .project import Project
from .user import DEFAULT_GENRE, DEFAULT_VOICE, User

__all__ = [
    # Database
    "Base",
    "Database",
    # User model
    "User",
    "DEFAULT_GENRE",
    "DEFAULT_VOICE",
    # Project model
    "Project",
]
