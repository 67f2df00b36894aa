"""User model.

SQLAlchemy model for user identity, credentials and preferences.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .database import Base

if TYPE_CHECKING:
    from .project import Project

DEFAULT_GENRE = "Fantasy"
DEFAULT_VOICE = "Kore"


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """User account model.

    Stores the login email, bcrypt password hash and story preferences.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(Text, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    favorite_genre: Mapped[str] = mapped_column(
        Text,
        default=DEFAULT_GENRE,
        server_default=DEFAULT_GENRE,
    )
    favorite_voice: Mapped[str] = mapped_column(
        Text,
        default=DEFAULT_VOICE,
        server_default=DEFAULT_VOICE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
    )

    # Relationships
    projects: Mapped[list[Project]] = relationship(
        "Project",
        back_populates="user",
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
