"""
TaskNest Backend — Profile SQLAlchemy Model
=============================================

What:  ORM model for the `profiles` table: local accounts identified by a
       unique display name and protected by a bcrypt password hash.
Who:   ProfileService (CRUD, login), ChecklistService (password-confirmed
       delete) and ShareService (receiver lookup by name, sender join).

The `password_hash` column is never copied into a response schema; every
API model that represents a profile is built from an explicit field list.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tasknest.database import Base


class Profile(Base):
    """A local account that owns checklists and sends/receives share requests."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Unique display name; also the lookup key for share requests
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    avatar_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_profiles_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, name='{self.name}')>"
