"""
TaskNest Backend — Checklist SQLAlchemy Model
===============================================

What:  ORM model for the `checklists` table.
Who:   ChecklistService (CRUD), ChecklistCloner (copies on share accept),
       ShareService (title join for pending requests).

Ownership is a plain indexed `profile_id` column. Deleting a profile or a
checklist removes only that row; dependents are left untouched.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tasknest.database import Base


class Checklist(Base):
    """
    A titled container of tasks owned by one profile.

    `is_shared_copy` is True for checklists produced by accepting a share
    request; the original keeps False.
    """

    __tablename__ = "checklists"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    profile_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    is_shared_copy: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        # Owner listing: WHERE profile_id = :id ORDER BY created_at DESC
        Index("idx_checklists_profile_created", profile_id, created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Checklist(id={self.id}, title='{self.title}', "
            f"shared_copy={self.is_shared_copy})>"
        )
