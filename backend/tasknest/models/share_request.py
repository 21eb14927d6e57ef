"""
TaskNest Backend — ShareRequest SQLAlchemy Model
==================================================

What:  ORM model for the `share_requests` table.
Who:   ShareService.

Lifecycle:
    pending → accepted   (receiver gets a cloned copy of the checklist)
    pending → rejected
    Both transitions happen at most once; accepted/rejected are terminal.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tasknest.database import Base

STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_REJECTED = "rejected"


class ShareRequest(Base):
    """An offer from `sender_id` to copy checklist `checklist_id` into `receiver_id`'s account."""

    __tablename__ = "share_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    checklist_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    sender_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    receiver_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=STATUS_PENDING,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        # Inbox query: WHERE receiver_id = :id AND status = 'pending'
        Index("idx_share_requests_receiver_status", receiver_id, status),
    )

    def __repr__(self) -> str:
        return f"<ShareRequest(id={self.id}, status='{self.status}')>"
