"""
TaskNest Backend — Task SQLAlchemy Model
==========================================

What:  ORM model for the `tasks` table. Tasks form a forest per checklist
       through the self-referencing `parent_id` column.
Who:   TaskService (CRUD) and ChecklistCloner (deep copy).

Invariants:
    - A parent, if set, belongs to the same checklist (checked by TaskService).
    - `order_num` is a presentation hint; duplicates are allowed.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tasknest.database import Base


class Task(Base):
    """A unit of work, optionally nested under a parent task."""

    __tablename__ = "tasks"

    # Fields copied verbatim when a checklist is cloned
    COPYABLE_FIELDS = (
        "title",
        "description",
        "order_num",
        "start_time",
        "end_time",
        "allocated_time",
        "is_completed",
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    checklist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
    )

    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        nullable=True,
        default=None,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    order_num: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    start_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    # Time budget in minutes
    allocated_time: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)

    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_tasks_checklist_order", checklist_id, order_num),
        Index("idx_tasks_checklist_created", checklist_id, created_at),
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', parent_id={self.parent_id})>"
