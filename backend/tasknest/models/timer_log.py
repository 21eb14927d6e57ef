"""
TaskNest Backend — TimerLog SQLAlchemy Model
==============================================

What:  Append-only record of time spent on a checklist. Rows are never
       updated; the service exposes only insert and list.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tasknest.database import Base


class TimerLog(Base):
    __tablename__ = "timer_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    checklist_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    elapsed_seconds: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_timer_logs_checklist_created", checklist_id, created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<TimerLog(id={self.id}, elapsed_seconds={self.elapsed_seconds})>"
