"""
TaskNest Backend — Timer Log Service
======================================

What:  Append and list timer logs. Logs are immutable: there is no update
       or delete operation.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.exceptions import DatabaseError
from tasknest.models.timer_log import TimerLog
from tasknest.schemas.timer_log import TimerLogCreate, TimerLogResponse
from tasknest.services.checklist_service import ChecklistService, checklist_service as default_checklists

logger = logging.getLogger(__name__)


class TimerLogService:

    def __init__(self, checklists: ChecklistService = default_checklists):
        self.checklists = checklists

    async def append_log(
        self, db: AsyncSession, checklist_id: UUID, data: TimerLogCreate
    ) -> TimerLogResponse:
        await self.checklists.get_checklist_row(db, checklist_id)
        log = TimerLog(checklist_id=checklist_id, elapsed_seconds=data.elapsed_seconds)
        try:
            db.add(log)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error writing timer log for %s: %s", checklist_id, e)
            raise DatabaseError(message="Could not save the timer log. Please try again.")
        return TimerLogResponse.model_validate(log)

    async def list_logs(self, db: AsyncSession, checklist_id: UUID) -> List[TimerLogResponse]:
        """Timer logs of a checklist, newest first."""
        try:
            result = await db.execute(
                select(TimerLog)
                .where(TimerLog.checklist_id == checklist_id)
                .order_by(TimerLog.created_at.desc())
            )
            logs = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing timer logs for %s: %s", checklist_id, e)
            raise DatabaseError(message="Could not retrieve timer logs. Please try again.")
        return [TimerLogResponse.model_validate(log) for log in logs]


timer_log_service = TimerLogService()
