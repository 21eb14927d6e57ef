"""
TaskNest Backend — Timer Log Route Handlers
=============================================
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.database import get_db_session
from tasknest.schemas.common import ErrorResponse
from tasknest.schemas.timer_log import TimerLogCreate, TimerLogResponse
from tasknest.services.timer_log_service import timer_log_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Timer Logs"])


@router.post(
    "/checklists/{checklist_id}/timer-logs",
    status_code=201,
    response_model=TimerLogResponse,
    responses={
        400: {"description": "Elapsed seconds missing", "model": ErrorResponse},
        404: {"description": "Checklist not found", "model": ErrorResponse},
    },
    summary="Record time spent on a checklist",
)
async def add_timer_log(
    checklist_id: UUID,
    body: TimerLogCreate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> TimerLogResponse:
    return await timer_log_service.append_log(db, checklist_id, body)


@router.get(
    "/checklists/{checklist_id}/timer-logs",
    response_model=List[TimerLogResponse],
    summary="Timer logs of a checklist (newest first)",
)
async def list_timer_logs(
    checklist_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[TimerLogResponse]:
    return await timer_log_service.list_logs(db, checklist_id)
