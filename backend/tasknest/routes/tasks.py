"""
TaskNest Backend — Task Route Handlers
========================================
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.database import get_db_session
from tasknest.schemas.common import ErrorResponse
from tasknest.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from tasknest.services.task_service import task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Tasks"])


@router.post(
    "/tasks",
    status_code=201,
    response_model=TaskResponse,
    responses={
        400: {"description": "Missing field or parent in another checklist", "model": ErrorResponse},
        404: {"description": "Checklist or parent task not found", "model": ErrorResponse},
    },
    summary="Create a task or sub-task",
)
async def create_task(
    body: TaskCreate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> TaskResponse:
    return await task_service.create_task(db, body)


@router.get(
    "/checklists/{checklist_id}/tasks",
    response_model=List[TaskResponse],
    summary="List a checklist's tasks by order number",
)
async def list_tasks(
    checklist_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[TaskResponse]:
    return await task_service.list_tasks(db, checklist_id)


@router.put(
    "/tasks/{task_id}",
    response_model=TaskResponse,
    responses={404: {"description": "Task not found", "model": ErrorResponse}},
    summary="Update the fields present in the body",
)
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> TaskResponse:
    return await task_service.update_task(db, task_id, body)


@router.delete(
    "/tasks/{task_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a task",
)
async def delete_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await task_service.delete_task(db, task_id)
    return Response(status_code=204)
