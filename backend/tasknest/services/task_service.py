"""
TaskNest Backend — Task Service
=================================

What:  Create, list, partially update and delete tasks.

Rules enforced here:
    - The owning checklist must exist (404).
    - A parent task must exist (404) and belong to the same checklist (400).
    - Updates are presence-driven: only keys sent in the JSON body change.
      `title`, `order_num` and `is_completed` cannot be set to null.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.exceptions import DatabaseError, NotFoundError, ValidationError
from tasknest.models.task import Task
from tasknest.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from tasknest.services.checklist_service import ChecklistService, checklist_service as default_checklists

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = {"title", "order_num", "is_completed"}


class TaskService:

    def __init__(self, checklists: ChecklistService = default_checklists):
        self.checklists = checklists

    async def create_task(self, db: AsyncSession, data: TaskCreate) -> TaskResponse:
        await self.checklists.get_checklist_row(db, data.checklist_id)

        if data.parent_id is not None:
            parent = await self.get_task_row(db, data.parent_id)
            if parent.checklist_id != data.checklist_id:
                raise ValidationError(
                    message="Parent task belongs to a different checklist",
                    field="parent_id",
                    context={"parent_id": str(data.parent_id)},
                )

        task = Task(**data.model_dump())
        try:
            db.add(task)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating task: %s", e, exc_info=True)
            raise DatabaseError(message="Could not create the task. Please try again.")
        return TaskResponse.model_validate(task)

    async def list_tasks(self, db: AsyncSession, checklist_id: UUID) -> List[TaskResponse]:
        """
        All tasks of a checklist as a flat list ordered by `order_num`.

        Sub-tasks are interleaved with their parents; the client rebuilds the
        tree from `parent_id`.
        """
        try:
            result = await db.execute(
                select(Task)
                .where(Task.checklist_id == checklist_id)
                .order_by(Task.order_num.asc(), Task.created_at.asc())
            )
            tasks = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing tasks for %s: %s", checklist_id, e)
            raise DatabaseError(message="Could not retrieve tasks. Please try again.")
        return [TaskResponse.model_validate(t) for t in tasks]

    async def update_task(self, db: AsyncSession, task_id: UUID, data: TaskUpdate) -> TaskResponse:
        changes = data.model_dump(exclude_unset=True)
        for name in NON_NULLABLE_FIELDS:
            if name in changes and changes[name] is None:
                raise ValidationError(message=f"{name} cannot be null", field=name)

        task = await self.get_task_row(db, task_id)
        for name, value in changes.items():
            setattr(task, name, value)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating task %s: %s", task_id, e)
            raise DatabaseError(context={"task_id": str(task_id)})
        return TaskResponse.model_validate(task)

    async def delete_task(self, db: AsyncSession, task_id: UUID) -> None:
        # Sub-tasks keep their parent_id; they are not deleted with it
        try:
            await db.execute(delete(Task).where(Task.id == task_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting task %s: %s", task_id, e)
            raise DatabaseError(context={"task_id": str(task_id)})

    async def get_task_row(self, db: AsyncSession, task_id: UUID) -> Task:
        try:
            task = await db.get(Task, task_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching task %s: %s", task_id, e)
            raise DatabaseError(context={"task_id": str(task_id)})
        if task is None:
            raise NotFoundError(resource="task", resource_id=str(task_id))
        return task


task_service = TaskService()
