"""
TaskNest Backend — Checklist Cloner
=====================================

What:  Produces an independent copy of a checklist and its whole task tree
       under a new owner. Used when a share request is accepted.
Who:   ShareService.respond().

Algorithm (id remapping):
    1. Load the source checklist (missing → NotFoundError, fatal).
    2. Insert the copy (`is_shared_copy=True`, same title, new owner).
    3. Load the source tasks in creation order, then move any child that
       was created before its parent behind that parent.
    4. Walk the tasks once, keeping `original id → new id`. Each task's new
       parent is the mapped id of its original parent; no mapping → null.
    5. Each task insert runs in its own SAVEPOINT. A failed insert is logged
       and skipped; it never enters the mapping, so its children are
       re-attached at the root instead of failing the clone.

    Source tasks:            Copy:
        A (root)                 A' (root)
        ├── B                    ├── B'        parent = map[A] = A'
        │   └── C                │   └── C'    parent = map[B] = B'
        └── D                    └── D'

Failure semantics:
    Fetching the source checklist or its tasks, or inserting the copy
    checklist, raises and aborts the request transaction. Per-task failures
    are reported in CloneResult.skipped_task_ids only.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasknest.exceptions import DatabaseError, NotFoundError
from tasknest.models.checklist import Checklist
from tasknest.models.task import Task

logger = logging.getLogger(__name__)


@dataclass
class CloneResult:
    """Outcome of one clone: the new checklist and how each source task fared."""

    checklist: Checklist
    id_map: Dict[UUID, UUID] = field(default_factory=dict)
    skipped_task_ids: List[UUID] = field(default_factory=list)

    @property
    def cloned_count(self) -> int:
        return len(self.id_map)


def order_parents_first(tasks: Sequence[Task]) -> List[Task]:
    """
    Return `tasks` with every parent placed before its children.

    `tasks` is expected in creation order, which already satisfies this in
    practice; rows sharing a timestamp can still come back child-first. A
    child whose parent (present in `tasks`) has not been emitted yet is parked
    under the parent's id and released right after it. Tasks whose parent is
    absent from the list keep their position.

    Rows still parked at the end hang off a parent cycle. Each cycle is
    broken at the first member reached by walking up from the earliest
    leftover row; releasing that member lets the rest of the cycle and its
    descendants follow in parent-first order.
    """
    by_id = {task.id: task for task in tasks}
    waiting: Dict[UUID, List[Task]] = defaultdict(list)
    emitted: set = set()
    ordered: List[Task] = []

    def release(task: Task) -> None:
        stack = [task]
        while stack:
            current = stack.pop()
            if current.id in emitted:
                continue
            ordered.append(current)
            emitted.add(current.id)
            # reversed() so released children keep creation order
            stack.extend(reversed(waiting.pop(current.id, [])))

    for task in tasks:
        parent_id = task.parent_id
        if parent_id is not None and parent_id in by_id and parent_id not in emitted:
            waiting[parent_id].append(task)
        else:
            release(task)

    for task in tasks:
        if task.id not in emitted:
            release(_cycle_entry(task, by_id))
    return ordered


def _cycle_entry(task: Task, by_id: Dict[UUID, Task]) -> Task:
    """First task met twice while walking up the parent chain from `task`."""
    seen = set()
    current = task
    while current.id not in seen:
        seen.add(current.id)
        current = by_id[current.parent_id]
    return current


class ChecklistCloner:
    """Deep-copies a checklist and its task forest inside the caller's session."""

    async def clone(
        self,
        db: AsyncSession,
        source_checklist_id: UUID,
        owner_id: UUID,
    ) -> CloneResult:
        """
        Copy checklist `source_checklist_id` and all of its tasks to `owner_id`.

        Args:
            db: The request's session; nothing is committed here.
            source_checklist_id: Checklist to copy.
            owner_id: Profile that will own the copy.

        Returns:
            CloneResult with the new checklist, the task id mapping and the
            ids of source tasks that could not be copied.

        Raises:
            NotFoundError: The source checklist does not exist.
            DatabaseError: Loading the source or inserting the copy failed.
        """
        try:
            source = await db.get(Checklist, source_checklist_id)
        except SQLAlchemyError as e:
            logger.error("Could not load checklist %s for cloning: %s", source_checklist_id, e)
            raise DatabaseError(
                message="Could not copy the checklist. Please try again.",
                context={"checklist_id": str(source_checklist_id)},
            )
        if source is None:
            raise NotFoundError(resource="checklist", resource_id=str(source_checklist_id))

        try:
            copy = Checklist(profile_id=owner_id, title=source.title, is_shared_copy=True)
            db.add(copy)
            await db.flush()

            result = await db.execute(
                select(Task)
                .where(Task.checklist_id == source_checklist_id)
                .order_by(Task.created_at.asc(), Task.id.asc())
            )
            tasks = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Could not clone checklist %s: %s", source_checklist_id, e)
            raise DatabaseError(
                message="Could not copy the checklist. Please try again.",
                context={"checklist_id": str(source_checklist_id)},
            )

        outcome = CloneResult(checklist=copy)
        for task in order_parents_first(tasks):
            new_parent_id = None
            if task.parent_id is not None:
                new_parent_id = outcome.id_map.get(task.parent_id)
                if new_parent_id is None:
                    logger.warning(
                        "Task %s lost its parent %s during clone; copying it as a root task",
                        task.id,
                        task.parent_id,
                    )

            new_task = Task(
                checklist_id=copy.id,
                parent_id=new_parent_id,
                **{name: getattr(task, name) for name in Task.COPYABLE_FIELDS},
            )
            try:
                async with db.begin_nested():
                    db.add(new_task)
                    await db.flush()
            except SQLAlchemyError as e:
                logger.warning("Skipping task %s while cloning checklist %s: %s", task.id, source_checklist_id, e)
                outcome.skipped_task_ids.append(task.id)
                continue

            outcome.id_map[task.id] = new_task.id

        logger.info(
            "Cloned checklist %s → %s for profile %s (%d tasks copied, %d skipped)",
            source_checklist_id,
            copy.id,
            owner_id,
            outcome.cloned_count,
            len(outcome.skipped_task_ids),
        )
        return outcome


checklist_cloner = ChecklistCloner()
