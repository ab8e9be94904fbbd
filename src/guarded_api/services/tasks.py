"""
guarded_api.services.tasks

Task operations.

Responsibilities:
- List tasks within the caller's visibility scope.
- Get/update/delete a single task after the ownership check.
- Create tasks on boards the caller may act on.
- Restore soft-deleted tasks (administrators only).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.auth.models import Principal, ResourceRef
from guarded_api.db.base import to_naive_utc
from guarded_api.db.models import Task
from guarded_api.db.repositories.boards import BoardRepo
from guarded_api.db.repositories.tasks import TaskRepo
from guarded_api.errors import ConflictError, NotFoundError, ValidationError
from guarded_api.observability.logging import get_logger
from guarded_api.query.filters import FilterSpec
from guarded_api.schemas import (
    PageOut,
    Pagination,
    TaskCreate,
    TaskListRequest,
    TaskOut,
    TaskSummary,
    TaskUpdate,
    iso,
)
from guarded_api.services.base import GuardedService
from guarded_api.services.boards import board_ref
from guarded_api.services.resources import TASKS
from guarded_api.settings import Settings

log = get_logger(__name__)


class TaskService(GuardedService):
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        super().__init__(session=session, settings=settings)
        self._tasks = TaskRepo(session)
        self._boards = BoardRepo(session)

    async def list_tasks(self, principal: Principal, body: TaskListRequest) -> PageOut[TaskSummary]:
        filters = (
            FilterSpec()
            .contains("title", body.search)
            .eq("status", body.status)
            .eq("priority", body.priority)
            .eq("board_id", body.board_id)
            .eq("organization_id", body.organization_id)
            .eq("owner_id", body.owner_id)
            .between("due_at", to_naive_utc(body.due_from), to_naive_utc(body.due_to))
        )
        query = await self._visibility.build(
            principal,
            TASKS,
            filters=filters,
            sort=body.sort,
            direction=body.order,
            page=body.page,
            limit=body.limit,
        )
        rows, info = await self._pages.fetch(query)
        return PageOut[TaskSummary](
            pagination=Pagination.from_info(info),
            data=[TaskSummary.from_row(t) for t in rows],
        )

    async def get_task(self, principal: Principal, task_id: str) -> TaskOut:
        task = await self._load(principal, task_id)
        return TaskOut.from_row(task)

    async def create_task(self, principal: Principal, body: TaskCreate) -> TaskOut:
        board = await self._boards.get(body.board_id)
        if board is None:
            raise NotFoundError("board not found")
        await self._authorize(principal, await board_ref(self._boards, board))

        task = await self._tasks.create(
            board_id=board.id,
            organization_id=board.organization_id,
            owner_id=principal.subject_id,
            title=body.title,
            description=body.description,
            status=body.status,
            priority=body.priority,
            due_at=to_naive_utc(body.due_at),
        )
        await self._audit.record(
            actor=principal,
            operation="CREATE",
            target_type="task",
            target_id=task.id,
            details={"board_id": board.id, "title": task.title},
        )
        await self._session.commit()
        log.info("task_created", task_id=task.id, board_id=board.id)
        return TaskOut.from_row(task)

    async def update_task(self, principal: Principal, task_id: str, body: TaskUpdate) -> TaskOut:
        task = await self._load(principal, task_id)

        changes: dict[str, Any] = body.model_dump(exclude_unset=True)
        if "title" in changes and changes["title"] is None:
            raise ValidationError("title cannot be null")
        for required in ("status", "priority"):
            if required in changes and changes[required] is None:
                raise ValidationError(f"{required} cannot be null")
        if "due_at" in changes:
            changes["due_at"] = to_naive_utc(changes["due_at"])

        before = {name: _audit_value(getattr(task, name)) for name in changes}
        await self._tasks.patch(task, changes)
        after = {name: _audit_value(getattr(task, name)) for name in changes}

        await self._audit.record(
            actor=principal,
            operation="UPDATE",
            target_type="task",
            target_id=task.id,
            details={"before": before, "after": after},
        )
        await self._session.commit()
        return TaskOut.from_row(task)

    async def delete_task(self, principal: Principal, task_id: str) -> None:
        task = await self._load(principal, task_id)
        await self._tasks.soft_delete(task)
        await self._audit.record(
            actor=principal, operation="DELETE", target_type="task", target_id=task.id
        )
        await self._session.commit()

    async def restore_task(self, principal: Principal, task_id: str) -> TaskOut:
        task = await self._tasks.get(task_id)
        if task is None:
            raise NotFoundError("task not found")
        await self._authorize(principal, await self._task_ref(task), include_deleted=True)
        if task.deleted_at is None:
            raise ConflictError("task is not deleted")

        await self._tasks.restore(task)
        await self._audit.record(
            actor=principal, operation="RESTORE", target_type="task", target_id=task.id
        )
        await self._session.commit()
        return TaskOut.from_row(task)

    async def _load(self, principal: Principal, task_id: str) -> Task:
        task = await self._tasks.get(task_id)
        if task is None:
            raise NotFoundError("task not found")
        await self._authorize(principal, await self._task_ref(task))
        return task

    async def _task_ref(self, task: Task) -> ResourceRef:
        # Members of the task's board may act on the task.
        return ResourceRef(
            resource_type="task",
            id=task.id,
            owner_id=task.owner_id,
            member_ids=await self._boards.active_member_ids(task.board_id),
            tenant_id=task.organization_id,
            deleted_at=task.deleted_at,
        )


def _audit_value(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return iso(value)
    if hasattr(value, "value"):
        return value.value
    return value
