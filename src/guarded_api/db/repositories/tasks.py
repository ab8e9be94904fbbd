"""
guarded_api.db.repositories.tasks

Repository for `Task` entities.

Responsibilities:
- Create and fetch tasks (including soft-deleted rows for admin restores).
- Apply partial updates, soft deletes and restores.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.db.base import utcnow
from guarded_api.db.models import Task, TaskPriority, TaskStatus


class TaskRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, task_id: str) -> Task | None:
        return await self._session.get(Task, task_id)

    async def create(
        self,
        *,
        board_id: str,
        organization_id: str,
        owner_id: str,
        title: str,
        description: str | None,
        status: TaskStatus,
        priority: TaskPriority,
        due_at: datetime | None,
    ) -> Task:
        task = Task(
            board_id=board_id,
            organization_id=organization_id,
            owner_id=owner_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_at=due_at,
        )
        self._session.add(task)
        await self._session.flush()
        return task

    async def patch(self, task: Task, changes: dict[str, Any]) -> Task:
        for name, value in changes.items():
            setattr(task, name, value)
        task.updated_at = utcnow()
        await self._session.flush()
        return task

    async def soft_delete(self, task: Task) -> None:
        task.deleted_at = utcnow()
        await self._session.flush()

    async def restore(self, task: Task) -> None:
        task.deleted_at = None
        task.updated_at = utcnow()
        await self._session.flush()
