"""
guarded_api.api.routers.tasks

Task endpoints.

Responsibilities:
- Search tasks (PATCH with a filter body) within the caller's visibility scope.
- CRUD on single tasks; soft delete and administrator restore.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from guarded_api.api.deps import db_session, settings_dep
from guarded_api.auth.deps import require_principal
from guarded_api.auth.models import Principal, RoleTag
from guarded_api.schemas import (
    PageOut,
    TaskCreate,
    TaskListRequest,
    TaskOut,
    TaskSummary,
    TaskUpdate,
)
from guarded_api.services.tasks import TaskService
from guarded_api.settings import Settings

router = APIRouter(prefix="/v1/tasks", tags=["tasks"])

_task_roles = require_principal(RoleTag.admin, RoleTag.staff, RoleTag.member)
_admin_only = require_principal(RoleTag.admin)


def task_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> TaskService:
    return TaskService(session=session, settings=settings)


@router.patch("", response_model=PageOut[TaskSummary])
async def search_tasks(
    body: TaskListRequest,
    principal: Principal = Depends(_task_roles),
    svc: TaskService = Depends(task_service),
) -> PageOut[TaskSummary]:
    return await svc.list_tasks(principal, body)


@router.post("", response_model=TaskOut, status_code=HTTP_201_CREATED)
async def create_task(
    body: TaskCreate,
    principal: Principal = Depends(_task_roles),
    svc: TaskService = Depends(task_service),
) -> TaskOut:
    return await svc.create_task(principal, body)


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(
    task_id: str,
    principal: Principal = Depends(_task_roles),
    svc: TaskService = Depends(task_service),
) -> TaskOut:
    return await svc.get_task(principal, task_id)


@router.put("/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    principal: Principal = Depends(_task_roles),
    svc: TaskService = Depends(task_service),
) -> TaskOut:
    return await svc.update_task(principal, task_id, body)


@router.delete("/{task_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    principal: Principal = Depends(_task_roles),
    svc: TaskService = Depends(task_service),
) -> None:
    await svc.delete_task(principal, task_id)


@router.post("/{task_id}/restore", response_model=TaskOut)
async def restore_task(
    task_id: str,
    principal: Principal = Depends(_admin_only),
    svc: TaskService = Depends(task_service),
) -> TaskOut:
    return await svc.restore_task(principal, task_id)


# --- Module Notes -----------------------------------------------------------
# Search uses PATCH with a JSON body so filters, sort and paging share one typed
# request model.
