"""
guarded_api.api.routers.notifications

Notification endpoints. Members only ever see notifications addressed to them.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.api.deps import db_session, settings_dep
from guarded_api.auth.deps import require_principal
from guarded_api.auth.models import Principal, RoleTag
from guarded_api.schemas import NotificationListRequest, NotificationOut, PageOut
from guarded_api.services.notifications import NotificationService
from guarded_api.settings import Settings

router = APIRouter(prefix="/v1/notifications", tags=["notifications"])

_notification_roles = require_principal(RoleTag.admin, RoleTag.member)


def notification_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> NotificationService:
    return NotificationService(session=session, settings=settings)


@router.patch("", response_model=PageOut[NotificationOut])
async def search_notifications(
    body: NotificationListRequest,
    principal: Principal = Depends(_notification_roles),
    svc: NotificationService = Depends(notification_service),
) -> PageOut[NotificationOut]:
    return await svc.list_notifications(principal, body)


@router.get("/{notification_id}", response_model=NotificationOut)
async def get_notification(
    notification_id: str,
    principal: Principal = Depends(_notification_roles),
    svc: NotificationService = Depends(notification_service),
) -> NotificationOut:
    return await svc.get_notification(principal, notification_id)


@router.post("/{notification_id}/read", response_model=NotificationOut)
async def mark_notification_read(
    notification_id: str,
    principal: Principal = Depends(_notification_roles),
    svc: NotificationService = Depends(notification_service),
) -> NotificationOut:
    return await svc.mark_read(principal, notification_id)
