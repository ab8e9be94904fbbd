"""
guarded_api.services.notifications

Notification operations (recipient-scoped).

Responsibilities:
- List notifications addressed to the caller.
- Get and mark a single notification as read.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.auth.models import Principal, ResourceRef
from guarded_api.db.models import Notification
from guarded_api.db.repositories.notifications import NotificationRepo
from guarded_api.errors import NotFoundError
from guarded_api.query.filters import FilterSpec
from guarded_api.schemas import (
    NotificationListRequest,
    NotificationOut,
    PageOut,
    Pagination,
    iso,
)
from guarded_api.services.base import GuardedService
from guarded_api.services.resources import NOTIFICATIONS
from guarded_api.settings import Settings


class NotificationService(GuardedService):
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        super().__init__(session=session, settings=settings)
        self._notifications = NotificationRepo(session)

    async def list_notifications(
        self, principal: Principal, body: NotificationListRequest
    ) -> PageOut[NotificationOut]:
        filters = (
            FilterSpec()
            .contains("title", body.search)
            .present("read_at", body.is_read)
            .eq("recipient_id", body.recipient_id)
        )
        query = await self._visibility.build(
            principal,
            NOTIFICATIONS,
            filters=filters,
            sort=body.sort,
            direction=body.order,
            page=body.page,
            limit=body.limit,
        )
        rows, info = await self._pages.fetch(query)
        return PageOut[NotificationOut](
            pagination=Pagination.from_info(info),
            data=[NotificationOut.from_row(n) for n in rows],
        )

    async def get_notification(self, principal: Principal, notification_id: str) -> NotificationOut:
        return NotificationOut.from_row(await self._load(principal, notification_id))

    async def mark_read(self, principal: Principal, notification_id: str) -> NotificationOut:
        notification = await self._load(principal, notification_id)
        if await self._notifications.mark_read(notification):
            await self._audit.record(
                actor=principal,
                operation="UPDATE",
                target_type="notification",
                target_id=notification.id,
                details={"read_at": iso(notification.read_at)},
            )
            await self._session.commit()
        return NotificationOut.from_row(notification)

    async def _load(self, principal: Principal, notification_id: str) -> Notification:
        notification = await self._notifications.get(notification_id)
        if notification is None:
            raise NotFoundError("notification not found")
        await self._authorize(
            principal,
            ResourceRef(
                resource_type="notification",
                id=notification.id,
                owner_id=notification.recipient_id,
                deleted_at=notification.deleted_at,
            ),
        )
        return notification
