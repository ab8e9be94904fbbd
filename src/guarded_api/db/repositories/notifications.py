"""
guarded_api.db.repositories.notifications

Repository for `Notification` entities.

Responsibilities:
- Fetch notifications (including soft-deleted rows; the ownership check hides those).
- Mark notifications read once.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.db.base import utcnow
from guarded_api.db.models import Notification


class NotificationRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, notification_id: str) -> Notification | None:
        return await self._session.get(Notification, notification_id)

    async def mark_read(self, notification: Notification) -> bool:
        """
        Returns True when `read_at` was set by this call; already-read rows keep
        their first read time.
        """

        if notification.read_at is not None:
            return False
        notification.read_at = utcnow()
        await self._session.flush()
        return True
