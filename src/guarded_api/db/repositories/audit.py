"""
guarded_api.db.repositories.audit

Repository for `AuditEvent` entities.

Responsibilities:
- Append audit events for guarded mutations.
- Query the audit trail of a single target.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.auth.models import Principal
from guarded_api.db.models import AuditEvent


class AuditRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def record(
        self,
        *,
        actor: Principal,
        operation: str,
        target_type: str,
        target_id: str,
        details: dict[str, Any] | None = None,
    ) -> AuditEvent:
        # Audit events are append-only (no update/delete) in normal operation.
        ev = AuditEvent(
            actor_id=actor.subject_id,
            actor_role=actor.role.value,
            operation=operation,
            target_type=target_type,
            target_id=target_id,
            details=details or {},
        )
        self._session.add(ev)
        await self._session.flush()
        return ev

    async def list_for_target(
        self, target_type: str, target_id: str, *, limit: int = 200
    ) -> list[AuditEvent]:
        # Newest first.
        stmt = (
            select(AuditEvent)
            .where(AuditEvent.target_type == target_type, AuditEvent.target_id == target_id)
            .order_by(desc(AuditEvent.created_at))
            .limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# Written by every mutating service method in the same transaction as the change.
