"""
guarded_api.services.audit

Read access to the append-only audit trail (administrators only).
"""

from __future__ import annotations

from guarded_api.auth.models import Principal
from guarded_api.schemas import AuditEventOut
from guarded_api.services.base import GuardedService


class AuditService(GuardedService):
    async def list_events(
        self, principal: Principal, target_type: str, target_id: str
    ) -> list[AuditEventOut]:
        # The router admits administrators only; they may read any target's trail.
        events = await self._audit.list_for_target(target_type, target_id)
        return [AuditEventOut.from_row(ev) for ev in events]
