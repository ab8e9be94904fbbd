"""
guarded_api.db.repositories.tenants

Repository for organizations and staff organization assignments.

Responsibilities:
- Resolve a staff account's current tenant (the visibility builder's tenant directory).
- Fetch organizations for existence checks.
"""

from __future__ import annotations

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.db.models import Organization, OrgAssignment


class TenantRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def active_tenant_for(self, subject_id: str) -> str | None:
        # Most recent active assignment wins if data ever holds more than one.
        stmt = (
            select(OrgAssignment.organization_id)
            .join(Organization, Organization.id == OrgAssignment.organization_id)
            .where(
                OrgAssignment.staff_id == subject_id,
                OrgAssignment.deleted_at.is_(None),
                Organization.deleted_at.is_(None),
            )
            .order_by(desc(OrgAssignment.created_at))
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_active_organization(self, organization_id: str) -> Organization | None:
        stmt = select(Organization).where(
            Organization.id == organization_id, Organization.deleted_at.is_(None)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()
