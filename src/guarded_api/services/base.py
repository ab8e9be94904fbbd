"""
guarded_api.services.base

Shared wiring for guarded services.

Responsibilities:
- Build the per-request guard collaborators from an explicit session + settings.
- Resolve the caller's tenant (when its role is tenant-scoped) and run the
  ownership check for single-resource operations.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.auth.models import AccessGrant, Principal, ResourceRef, ScopeKind
from guarded_api.auth.ownership import check_access
from guarded_api.auth.roles import role_spec
from guarded_api.db.repositories.audit import AuditRepo
from guarded_api.db.repositories.pages import PageReader
from guarded_api.db.repositories.tenants import TenantRepo
from guarded_api.query.visibility import VisibilityFilterBuilder
from guarded_api.settings import Settings


class GuardedService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings

        self._tenants = TenantRepo(session)
        self._visibility = VisibilityFilterBuilder(
            self._tenants,
            default_limit=settings.default_page_limit,
            max_limit=settings.max_page_limit,
        )
        self._pages = PageReader(session)
        self._audit = AuditRepo(session)

    async def _authorize(
        self,
        principal: Principal,
        resource: ResourceRef,
        *,
        include_deleted: bool = False,
    ) -> AccessGrant:
        tenant_id: str | None = None
        if role_spec(principal.role).scope is ScopeKind.tenant:
            tenant_id = await self._visibility.tenant_for(principal)
        return check_access(
            principal, resource, tenant_id=tenant_id, include_deleted=include_deleted
        )


# --- Module Notes -----------------------------------------------------------
# Services never reach for a global store handle; everything hangs off the
# session passed in by the API layer (or by a test).
