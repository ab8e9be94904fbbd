"""
guarded_api.query.visibility

Visibility filter builder for list/search operations.

Responsibilities:
- Derive the request-scoped `VisibilityScope` for a principal (self, tenant, unrestricted).
- Narrow caller filters so a list query can never widen past the caller's scope.
- Assemble the final `ScopedQuery` (scope + filters + sort + page) before it
  reaches the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import ColumnElement, Select, func, select

from guarded_api.auth.models import Principal, ScopeKind
from guarded_api.auth.roles import role_spec
from guarded_api.errors import AuthorizationError, AuthorizationReason
from guarded_api.observability.logging import get_logger
from guarded_api.query.filters import FilterSpec
from guarded_api.query.pagination import PageRequest
from guarded_api.query.sorting import SortDirection, SortSpec

log = get_logger(__name__)


class TenantDirectory(Protocol):
    async def active_tenant_for(self, subject_id: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class ResourceSpec:
    """
    Static description of a listable resource type.
    """

    name: str
    model: type[Any]
    owner_field: str
    tenant_field: str | None
    filterable: frozenset[str]
    sort: SortSpec
    # None: use the service-wide default page size.
    default_limit: int | None = None


@dataclass(frozen=True, slots=True)
class VisibilityScope:
    kind: ScopeKind
    owner_id: str | None = None
    tenant_id: str | None = None

    def clauses(self, resource: ResourceSpec) -> list[ColumnElement[bool]]:
        model = resource.model
        # Soft-deleted rows are never listed, whatever the scope.
        out: list[ColumnElement[bool]] = [model.deleted_at.is_(None)]
        if self.kind is ScopeKind.self_:
            out.append(getattr(model, resource.owner_field) == self.owner_id)
        elif self.kind is ScopeKind.tenant:
            if resource.tenant_field is None:
                raise AuthorizationError(
                    AuthorizationReason.forbidden,
                    f"{resource.name} is not organization-scoped",
                )
            out.append(getattr(model, resource.tenant_field) == self.tenant_id)
        return out


@dataclass(frozen=True, slots=True)
class ScopedQuery:
    resource: ResourceSpec
    scope: VisibilityScope
    filters: FilterSpec
    sort_field: str
    sort_direction: SortDirection
    page: PageRequest

    def where(self) -> list[ColumnElement[bool]]:
        return [
            *self.scope.clauses(self.resource),
            *self.filters.to_clauses(self.resource.model, self.resource.filterable),
        ]

    def rows_statement(self) -> Select[Any]:
        model = self.resource.model
        return (
            select(model)
            .where(*self.where())
            .order_by(*self.resource.sort.order_by(model, self.sort_field, self.sort_direction))
            .offset(self.page.offset)
            .limit(self.page.limit)
        )

    def count_statement(self) -> Select[Any]:
        return select(func.count()).select_from(self.resource.model).where(*self.where())


class VisibilityFilterBuilder:
    def __init__(self, tenants: TenantDirectory, *, default_limit: int, max_limit: int) -> None:
        self._tenants = tenants
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def tenant_for(self, principal: Principal) -> str:
        """
        One tenant-assignment lookup; no active assignment means no access at all.
        """

        tenant_id = await self._tenants.active_tenant_for(principal.subject_id)
        if tenant_id is None:
            log.warning(
                "access_denied",
                reason="no_active_tenant",
                subject_id=principal.subject_id,
                role=principal.role.value,
            )
            raise AuthorizationError(
                AuthorizationReason.forbidden, "No active organization assignment"
            )
        return tenant_id

    async def scope_for(self, principal: Principal, resource: ResourceSpec) -> VisibilityScope:
        kind = role_spec(principal.role).scope
        if kind is ScopeKind.self_:
            return VisibilityScope(kind=kind, owner_id=principal.subject_id)
        if kind is ScopeKind.tenant:
            if resource.tenant_field is None:
                raise AuthorizationError(
                    AuthorizationReason.forbidden,
                    f"{resource.name} is not organization-scoped",
                )
            return VisibilityScope(kind=kind, tenant_id=await self.tenant_for(principal))
        return VisibilityScope(kind=kind)

    async def build(
        self,
        principal: Principal,
        resource: ResourceSpec,
        *,
        filters: FilterSpec | None = None,
        sort: str | None = None,
        direction: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ScopedQuery:
        # Validate paging before any store lookup.
        page_request = self._page_request(resource, page, limit)
        scope = await self.scope_for(principal, resource)
        filters = self._narrow(principal, resource, scope, filters or FilterSpec())
        sort_field, sort_direction = resource.sort.resolve(sort, direction)
        return ScopedQuery(
            resource=resource,
            scope=scope,
            filters=filters,
            sort_field=sort_field,
            sort_direction=sort_direction,
            page=page_request,
        )

    def build_for_parent(
        self,
        resource: ResourceSpec,
        *,
        parent_field: str,
        parent_id: str,
        sort: str | None = None,
        direction: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ScopedQuery:
        """
        Child rows of a parent the caller was already allowed on via `check_access`.
        Only the parent link and soft-delete exclusion restrict the rows.
        """

        page_request = self._page_request(resource, page, limit)
        sort_field, sort_direction = resource.sort.resolve(sort, direction)
        return ScopedQuery(
            resource=resource,
            scope=VisibilityScope(kind=ScopeKind.unrestricted),
            filters=FilterSpec().eq(parent_field, parent_id),
            sort_field=sort_field,
            sort_direction=sort_direction,
            page=page_request,
        )

    def _page_request(
        self, resource: ResourceSpec, page: int | None, limit: int | None
    ) -> PageRequest:
        return PageRequest.from_params(
            page,
            limit,
            default_limit=resource.default_limit or self._default_limit,
            max_limit=self._max_limit,
        )

    def _narrow(
        self,
        principal: Principal,
        resource: ResourceSpec,
        scope: VisibilityScope,
        filters: FilterSpec,
    ) -> FilterSpec:
        # Scope columns supplied by the caller are replaced by the scope clause itself.
        if scope.kind is ScopeKind.self_:
            scoped_fields = {resource.owner_field}
        elif scope.kind is ScopeKind.tenant:
            scoped_fields = {resource.tenant_field} if resource.tenant_field else set()
        else:
            return filters

        dropped = filters.fields & scoped_fields
        if not dropped:
            return filters
        log.info(
            "scope_narrowed",
            subject_id=principal.subject_id,
            resource_type=resource.name,
            ignored_filters=sorted(dropped),
        )
        return filters.without(*dropped)


# --- Module Notes -----------------------------------------------------------
# Page rows and totals are read by `db.repositories.pages.PageReader`; the builder
# itself performs at most the one tenant lookup.
