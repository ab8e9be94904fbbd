"""
guarded_api.auth.ownership

Single-resource ownership check for get/update/delete operations.

Responsibilities:
- Decide, over already-fetched data, whether a principal may act on a resource.
- Hide soft-deleted and cross-tenant resources behind NotFoundError.
"""

from __future__ import annotations

from guarded_api.auth.models import AccessGrant, Principal, ResourceRef, ScopeKind
from guarded_api.auth.roles import role_spec
from guarded_api.errors import AuthorizationError, AuthorizationReason, NotFoundError
from guarded_api.observability.logging import get_logger

log = get_logger(__name__)


def check_access(
    principal: Principal,
    resource: ResourceRef,
    *,
    tenant_id: str | None = None,
    include_deleted: bool = False,
) -> AccessGrant:
    """
    Rules, first match wins:

    1. soft-deleted -> NotFound (skipped only for administrative restores)
    2. tenant-scope caller outside the resource's tenant -> NotFound
    3. caller's role manages the resource type -> ROLE
    4. caller owns the resource -> OWNER
    5. caller holds an active membership on the resource -> MEMBERSHIP
    6. otherwise -> Forbidden

    `tenant_id` is the caller's resolved tenant and is required for tenant-scope roles.
    """

    spec = role_spec(principal.role)
    not_found = NotFoundError(f"{resource.resource_type} not found")

    if resource.deleted_at is not None and not include_deleted:
        raise not_found

    if spec.scope is ScopeKind.tenant and (
        tenant_id is None or resource.tenant_id != tenant_id
    ):
        raise not_found

    if spec.manages_type(resource.resource_type):
        return AccessGrant.role

    if resource.owner_id is not None and resource.owner_id == principal.subject_id:
        return AccessGrant.owner

    if principal.subject_id in resource.member_ids:
        return AccessGrant.membership

    log.warning(
        "access_denied",
        subject_id=principal.subject_id,
        role=principal.role.value,
        resource_type=resource.resource_type,
        resource_id=resource.id,
    )
    raise AuthorizationError(AuthorizationReason.forbidden)


# --- Module Notes -----------------------------------------------------------
# Membership ids are fetched by the service layer before calling `check_access`,
# so this function never touches the store.
