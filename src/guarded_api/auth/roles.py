"""
guarded_api.auth.roles

Role registry: one entry per role tag instead of one authorize function per role.

Responsibilities:
- Map each role tag to its account table, visibility scope and managed types.
- Parse untrusted role claims into `RoleTag` values.
"""

from __future__ import annotations

from dataclasses import dataclass

from guarded_api.auth.models import RoleTag, ScopeKind
from guarded_api.db.base import Base
from guarded_api.db.models import Administrator, Member, StaffAccount
from guarded_api.errors import AuthorizationError, AuthorizationReason

ALL_TYPES = "*"


@dataclass(frozen=True, slots=True)
class RoleSpec:
    tag: RoleTag
    account_model: type[Base]
    scope: ScopeKind
    # Resource types this role may act on without owning them.
    manages: frozenset[str] = frozenset()

    def manages_type(self, resource_type: str) -> bool:
        return ALL_TYPES in self.manages or resource_type in self.manages


ROLE_REGISTRY: dict[RoleTag, RoleSpec] = {
    RoleTag.admin: RoleSpec(
        tag=RoleTag.admin,
        account_model=Administrator,
        scope=ScopeKind.unrestricted,
        manages=frozenset({ALL_TYPES}),
    ),
    RoleTag.staff: RoleSpec(
        tag=RoleTag.staff,
        account_model=StaffAccount,
        scope=ScopeKind.tenant,
        manages=frozenset({"task", "board"}),
    ),
    RoleTag.member: RoleSpec(
        tag=RoleTag.member,
        account_model=Member,
        scope=ScopeKind.self_,
    ),
}


def parse_role(raw: str) -> RoleTag:
    try:
        return RoleTag(raw)
    except ValueError as e:
        raise AuthorizationError(
            AuthorizationReason.role_mismatch, f"Unknown role tag: {raw!r}"
        ) from e


def role_spec(tag: RoleTag) -> RoleSpec:
    return ROLE_REGISTRY[tag]


# --- Module Notes -----------------------------------------------------------
# Staff "manages" tasks and boards only inside its own tenant; the tenant check in
# `auth.ownership.check_access` runs before the managed-type rule.
