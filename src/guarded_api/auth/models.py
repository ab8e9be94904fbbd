"""
guarded_api.auth.models

Auth domain models.

Responsibilities:
- Define the role tags and scope kinds the guard dispatches on.
- Define the authenticated identity type (`Principal`) injected into endpoints.
- Define the pre-fetched resource view consumed by the ownership check.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime


class RoleTag(enum.StrEnum):
    admin = "admin"
    staff = "staff"
    member = "member"


class ScopeKind(enum.StrEnum):
    # SELF: rows the caller owns/receives. TENANT: rows of the caller's organization.
    self_ = "SELF"
    tenant = "TENANT"
    unrestricted = "UNRESTRICTED"


class AccessGrant(enum.StrEnum):
    # Which rule allowed a single-resource operation.
    role = "ROLE"
    owner = "OWNER"
    membership = "MEMBERSHIP"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, materialized once per request.
    """

    subject_id: str
    role: RoleTag
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role is RoleTag.admin


@dataclass(frozen=True, slots=True)
class AccountRecord:
    subject_id: str
    role: RoleTag
    email: str
    name: str


@dataclass(frozen=True, slots=True)
class ResourceRef:
    """
    Authorization-relevant view of an already-fetched resource row.
    """

    resource_type: str
    id: str
    owner_id: str | None = None
    member_ids: frozenset[str] = field(default_factory=frozenset)
    tenant_id: str | None = None
    deleted_at: datetime | None = None


# --- Module Notes -----------------------------------------------------------
# Keep these models free of ORM and FastAPI imports; they are used by the guard,
# the services, and the unit tests' in-memory fakes alike.
