"""
guarded_api.auth.resolver

Principal resolver: turns decoded token claims into a trusted `Principal`.

Responsibilities:
- Reject role claims that do not match the endpoint's required roles.
- Confirm a live (non soft-deleted) account row exists for the claimed subject
  in the table registered for its role.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from guarded_api.auth.models import AccountRecord, Principal, RoleTag
from guarded_api.auth.roles import parse_role
from guarded_api.errors import AuthorizationError, AuthorizationReason
from guarded_api.observability.logging import get_logger

log = get_logger(__name__)


class AccountDirectory(Protocol):
    async def find_active(self, role: RoleTag, subject_id: str) -> AccountRecord | None: ...


class PrincipalResolver:
    def __init__(self, accounts: AccountDirectory) -> None:
        self._accounts = accounts

    async def resolve(
        self,
        *,
        claimed_subject_id: str,
        claimed_role: str,
        required_roles: Iterable[RoleTag],
    ) -> Principal:
        """
        Exactly one account read on the success path; no writes.
        """

        required = frozenset(required_roles)
        role = parse_role(claimed_role)
        if role not in required:
            log.warning(
                "principal_rejected",
                reason=AuthorizationReason.role_mismatch.value,
                subject_id=claimed_subject_id,
                role=role.value,
                required=sorted(r.value for r in required),
            )
            raise AuthorizationError(
                AuthorizationReason.role_mismatch,
                f"Role {role.value!r} may not call this operation",
            )

        account = await self._accounts.find_active(role, claimed_subject_id)
        if account is None:
            log.warning(
                "principal_rejected",
                reason=AuthorizationReason.not_enrolled.value,
                subject_id=claimed_subject_id,
                role=role.value,
            )
            raise AuthorizationError(
                AuthorizationReason.not_enrolled,
                f"No active {role.value} account for this subject",
            )

        return Principal(subject_id=account.subject_id, role=role, is_active=True)


# --- Module Notes -----------------------------------------------------------
# The SQL-backed directory is `db.repositories.accounts.AccountRepo`.
