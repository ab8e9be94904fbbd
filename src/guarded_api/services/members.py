"""
guarded_api.services.members

Member account administration.

Responsibilities:
- Enroll member accounts with a unique active email.
- Retire (soft delete) member accounts; retired members no longer resolve as principals.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.auth.models import Principal
from guarded_api.db.repositories.accounts import AccountRepo
from guarded_api.errors import ConflictError, NotFoundError
from guarded_api.observability.logging import get_logger
from guarded_api.schemas import MemberCreate, MemberOut
from guarded_api.services.base import GuardedService
from guarded_api.settings import Settings

log = get_logger(__name__)


class MemberService(GuardedService):
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        super().__init__(session=session, settings=settings)
        self._accounts = AccountRepo(session)

    async def create_member(self, principal: Principal, body: MemberCreate) -> MemberOut:
        email = body.email.strip().lower()
        if await self._accounts.active_member_by_email(email) is not None:
            raise ConflictError("a member with this email already exists")

        member = await self._accounts.create_member(email=email, name=body.name)
        await self._audit.record(
            actor=principal, operation="CREATE", target_type="member", target_id=member.id
        )
        await self._session.commit()
        return MemberOut.from_row(member)

    async def retire_member(self, principal: Principal, member_id: str) -> MemberOut:
        member = await self._accounts.get_member(member_id)
        if member is None or member.deleted_at is not None:
            raise NotFoundError("member not found")

        await self._accounts.retire_member(member)
        await self._audit.record(
            actor=principal, operation="DELETE", target_type="member", target_id=member.id
        )
        await self._session.commit()
        log.info("member_retired", member_id=member.id)
        return MemberOut.from_row(member)
