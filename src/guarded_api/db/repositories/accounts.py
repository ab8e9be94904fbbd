"""
guarded_api.db.repositories.accounts

Repository for role-specific account tables.

Responsibilities:
- Look up active accounts by role tag (the principal resolver's account directory).
- Create and retire member accounts.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.auth.models import AccountRecord, RoleTag
from guarded_api.auth.roles import role_spec
from guarded_api.db.base import utcnow
from guarded_api.db.models import Member
from guarded_api.errors import ConflictError


class AccountRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_active(self, role: RoleTag, subject_id: str) -> AccountRecord | None:
        model = role_spec(role).account_model
        stmt = select(model).where(model.id == subject_id, model.deleted_at.is_(None))
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return AccountRecord(subject_id=row.id, role=role, email=row.email, name=row.name)

    async def get_member(self, member_id: str) -> Member | None:
        return await self._session.get(Member, member_id)

    async def active_member_by_email(self, email: str) -> Member | None:
        stmt = select(Member).where(Member.email == email, Member.deleted_at.is_(None))
        return (await self._session.execute(stmt)).scalars().first()

    async def create_member(self, *, email: str, name: str) -> Member:
        member = Member(email=email, name=name)
        self._session.add(member)
        try:
            await self._session.flush()
        except IntegrityError as e:
            # Partial unique index: one active member per email.
            raise ConflictError("A member with this email already exists") from e
        return member

    async def retire_member(self, member: Member, *, at: datetime | None = None) -> None:
        member.deleted_at = at or utcnow()
        await self._session.flush()
