"""
guarded_api.db.repositories.boards

Repository for `Board` and `BoardMembership` entities.

Responsibilities:
- Create and fetch boards.
- Read active member ids (pre-fetch for the ownership check).
- Add and soft-delete memberships.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.db.base import utcnow
from guarded_api.db.models import Board, BoardMembership
from guarded_api.errors import ConflictError


class BoardRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, board_id: str) -> Board | None:
        return await self._session.get(Board, board_id)

    async def create(
        self,
        *,
        organization_id: str,
        owner_id: str,
        name: str,
        description: str | None,
    ) -> Board:
        board = Board(
            organization_id=organization_id,
            owner_id=owner_id,
            name=name,
            description=description,
        )
        self._session.add(board)
        await self._session.flush()
        return board

    async def active_member_ids(self, board_id: str) -> frozenset[str]:
        stmt = select(BoardMembership.member_id).where(
            BoardMembership.board_id == board_id,
            BoardMembership.deleted_at.is_(None),
        )
        return frozenset((await self._session.execute(stmt)).scalars().all())

    async def get_membership(self, board_id: str, membership_id: str) -> BoardMembership | None:
        stmt = select(BoardMembership).where(
            BoardMembership.id == membership_id,
            BoardMembership.board_id == board_id,
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def add_membership(self, *, board_id: str, member_id: str) -> BoardMembership:
        membership = BoardMembership(board_id=board_id, member_id=member_id)
        self._session.add(membership)
        try:
            await self._session.flush()
        except IntegrityError as e:
            # Partial unique index: one active membership per (board, member).
            raise ConflictError("Member already belongs to this board") from e
        return membership

    async def remove_membership(self, membership: BoardMembership) -> None:
        membership.deleted_at = utcnow()
        await self._session.flush()
