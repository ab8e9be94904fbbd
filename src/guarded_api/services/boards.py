"""
guarded_api.services.boards

Board and board-membership operations.

Responsibilities:
- List/get/create boards under the caller's visibility scope.
- List, add and remove board memberships. Only the board owner or a role that
  manages boards may change memberships; existing members may only read them.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.auth.models import AccessGrant, Principal, ResourceRef, ScopeKind
from guarded_api.auth.roles import role_spec
from guarded_api.db.models import Board
from guarded_api.db.repositories.accounts import AccountRepo
from guarded_api.db.repositories.boards import BoardRepo
from guarded_api.errors import AuthorizationError, AuthorizationReason, ConflictError, NotFoundError
from guarded_api.query.filters import FilterSpec
from guarded_api.schemas import (
    BoardCreate,
    BoardListRequest,
    BoardOut,
    ListRequest,
    MembershipCreate,
    MembershipOut,
    PageOut,
    Pagination,
)
from guarded_api.services.base import GuardedService
from guarded_api.services.resources import BOARD_MEMBERSHIPS, BOARDS
from guarded_api.settings import Settings


async def board_ref(boards: BoardRepo, board: Board) -> ResourceRef:
    return ResourceRef(
        resource_type="board",
        id=board.id,
        owner_id=board.owner_id,
        member_ids=await boards.active_member_ids(board.id),
        tenant_id=board.organization_id,
        deleted_at=board.deleted_at,
    )


class BoardService(GuardedService):
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        super().__init__(session=session, settings=settings)
        self._boards = BoardRepo(session)
        self._accounts = AccountRepo(session)

    async def list_boards(self, principal: Principal, body: BoardListRequest) -> PageOut[BoardOut]:
        filters = (
            FilterSpec()
            .contains("name", body.search)
            .eq("organization_id", body.organization_id)
            .eq("owner_id", body.owner_id)
        )
        query = await self._visibility.build(
            principal,
            BOARDS,
            filters=filters,
            sort=body.sort,
            direction=body.order,
            page=body.page,
            limit=body.limit,
        )
        rows, info = await self._pages.fetch(query)
        return PageOut[BoardOut](
            pagination=Pagination.from_info(info),
            data=[BoardOut.from_row(b) for b in rows],
        )

    async def get_board(self, principal: Principal, board_id: str) -> BoardOut:
        board, _ = await self._load(principal, board_id)
        return BoardOut.from_row(board)

    async def create_board(self, principal: Principal, body: BoardCreate) -> BoardOut:
        org = await self._tenants.get_active_organization(body.organization_id)
        if org is None:
            raise NotFoundError("organization not found")
        if role_spec(principal.role).scope is ScopeKind.tenant:
            if await self._visibility.tenant_for(principal) != org.id:
                # Other tenants' organizations are hidden, not forbidden.
                raise NotFoundError("organization not found")

        board = await self._boards.create(
            organization_id=org.id,
            owner_id=principal.subject_id,
            name=body.name,
            description=body.description,
        )
        await self._audit.record(
            actor=principal,
            operation="CREATE",
            target_type="board",
            target_id=board.id,
            details={"organization_id": org.id, "name": board.name},
        )
        await self._session.commit()
        return BoardOut.from_row(board)

    async def list_members(
        self, principal: Principal, board_id: str, body: ListRequest
    ) -> PageOut[MembershipOut]:
        board, _ = await self._load(principal, board_id)
        query = self._visibility.build_for_parent(
            BOARD_MEMBERSHIPS,
            parent_field="board_id",
            parent_id=board.id,
            sort=body.sort,
            direction=body.order,
            page=body.page,
            limit=body.limit,
        )
        rows, info = await self._pages.fetch(query)
        return PageOut[MembershipOut](
            pagination=Pagination.from_info(info),
            data=[MembershipOut.from_row(m) for m in rows],
        )

    async def add_member(
        self, principal: Principal, board_id: str, body: MembershipCreate
    ) -> MembershipOut:
        board, ref = await self._load_for_management(principal, board_id)

        member = await self._accounts.get_member(body.member_id)
        if member is None or member.deleted_at is not None:
            raise NotFoundError("member not found")
        if member.id in ref.member_ids:
            raise ConflictError("member already belongs to this board")

        membership = await self._boards.add_membership(board_id=board.id, member_id=member.id)
        await self._audit.record(
            actor=principal,
            operation="CREATE",
            target_type="board_membership",
            target_id=membership.id,
            details={"board_id": board.id, "member_id": member.id},
        )
        await self._session.commit()
        return MembershipOut.from_row(membership)

    async def remove_member(self, principal: Principal, board_id: str, membership_id: str) -> None:
        board, _ = await self._load_for_management(principal, board_id)

        membership = await self._boards.get_membership(board.id, membership_id)
        if membership is None or membership.deleted_at is not None:
            raise NotFoundError("board membership not found")

        await self._boards.remove_membership(membership)
        await self._audit.record(
            actor=principal,
            operation="DELETE",
            target_type="board_membership",
            target_id=membership.id,
            details={"board_id": board.id, "member_id": membership.member_id},
        )
        await self._session.commit()

    async def _load(self, principal: Principal, board_id: str) -> tuple[Board, ResourceRef]:
        board = await self._boards.get(board_id)
        if board is None:
            raise NotFoundError("board not found")
        ref = await board_ref(self._boards, board)
        await self._authorize(principal, ref)
        return board, ref

    async def _load_for_management(
        self, principal: Principal, board_id: str
    ) -> tuple[Board, ResourceRef]:
        board = await self._boards.get(board_id)
        if board is None:
            raise NotFoundError("board not found")
        ref = await board_ref(self._boards, board)
        grant = await self._authorize(principal, ref)
        if grant is AccessGrant.membership:
            raise AuthorizationError(
                AuthorizationReason.forbidden, "Only the board owner may manage members"
            )
        return board, ref
