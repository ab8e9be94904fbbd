"""
guarded_api.api.routers.boards

Board endpoints.

Responsibilities:
- Search, create and read boards within the caller's visibility scope.
- List, add and remove board memberships (owner or managing role only for changes).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from guarded_api.api.deps import db_session, settings_dep
from guarded_api.auth.deps import require_principal
from guarded_api.auth.models import Principal, RoleTag
from guarded_api.schemas import (
    BoardCreate,
    BoardListRequest,
    BoardOut,
    ListRequest,
    MembershipCreate,
    MembershipOut,
    PageOut,
)
from guarded_api.services.boards import BoardService
from guarded_api.settings import Settings

router = APIRouter(prefix="/v1/boards", tags=["boards"])

_board_roles = require_principal(RoleTag.admin, RoleTag.staff, RoleTag.member)


def board_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> BoardService:
    return BoardService(session=session, settings=settings)


@router.patch("", response_model=PageOut[BoardOut])
async def search_boards(
    body: BoardListRequest,
    principal: Principal = Depends(_board_roles),
    svc: BoardService = Depends(board_service),
) -> PageOut[BoardOut]:
    return await svc.list_boards(principal, body)


@router.post("", response_model=BoardOut, status_code=HTTP_201_CREATED)
async def create_board(
    body: BoardCreate,
    principal: Principal = Depends(_board_roles),
    svc: BoardService = Depends(board_service),
) -> BoardOut:
    return await svc.create_board(principal, body)


@router.get("/{board_id}", response_model=BoardOut)
async def get_board(
    board_id: str,
    principal: Principal = Depends(_board_roles),
    svc: BoardService = Depends(board_service),
) -> BoardOut:
    return await svc.get_board(principal, board_id)


@router.patch("/{board_id}/members", response_model=PageOut[MembershipOut])
async def search_board_members(
    board_id: str,
    body: ListRequest,
    principal: Principal = Depends(_board_roles),
    svc: BoardService = Depends(board_service),
) -> PageOut[MembershipOut]:
    return await svc.list_members(principal, board_id, body)


@router.post(
    "/{board_id}/members", response_model=MembershipOut, status_code=HTTP_201_CREATED
)
async def add_board_member(
    board_id: str,
    body: MembershipCreate,
    principal: Principal = Depends(_board_roles),
    svc: BoardService = Depends(board_service),
) -> MembershipOut:
    return await svc.add_member(principal, board_id, body)


@router.delete("/{board_id}/members/{membership_id}", status_code=HTTP_204_NO_CONTENT)
async def remove_board_member(
    board_id: str,
    membership_id: str,
    principal: Principal = Depends(_board_roles),
    svc: BoardService = Depends(board_service),
) -> None:
    await svc.remove_member(principal, board_id, membership_id)
