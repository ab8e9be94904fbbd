"""
guarded_api.api.routers.members

Administrator endpoints for member accounts.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from guarded_api.api.deps import db_session, settings_dep
from guarded_api.auth.deps import require_principal
from guarded_api.auth.models import Principal, RoleTag
from guarded_api.schemas import MemberCreate, MemberOut
from guarded_api.services.members import MemberService
from guarded_api.settings import Settings

router = APIRouter(prefix="/v1/admin/members", tags=["admin"])


def member_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> MemberService:
    return MemberService(session=session, settings=settings)


@router.post("", response_model=MemberOut, status_code=HTTP_201_CREATED)
async def create_member(
    body: MemberCreate,
    principal: Principal = Depends(require_principal(RoleTag.admin)),
    svc: MemberService = Depends(member_service),
) -> MemberOut:
    return await svc.create_member(principal, body)


@router.delete("/{member_id}", response_model=MemberOut)
async def retire_member(
    member_id: str,
    principal: Principal = Depends(require_principal(RoleTag.admin)),
    svc: MemberService = Depends(member_service),
) -> MemberOut:
    # Retired members keep their rows; their tokens stop resolving.
    return await svc.retire_member(principal, member_id)
