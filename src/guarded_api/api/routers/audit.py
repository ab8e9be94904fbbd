"""
guarded_api.api.routers.audit

Administrator endpoint for reading the audit trail of one target.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.api.deps import db_session, settings_dep
from guarded_api.auth.deps import require_principal
from guarded_api.auth.models import Principal, RoleTag
from guarded_api.schemas import AuditEventOut
from guarded_api.services.audit import AuditService
from guarded_api.settings import Settings

router = APIRouter(prefix="/v1/admin/audit", tags=["admin"])


def audit_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuditService:
    return AuditService(session=session, settings=settings)


@router.get("/{target_type}/{target_id}", response_model=list[AuditEventOut])
async def list_audit_events(
    target_type: str,
    target_id: str,
    principal: Principal = Depends(require_principal(RoleTag.admin)),
    svc: AuditService = Depends(audit_service),
) -> list[AuditEventOut]:
    return await svc.list_events(principal, target_type, target_id)
