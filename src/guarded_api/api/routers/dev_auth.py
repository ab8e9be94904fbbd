"""
guarded_api.api.routers.dev_auth

Development token minting.

Responsibilities:
- Issue bearer tokens for any subject/role pair outside prod.
- Leave enrollment checks to the principal resolver on each request.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from guarded_api.api.deps import settings_dep
from guarded_api.auth.deps import jwt_config
from guarded_api.auth.jwt import issue_token
from guarded_api.auth.models import RoleTag
from guarded_api.errors import NotFoundError
from guarded_api.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=36)
    role: RoleTag
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_dep),
) -> DevTokenResponse:
    if settings.env == "prod":
        raise NotFoundError("Not found")

    # Minting does not check enrollment; the principal resolver does that per request.
    token = issue_token(
        cfg=jwt_config(settings),
        subject=body.subject,
        role=body.role.value,
        ttl=timedelta(minutes=body.ttl_minutes),
    )
    return DevTokenResponse(access_token=token)
