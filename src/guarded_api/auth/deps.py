"""
guarded_api.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into untrusted `TokenClaims`.
- Resolve claims into a trusted `Principal` for the endpoint's allowed roles.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.api.deps import db_session, settings_dep
from guarded_api.auth.jwt import JwtConfig, JwtValidationError, TokenClaims, decode_and_validate
from guarded_api.auth.models import Principal, RoleTag
from guarded_api.auth.resolver import PrincipalResolver
from guarded_api.db.repositories.accounts import AccountRepo
from guarded_api.errors import AuthenticationError
from guarded_api.observability.logging import bind_principal
from guarded_api.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def jwt_config(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
    )


def get_token_claims(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> TokenClaims:
    if creds is None or not creds.credentials:
        raise AuthenticationError("Missing bearer token")
    try:
        return decode_and_validate(cfg=jwt_config(settings), token=creds.credentials)
    except JwtValidationError as e:
        raise AuthenticationError(f"Invalid token: {e}") from e


def require_principal(*roles: RoleTag):
    required = frozenset(roles)

    async def _dep(
        claims: TokenClaims = Depends(get_token_claims),
        session: AsyncSession = Depends(db_session),
    ) -> Principal:
        principal = await PrincipalResolver(AccountRepo(session)).resolve(
            claimed_subject_id=claims.subject_id,
            claimed_role=claims.role,
            required_roles=required,
        )
        bind_principal(subject_id=principal.subject_id, role=principal.role.value)
        return principal

    return _dep


# --- Module Notes -----------------------------------------------------------
# The resolver shares the request's DB session with the endpoint (FastAPI caches
# `db_session` per request).
