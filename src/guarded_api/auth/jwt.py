"""
guarded_api.auth.jwt

Token decoder: HS256 JWT issuing and validation.

Responsibilities:
- Issue short-lived tokens for the dev token endpoint and tests.
- Decode tokens with strict registered-claim requirements and extract the
  (still untrusted) subject and role claims.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

REQUIRED_CLAIMS = ("exp", "iat", "iss", "aud", "sub")
ROLE_CLAIM = "role"


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str


class JwtValidationError(Exception):
    pass


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Claims as asserted by the token. Nothing here is trusted until the principal
    resolver finds a live account row for `(role, subject_id)`.
    """

    subject_id: str
    role: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TokenClaims:
        subject = payload.get("sub")
        role = payload.get(ROLE_CLAIM)
        if not isinstance(subject, str) or not subject:
            raise JwtValidationError("token subject is empty")
        if not isinstance(role, str) or not role:
            raise JwtValidationError(f"token {ROLE_CLAIM!r} claim is missing")
        return cls(subject_id=subject, role=role)


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    role: str,
    ttl: timedelta = timedelta(hours=1),
) -> str:
    issued_at = datetime.now(tz=UTC)
    return jwt.encode(
        {
            "iss": cfg.issuer,
            "aud": cfg.audience,
            "sub": subject,
            ROLE_CLAIM: role,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + ttl).timestamp()),
        },
        cfg.secret,
        algorithm=cfg.alg,
    )


def decode_and_validate(*, cfg: JwtConfig, token: str) -> TokenClaims:
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e
    return TokenClaims.from_payload(payload)
