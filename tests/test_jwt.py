from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from guarded_api.auth.jwt import (
    JwtConfig,
    JwtValidationError,
    TokenClaims,
    decode_and_validate,
    issue_token,
)

CFG = JwtConfig(alg="HS256", issuer="guarded-api", audience="clients", secret="s3cret")


def test_issued_token_decodes_to_subject_and_role() -> None:
    token = issue_token(cfg=CFG, subject="m-1", role="member")
    assert decode_and_validate(cfg=CFG, token=token) == TokenClaims(subject_id="m-1", role="member")


def test_wrong_audience_is_rejected() -> None:
    other = JwtConfig(alg="HS256", issuer="guarded-api", audience="other", secret="s3cret")
    token = issue_token(cfg=other, subject="m-1", role="member")
    with pytest.raises(JwtValidationError):
        decode_and_validate(cfg=CFG, token=token)


def test_expired_token_is_rejected() -> None:
    token = issue_token(cfg=CFG, subject="m-1", role="member", ttl=timedelta(seconds=-5))
    with pytest.raises(JwtValidationError):
        decode_and_validate(cfg=CFG, token=token)


def test_missing_role_claim_is_rejected() -> None:
    token = issue_token(cfg=CFG, subject="m-1", role="member")
    payload = jwt.decode(token, CFG.secret, algorithms=["HS256"], audience=CFG.audience)
    del payload["role"]
    stripped = jwt.encode(payload, CFG.secret, algorithm="HS256")
    with pytest.raises(JwtValidationError):
        decode_and_validate(cfg=CFG, token=stripped)
