"""
tests.test_jwt

Token issuing/validation and bearer-token dependency behaviour.
"""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from dealership_inventory.auth.jwt import (
    JwtConfig,
    JwtValidationError,
    decode_and_validate,
    issue_token,
)

CFG = JwtConfig(alg="HS256", issuer="iss", audience="aud", secret="s" * 40)


def test_issue_and_decode_roundtrip_keeps_claims() -> None:
    token, expires_at = issue_token(
        cfg=CFG, subject="7", roles=["MANAGER"], extra_claims={"name": "maria", "sub": "999"}
    )
    payload = decode_and_validate(cfg=CFG, token=token)
    # Registered claims cannot be overridden by extra claims.
    assert payload["sub"] == "7"
    assert payload["roles"] == ["MANAGER"]
    assert payload["name"] == "maria"
    assert payload["exp"] == int(expires_at.timestamp())


def test_expired_token_is_rejected() -> None:
    token, _ = issue_token(cfg=CFG, subject="1", roles=[], ttl=timedelta(seconds=-5))
    with pytest.raises(JwtValidationError):
        decode_and_validate(cfg=CFG, token=token)


def test_wrong_audience_is_rejected() -> None:
    token, _ = issue_token(cfg=CFG, subject="1", roles=[])
    other = JwtConfig(alg="HS256", issuer="iss", audience="other", secret=CFG.secret)
    with pytest.raises(JwtValidationError):
        decode_and_validate(cfg=other, token=token)


@pytest.mark.asyncio
async def test_missing_and_invalid_tokens_get_401(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/vehicles")
    assert r.status_code == 401
    assert r.json()["detail"] == "Missing bearer token"

    r = await client.get("/api/vehicles", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["message"] == "Authentication required"


@pytest.mark.asyncio
async def test_token_signed_with_other_secret_is_rejected(client: httpx.AsyncClient) -> None:
    forged = JwtConfig(
        alg="HS256",
        issuer="dealership-inventory",
        audience="dealership-api",
        secret="f" * 40,
    )
    token, _ = issue_token(cfg=forged, subject="1", roles=["ADMINISTRATOR"])
    r = await client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_non_numeric_subject_is_rejected(app, client: httpx.AsyncClient) -> None:
    token, _ = issue_token(
        cfg=JwtConfig.from_settings(app.state.settings), subject="admin", roles=["ADMINISTRATOR"]
    )
    r = await client.get("/api/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token subject"
