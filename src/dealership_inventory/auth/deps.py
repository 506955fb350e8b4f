"""
dealership_inventory.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Enforce RBAC via reusable dependency factories.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from dealership_inventory.api.deps import settings_dep
from dealership_inventory.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from dealership_inventory.auth.models import Principal
from dealership_inventory.db.models import UserRole
from dealership_inventory.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    # Authn: require a bearer token.
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    try:
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    subject = str(payload.get("sub", ""))
    roles_raw = payload.get("roles", [])
    if not subject.isdigit():
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token subject")
    if not isinstance(roles_raw, list):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token roles")

    return Principal(
        subject=subject,
        roles=frozenset(str(r) for r in roles_raw),
        username=str(payload.get("name", "")),
    )


def require_roles(*allowed: UserRole | str):
    """Allow callers holding any of `allowed`; administrators always pass."""

    allowed_roles = tuple(str(r) for r in allowed)

    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        if not principal.has_any_role(*allowed_roles):
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient role")
        return principal

    return _dep


# --- Module Notes -----------------------------------------------------------
# Routers attach `require_roles(...)` as route dependencies and still inject
# `get_principal` when they need the caller's id (FastAPI caches it per request).
