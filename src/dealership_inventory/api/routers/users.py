"""
dealership_inventory.api.routers.users

Staff user management (`/api/users`).

Responsibilities:
- Administrative listing, search, statistics and activity views.
- Create/update/(de)activate users with role-based restrictions.
- Password changes (self, or any user for administrators).
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from dealership_inventory.api.deps import db_session
from dealership_inventory.api.routers.auth import UserCreateRequest
from dealership_inventory.api.schemas import UserOut
from dealership_inventory.auth.deps import get_principal, require_roles
from dealership_inventory.auth.models import Principal
from dealership_inventory.db.models import User, UserRole, utcnow
from dealership_inventory.db.repositories.movements import MovementRepo
from dealership_inventory.db.repositories.users import UserRepo
from dealership_inventory.errors import BusinessRuleError, PermissionDeniedError
from dealership_inventory.observability.logging import get_logger
from dealership_inventory.services.accounts import AccountService

log = get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(get_principal)])

_admins = Depends(require_roles(UserRole.administrator))
_managers = Depends(require_roles(UserRole.administrator, UserRole.manager))


class UserUpdateRequest(BaseModel):
    email: str = Field(min_length=3, max_length=100)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    role: UserRole
    is_active: bool = True


class ChangePasswordRequest(BaseModel):
    current_password: str | None = None
    new_password: str = Field(min_length=6, max_length=128)


async def _get_or_404(repo: UserRepo, user_id: int) -> User:
    user = await repo.get(user_id)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=list[UserOut], dependencies=[_admins])
async def list_users(session: AsyncSession = Depends(db_session)) -> list[UserOut]:
    return [UserOut.from_model(u) for u in await UserRepo(session).list_active()]


@router.get("/profile", response_model=UserOut)
async def get_profile(
    principal: Principal = Depends(get_principal), session: AsyncSession = Depends(db_session)
) -> UserOut:
    return UserOut.from_model(await _get_or_404(UserRepo(session), principal.user_id))


@router.get("/search", response_model=list[UserOut], dependencies=[_managers])
async def search_users(
    term: str = Query(default=""), session: AsyncSession = Depends(db_session)
) -> list[UserOut]:
    if not term.strip():
        raise BusinessRuleError("A search term is required")
    return [UserOut.from_model(u) for u in await UserRepo(session).search_active(term.strip())]


@router.get("/by-role/{role}", response_model=list[UserOut], dependencies=[_managers])
async def list_users_by_role(
    role: UserRole, session: AsyncSession = Depends(db_session)
) -> list[UserOut]:
    return [UserOut.from_model(u) for u in await UserRepo(session).list_active(role=role)]


@router.get("/statistics", dependencies=[_managers])
async def user_statistics(session: AsyncSession = Depends(db_session)) -> dict[str, Any]:
    repo = UserRepo(session)
    now = utcnow()
    return {
        "total_users": await repo.count(active=True),
        "inactive_users": await repo.count(active=False),
        "users_by_role": [
            {"role": role.value, "count": n} for role, n in await repo.active_count_by_role()
        ],
        "recently_created": await repo.count_created_since(now - timedelta(days=30)),
        "recently_active": await repo.count_logged_in_since(now - timedelta(days=7)),
    }


@router.get("/{user_id}", response_model=UserOut, dependencies=[_managers])
async def get_user(user_id: int, session: AsyncSession = Depends(db_session)) -> UserOut:
    return UserOut.from_model(await _get_or_404(UserRepo(session), user_id))


@router.get("/{user_id}/activity", dependencies=[_managers])
async def user_activity(user_id: int, session: AsyncSession = Depends(db_session)) -> dict[str, Any]:
    user = await _get_or_404(UserRepo(session), user_id)
    movements = MovementRepo(session)
    recent = await movements.recent_for_user(user_id, limit=50)
    return {
        "user_id": user.id,
        "user_name": user.username,
        "total_movements": await movements.count_for_user(user_id),
        "recent_movements": [
            {
                "id": m.id,
                "type": m.type.value,
                "movement_date": m.movement_date,
                "description": m.description,
                "vehicle_vin": m.vehicle.vin,
                "vehicle_make_model": f"{m.vehicle.make} {m.vehicle.model}",
            }
            for m in recent
        ],
        "last_login_at": user.last_login_at,
        "created_at": user.created_at,
    }


@router.post("", response_model=UserOut, status_code=HTTP_201_CREATED, dependencies=[_admins])
async def create_user(body: UserCreateRequest, session: AsyncSession = Depends(db_session)) -> UserOut:
    return UserOut.from_model(await AccountService(session).create_user(**body.model_dump()))


@router.put("/{user_id}", status_code=HTTP_204_NO_CONTENT, dependencies=[_managers])
async def update_user(
    user_id: int,
    body: UserUpdateRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> None:
    repo = UserRepo(session)
    user = await _get_or_404(repo, user_id)
    if not principal.is_admin and (
        user.role == UserRole.administrator or body.role == UserRole.administrator
    ):
        raise PermissionDeniedError("Managers cannot modify administrators")
    if await repo.email_taken(body.email, exclude_id=user_id):
        raise BusinessRuleError("Another user already uses this email")

    for name, value in body.model_dump().items():
        setattr(user, name, value)
    await session.commit()
    log.info("user_updated", user_id=user_id, by=principal.user_id)


@router.patch("/{user_id}/deactivate", status_code=HTTP_204_NO_CONTENT, dependencies=[_admins])
async def deactivate_user(
    user_id: int,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> None:
    user = await _get_or_404(UserRepo(session), user_id)
    if user_id == principal.user_id:
        raise BusinessRuleError("You cannot deactivate your own account")
    user.is_active = False
    await session.commit()
    log.info("user_deactivated", user_id=user_id, by=principal.user_id)


@router.patch("/{user_id}/activate", status_code=HTTP_204_NO_CONTENT, dependencies=[_admins])
async def activate_user(user_id: int, session: AsyncSession = Depends(db_session)) -> None:
    (await _get_or_404(UserRepo(session), user_id)).is_active = True
    await session.commit()


@router.patch("/{user_id}/change-password", status_code=HTTP_204_NO_CONTENT)
async def change_password(
    user_id: int,
    body: ChangePasswordRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> None:
    await AccountService(session).change_password(
        user_id,
        actor=principal,
        current_password=body.current_password,
        new_password=body.new_password,
    )
