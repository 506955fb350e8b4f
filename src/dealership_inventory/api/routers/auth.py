"""
dealership_inventory.api.routers.auth

Login and self-registration endpoints.

Responsibilities:
- Exchange username/password for a signed access token.
- Allow self-registration outside production (toggle via settings).
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND

from dealership_inventory.api.deps import db_session, settings_dep
from dealership_inventory.api.schemas import UserOut
from dealership_inventory.db.models import UserRole
from dealership_inventory.db.repositories.users import UserRepo
from dealership_inventory.errors import PermissionDeniedError
from dealership_inventory.services.accounts import AccountService
from dealership_inventory.settings import Settings

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    token: str
    user: UserOut
    expires_at: datetime


class UserCreateRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(min_length=3, max_length=100)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=6, max_length=128)
    role: UserRole = UserRole.operator


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> LoginResponse:
    issued = await AccountService(session).login(
        username=body.username, password=body.password, settings=settings
    )
    return LoginResponse(
        token=issued.token, user=UserOut.from_model(issued.user), expires_at=issued.expires_at
    )


@router.post("/register", response_model=UserOut, status_code=HTTP_201_CREATED)
async def register(
    body: UserCreateRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> UserOut:
    # Anonymous account creation is a dev/test convenience only.
    if settings.env == "prod" or not settings.allow_self_registration:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")
    if body.role != UserRole.operator:
        raise PermissionDeniedError("Self-registration can only create OPERATOR accounts")
    user = await AccountService(session).create_user(**body.model_dump())
    return UserOut.from_model(user)


@router.get("/user/{user_id}", response_model=UserOut)
async def get_user_by_id(user_id: int, session: AsyncSession = Depends(db_session)) -> UserOut:
    user = await UserRepo(session).get(user_id)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    return UserOut.from_model(user)
