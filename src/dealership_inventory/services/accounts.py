"""
dealership_inventory.services.accounts

Staff account operations shared by the auth and users routers.

Responsibilities:
- Authenticate credentials and issue access tokens.
- Create users with uniqueness checks and hashed passwords.
- Change passwords under the self/administrator rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from dealership_inventory.auth.jwt import JwtConfig, issue_token
from dealership_inventory.auth.models import Principal
from dealership_inventory.auth.passwords import hash_password, verify_password
from dealership_inventory.db.models import User, UserRole, utcnow
from dealership_inventory.db.repositories.users import UserRepo
from dealership_inventory.errors import (
    AuthenticationError,
    BusinessRuleError,
    NotFoundError,
    PermissionDeniedError,
)
from dealership_inventory.observability.logging import get_logger
from dealership_inventory.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_at: datetime
    user: User


class AccountService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)

    async def login(self, *, username: str, password: str, settings: Settings) -> IssuedToken:
        user = await self._users.get_active_by_username(username)
        # Same error for unknown, inactive and wrong password: no account probing.
        if user is None or not verify_password(password, user.password_hash):
            log.info("login_failed", username=username)
            raise AuthenticationError("Invalid credentials")

        user.last_login_at = utcnow()
        await self._session.commit()

        token, expires_at = issue_token(
            cfg=JwtConfig.from_settings(settings),
            subject=str(user.id),
            roles=[user.role.value],
            ttl=timedelta(hours=settings.jwt_expiration_hours),
            extra_claims={"name": user.username, "email": user.email, "full_name": user.full_name},
        )
        log.info("login_succeeded", user_id=user.id, role=user.role.value)
        return IssuedToken(token=token, expires_at=expires_at, user=user)

    async def create_user(
        self,
        *,
        username: str,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
        role: UserRole,
    ) -> User:
        if await self._users.username_taken(username):
            raise BusinessRuleError("Username already exists")
        if await self._users.email_taken(email):
            raise BusinessRuleError("Email is already in use")

        user = await self._users.create(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=hash_password(password),
            role=role,
            is_active=True,
        )
        await self._session.commit()
        log.info("user_created", user_id=user.id, role=role.value)
        return user

    async def change_password(
        self,
        user_id: int,
        *,
        actor: Principal,
        current_password: str | None,
        new_password: str,
    ) -> None:
        if actor.user_id != user_id and not actor.is_admin:
            raise PermissionDeniedError("Only administrators can change other users' passwords")

        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")

        if not actor.is_admin and not verify_password(current_password or "", user.password_hash):
            raise BusinessRuleError("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        await self._session.commit()
        log.info("password_changed", user_id=user_id, by=actor.user_id)
