from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership_inventory.db.models import User, UserRole
from dealership_inventory.db.repositories import LIKE_ESCAPE, contains_pattern


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> User:
        user = User(**fields)
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def get_active_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username, User.is_active.is_(True))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def username_taken(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        stmt = select(User.id).where(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return (await self._session.execute(stmt.limit(1))).first() is not None

    async def list_active(self, *, role: UserRole | None = None) -> list[User]:
        stmt = select(User).where(User.is_active.is_(True))
        if role is not None:
            stmt = stmt.where(User.role == role)
        return list((await self._session.execute(stmt.order_by(User.id))).scalars().all())

    async def search_active(self, term: str) -> list[User]:
        pattern = contains_pattern(term)
        stmt = (
            select(User)
            .where(
                User.is_active.is_(True),
                or_(
                    func.lower(User.username).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(User.first_name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(User.last_name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(User.email).like(pattern, escape=LIKE_ESCAPE),
                ),
            )
            .order_by(User.id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def count(self, *, active: bool | None = None) -> int:
        stmt = select(func.count(User.id))
        if active is not None:
            stmt = stmt.where(User.is_active.is_(active))
        return int(await self._session.scalar(stmt) or 0)

    async def active_count_by_role(self) -> list[tuple[UserRole, int]]:
        stmt = (
            select(User.role, func.count(User.id))
            .where(User.is_active.is_(True))
            .group_by(User.role)
            .order_by(User.role)
        )
        return [(role, int(n)) for role, n in (await self._session.execute(stmt)).all()]

    async def count_created_since(self, since: datetime) -> int:
        stmt = select(func.count(User.id)).where(User.created_at >= since)
        return int(await self._session.scalar(stmt) or 0)

    async def count_logged_in_since(self, since: datetime) -> int:
        stmt = select(func.count(User.id)).where(User.last_login_at >= since)
        return int(await self._session.scalar(stmt) or 0)
