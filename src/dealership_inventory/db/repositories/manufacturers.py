from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership_inventory.db.models import Manufacturer, Vehicle


class ManufacturerRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> Manufacturer:
        manufacturer = Manufacturer(**fields)
        self._session.add(manufacturer)
        await self._session.flush()
        return manufacturer

    async def get(self, manufacturer_id: int) -> Manufacturer | None:
        return await self._session.get(Manufacturer, manufacturer_id)

    async def list_active(self) -> list[Manufacturer]:
        stmt = select(Manufacturer).where(Manufacturer.is_active.is_(True)).order_by(Manufacturer.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_active_with_vehicle_count(self) -> list[tuple[Manufacturer, int]]:
        stmt = (
            select(Manufacturer, func.count(Vehicle.id))
            .outerjoin(Vehicle, Vehicle.manufacturer_id == Manufacturer.id)
            .where(Manufacturer.is_active.is_(True))
            .group_by(Manufacturer.id)
            .order_by(Manufacturer.id)
        )
        return [(m, int(n)) for m, n in (await self._session.execute(stmt)).all()]

    async def name_taken(self, name: str, *, exclude_id: int | None = None) -> bool:
        # Names are unique case-insensitively ("ford" collides with "Ford").
        stmt = select(Manufacturer.id).where(func.lower(Manufacturer.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Manufacturer.id != exclude_id)
        return (await self._session.execute(stmt.limit(1))).first() is not None

    async def has_vehicles(self, manufacturer_id: int) -> bool:
        stmt = select(Vehicle.id).where(Vehicle.manufacturer_id == manufacturer_id).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def count(self) -> int:
        return int(await self._session.scalar(select(func.count(Manufacturer.id))) or 0)
