from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership_inventory.db.models import Vehicle


class VehicleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> Vehicle:
        vehicle = Vehicle(**fields)
        self._session.add(vehicle)
        await self._session.flush()
        return vehicle

    async def get(self, vehicle_id: int, *, for_update: bool = False) -> Vehicle | None:
        # Row lock when the caller is about to mutate status (ignored by SQLite).
        return await self._session.get(Vehicle, vehicle_id, with_for_update=for_update)

    async def get_by_vin(self, vin: str) -> Vehicle | None:
        stmt = select(Vehicle).where(Vehicle.vin == vin)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[Vehicle]:
        stmt = select(Vehicle).order_by(Vehicle.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def vin_taken(self, vin: str) -> bool:
        stmt = select(Vehicle.id).where(Vehicle.vin == vin).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def delete(self, vehicle: Vehicle) -> None:
        await self._session.delete(vehicle)
        await self._session.flush()

    async def count(self) -> int:
        return int(await self._session.scalar(select(func.count(Vehicle.id))) or 0)
