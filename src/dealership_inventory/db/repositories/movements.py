"""
dealership_inventory.db.repositories.movements

Repository for `VehicleMovement` entities.

Responsibilities:
- Append movements and fetch them with filters/pagination.
- Per-vehicle, per-customer and per-user histories (newest-first).
- Period queries used by the movement report.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership_inventory.db.models import MovementType, VehicleMovement


@dataclass(frozen=True, slots=True)
class MovementFilter:
    vehicle_id: int | None = None
    customer_id: int | None = None
    type: MovementType | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class MovementRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, movement: VehicleMovement) -> VehicleMovement:
        self._session.add(movement)
        await self._session.flush()
        return movement

    async def get(self, movement_id: int) -> VehicleMovement | None:
        return await self._session.get(VehicleMovement, movement_id)

    async def delete(self, movement: VehicleMovement) -> None:
        await self._session.delete(movement)
        await self._session.flush()

    async def list_filtered(
        self, flt: MovementFilter, *, page: int = 1, page_size: int = 50
    ) -> tuple[list[VehicleMovement], int]:
        conditions = _conditions(flt)
        total = int(
            await self._session.scalar(select(func.count(VehicleMovement.id)).where(*conditions))
            or 0
        )
        stmt = (
            _newest_first(select(VehicleMovement).where(*conditions))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list((await self._session.execute(stmt)).scalars().all()), total

    async def list_for_vehicle(self, vehicle_id: int) -> list[VehicleMovement]:
        stmt = _newest_first(
            select(VehicleMovement).where(VehicleMovement.vehicle_id == vehicle_id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_for_customer(self, customer_id: int) -> list[VehicleMovement]:
        stmt = _newest_first(
            select(VehicleMovement).where(VehicleMovement.customer_id == customer_id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def recent_for_user(self, user_id: int, *, limit: int = 50) -> list[VehicleMovement]:
        stmt = _newest_first(
            select(VehicleMovement).where(VehicleMovement.user_id == user_id)
        ).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())

    async def count_for_user(self, user_id: int) -> int:
        stmt = select(func.count(VehicleMovement.id)).where(VehicleMovement.user_id == user_id)
        return int(await self._session.scalar(stmt) or 0)

    async def exists_for_vehicle(self, vehicle_id: int) -> bool:
        stmt = select(VehicleMovement.id).where(VehicleMovement.vehicle_id == vehicle_id).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def list_in_period(self, start: datetime, end: datetime) -> list[VehicleMovement]:
        stmt = (
            select(VehicleMovement)
            .where(VehicleMovement.movement_date >= start, VehicleMovement.movement_date <= end)
            .order_by(VehicleMovement.movement_date)
        )
        return list((await self._session.execute(stmt)).scalars().all())


def _conditions(flt: MovementFilter) -> list:
    conditions = []
    if flt.vehicle_id is not None:
        conditions.append(VehicleMovement.vehicle_id == flt.vehicle_id)
    if flt.customer_id is not None:
        conditions.append(VehicleMovement.customer_id == flt.customer_id)
    if flt.type is not None:
        conditions.append(VehicleMovement.type == flt.type)
    if flt.start_date is not None:
        conditions.append(VehicleMovement.movement_date >= flt.start_date)
    if flt.end_date is not None:
        conditions.append(VehicleMovement.movement_date <= flt.end_date)
    return conditions


def _newest_first(stmt: Select) -> Select:
    return stmt.order_by(desc(VehicleMovement.movement_date), desc(VehicleMovement.id))


# --- Module Notes -----------------------------------------------------------
# Ties on movement_date are broken by id so pagination is stable.
