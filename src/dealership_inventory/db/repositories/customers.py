"""
dealership_inventory.db.repositories.customers

Repository for `Customer` entities.

Responsibilities:
- CRUD lookups and uniqueness probes (tax id, email).
- Purchase aggregates derived from vehicles owned by a customer.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership_inventory.db.models import Customer, Vehicle, VehicleMovement
from dealership_inventory.db.repositories import LIKE_ESCAPE, contains_pattern


class CustomerRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> Customer:
        customer = Customer(**fields)
        self._session.add(customer)
        await self._session.flush()
        return customer

    async def get(self, customer_id: int) -> Customer | None:
        return await self._session.get(Customer, customer_id)

    def _with_purchase_count(self):
        return (
            select(Customer, func.count(Vehicle.id))
            .outerjoin(Vehicle, Vehicle.customer_id == Customer.id)
            .group_by(Customer.id)
            .order_by(Customer.id)
        )

    async def list_active_with_purchase_count(self) -> list[tuple[Customer, int]]:
        stmt = self._with_purchase_count().where(Customer.is_active.is_(True))
        return [(c, int(n)) for c, n in (await self._session.execute(stmt)).all()]

    async def search_active_by_name(self, name: str) -> list[tuple[Customer, int]]:
        pattern = contains_pattern(name)
        stmt = self._with_purchase_count().where(
            Customer.is_active.is_(True),
            func.lower(Customer.name).like(pattern, escape=LIKE_ESCAPE),
        )
        return [(c, int(n)) for c, n in (await self._session.execute(stmt)).all()]

    async def get_active_by_cpf_cnpj(self, cpf_cnpj: str) -> Customer | None:
        stmt = select(Customer).where(Customer.cpf_cnpj == cpf_cnpj, Customer.is_active.is_(True))
        return (await self._session.execute(stmt.limit(1))).scalars().first()

    async def purchased_count(self, customer_id: int) -> int:
        stmt = select(func.count(Vehicle.id)).where(Vehicle.customer_id == customer_id)
        return int(await self._session.scalar(stmt) or 0)

    async def purchased_vehicles(self, customer_id: int) -> list[Vehicle]:
        stmt = select(Vehicle).where(Vehicle.customer_id == customer_id).order_by(Vehicle.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def cpf_cnpj_taken(self, cpf_cnpj: str, *, exclude_id: int | None = None) -> bool:
        stmt = select(Customer.id).where(Customer.cpf_cnpj == cpf_cnpj)
        if exclude_id is not None:
            stmt = stmt.where(Customer.id != exclude_id)
        return (await self._session.execute(stmt.limit(1))).first() is not None

    async def email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        stmt = select(Customer.id).where(func.lower(Customer.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(Customer.id != exclude_id)
        return (await self._session.execute(stmt.limit(1))).first() is not None

    async def has_vehicles_or_movements(self, customer_id: int) -> bool:
        if await self.purchased_count(customer_id) > 0:
            return True
        stmt = select(VehicleMovement.id).where(VehicleMovement.customer_id == customer_id)
        return (await self._session.execute(stmt.limit(1))).first() is not None


# --- Module Notes -----------------------------------------------------------
# "Purchased" vehicles are those whose current owner is the customer (set by SALE).
