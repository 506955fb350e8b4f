"""
dealership_inventory.services.movements

Vehicle movement lifecycle service (transaction owner).

Responsibilities:
- Validate movement requests (referenced entities, per-type requirements).
- Persist the movement and the vehicle mutation it causes in one commit.
- Revert sale effects when a movement is deleted.
- Build the period report.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from dealership_inventory.auth.models import Principal
from dealership_inventory.db.models import MovementType, VehicleMovement, utcnow
from dealership_inventory.db.repositories.customers import CustomerRepo
from dealership_inventory.db.repositories.movements import MovementRepo
from dealership_inventory.db.repositories.users import UserRepo
from dealership_inventory.db.repositories.vehicles import VehicleRepo
from dealership_inventory.errors import AuthenticationError, BusinessRuleError, NotFoundError
from dealership_inventory.observability.logging import get_logger
from dealership_inventory.services.vehicle_status import apply_movement, revert_movement

log = get_logger(__name__)

# Movements that only make sense with a customer attached.
CUSTOMER_REQUIRED = frozenset(
    {MovementType.test_drive, MovementType.reservation, MovementType.sale}
)


@dataclass(frozen=True, slots=True)
class MovementRequest:
    type: MovementType
    description: str
    vehicle_id: int
    customer_id: int | None = None
    value: Decimal | None = None
    notes: str | None = None


def validate_requirements(req: MovementRequest) -> None:
    if req.type in CUSTOMER_REQUIRED and req.customer_id is None:
        label = req.type.value.replace("_", " ").lower()
        raise BusinessRuleError(f"Customer is required for {label}")
    if req.type == MovementType.sale and (req.value is None or req.value <= 0):
        raise BusinessRuleError("Sale value is required and must be greater than zero")


class MovementService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._movements = MovementRepo(session)
        self._vehicles = VehicleRepo(session)
        self._customers = CustomerRepo(session)
        self._users = UserRepo(session)

    async def record(self, req: MovementRequest, *, actor: Principal) -> VehicleMovement:
        validate_requirements(req)

        vehicle = await self._vehicles.get(req.vehicle_id, for_update=True)
        if vehicle is None:
            raise BusinessRuleError("Vehicle not found")

        customer = None
        if req.customer_id is not None:
            customer = await self._customers.get(req.customer_id)
            if customer is None:
                raise BusinessRuleError("Customer not found")

        user = await self._users.get(actor.user_id)
        if user is None:
            raise AuthenticationError("Authenticated user no longer exists")

        at = utcnow()
        previous = vehicle.status
        apply_movement(vehicle, req.type, customer=customer, at=at)
        movement = await self._movements.add(
            VehicleMovement(
                type=req.type,
                movement_date=at,
                description=req.description,
                value=req.value,
                notes=req.notes,
                vehicle=vehicle,
                customer=customer,
                user=user,
            )
        )
        await self._session.commit()

        log.info(
            "movement_recorded",
            movement_id=movement.id,
            movement_type=req.type.value,
            vehicle_id=vehicle.id,
            status_from=previous.value,
            status_to=vehicle.status.value,
            user_id=user.id,
        )
        return movement

    async def delete(self, movement_id: int) -> None:
        movement = await self._movements.get(movement_id)
        if movement is None:
            raise NotFoundError("Movement not found")

        vehicle = await self._vehicles.get(movement.vehicle_id, for_update=True)
        if vehicle is not None:
            revert_movement(vehicle, movement.type)
        await self._movements.delete(movement)
        await self._session.commit()
        log.info("movement_deleted", movement_id=movement_id, movement_type=movement.type.value)

    async def report(self, *, start: datetime, end: datetime) -> dict[str, Any]:
        movements = await self._movements.list_in_period(start, end)

        counts: Counter[MovementType] = Counter()
        totals: defaultdict[MovementType, Decimal] = defaultdict(Decimal)
        by_day: Counter[str] = Counter()
        for m in movements:
            counts[m.type] += 1
            totals[m.type] += m.value or Decimal(0)
            by_day[m.movement_date.date().isoformat()] += 1

        by_type = [
            {"type": t.value, "count": n, "total_value": float(totals[t])}
            for t, n in counts.most_common()
        ]
        return {
            "period": {"start": start, "end": end},
            "total_movements": len(movements),
            "movements_by_type": by_type,
            "total_sales_value": float(totals[MovementType.sale]),
            "total_maintenance_cost": float(totals[MovementType.maintenance]),
            "movements_by_day": [
                {"date": day, "count": n} for day, n in sorted(by_day.items())
            ],
        }


# --- Module Notes -----------------------------------------------------------
# Vehicle rows are fetched with FOR UPDATE before mutation so concurrent movements
# on the same vehicle serialize on backends that support row locks.
