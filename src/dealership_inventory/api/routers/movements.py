"""
dealership_inventory.api.routers.movements

Vehicle movement endpoints (`/api/vehiclemovements`).

Responsibilities:
- Record movements (generic and typed shortcuts) which drive vehicle status.
- Filtered, paginated listing plus per-vehicle/per-customer histories.
- Period report and administrative deletion (with sale reversal).
"""

from __future__ import annotations

import calendar
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from dealership_inventory.api.deps import db_session
from dealership_inventory.api.schemas import VehicleMovementOut
from dealership_inventory.auth.deps import get_principal, require_roles
from dealership_inventory.auth.models import Principal
from dealership_inventory.db.models import MovementType, UserRole, utcnow
from dealership_inventory.db.repositories.customers import CustomerRepo
from dealership_inventory.db.repositories.movements import MovementFilter, MovementRepo
from dealership_inventory.db.repositories.vehicles import VehicleRepo
from dealership_inventory.services.movements import MovementRequest, MovementService

router = APIRouter(
    prefix="/api/vehiclemovements", tags=["vehicle-movements"], dependencies=[Depends(get_principal)]
)

_A, _M = UserRole.administrator, UserRole.manager


class MovementShortcutRequest(BaseModel):
    description: str = Field(min_length=1, max_length=200)
    vehicle_id: int
    customer_id: int | None = None
    value: Decimal | None = Field(default=None, ge=0, max_digits=18, decimal_places=2)
    notes: str | None = Field(default=None, max_length=500)


class MovementCreateRequest(MovementShortcutRequest):
    type: MovementType


def _naive_utc(dt: datetime | None) -> datetime | None:
    # Stored timestamps are naive UTC.
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(UTC).replace(tzinfo=None)


def _one_month_before(dt: datetime) -> datetime:
    year, month = (dt.year, dt.month - 1) if dt.month > 1 else (dt.year - 1, 12)
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


async def _record(
    session: AsyncSession, principal: Principal, body: MovementShortcutRequest, type_: MovementType
) -> VehicleMovementOut:
    movement = await MovementService(session).record(
        MovementRequest(
            type=type_,
            description=body.description,
            vehicle_id=body.vehicle_id,
            customer_id=body.customer_id,
            value=body.value,
            notes=body.notes,
        ),
        actor=principal,
    )
    return VehicleMovementOut.from_model(movement)


@router.get("", response_model=list[VehicleMovementOut])
async def list_movements(
    response: Response,
    vehicle_id: int | None = None,
    customer_id: int | None = None,
    type: MovementType | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=500),
    session: AsyncSession = Depends(db_session),
) -> list[VehicleMovementOut]:
    flt = MovementFilter(
        vehicle_id=vehicle_id,
        customer_id=customer_id,
        type=type,
        start_date=_naive_utc(start_date),
        end_date=_naive_utc(end_date),
    )
    items, total = await MovementRepo(session).list_filtered(flt, page=page, page_size=page_size)
    response.headers["X-Total-Count"] = str(total)
    response.headers["X-Page"] = str(page)
    response.headers["X-Page-Size"] = str(page_size)
    return [VehicleMovementOut.from_model(m) for m in items]


@router.get("/report", dependencies=[Depends(require_roles(_A, _M))])
async def movement_report(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    now = utcnow()
    end = _naive_utc(end_date) or now
    start = _naive_utc(start_date) or _one_month_before(now)
    return await MovementService(session).report(start=start, end=end)


@router.get("/vehicle/{vehicle_id}/history", response_model=list[VehicleMovementOut])
async def vehicle_history(
    vehicle_id: int, session: AsyncSession = Depends(db_session)
) -> list[VehicleMovementOut]:
    if await VehicleRepo(session).get(vehicle_id) is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Vehicle not found")
    return [VehicleMovementOut.from_model(m) for m in await MovementRepo(session).list_for_vehicle(vehicle_id)]


@router.get("/customer/{customer_id}", response_model=list[VehicleMovementOut])
async def customer_movements(
    customer_id: int, session: AsyncSession = Depends(db_session)
) -> list[VehicleMovementOut]:
    if await CustomerRepo(session).get(customer_id) is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Customer not found")
    return [
        VehicleMovementOut.from_model(m)
        for m in await MovementRepo(session).list_for_customer(customer_id)
    ]


@router.get("/{movement_id}", response_model=VehicleMovementOut)
async def get_movement(
    movement_id: int, session: AsyncSession = Depends(db_session)
) -> VehicleMovementOut:
    movement = await MovementRepo(session).get(movement_id)
    if movement is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Movement not found")
    return VehicleMovementOut.from_model(movement)


@router.post("", response_model=VehicleMovementOut, status_code=HTTP_201_CREATED)
async def create_movement(
    body: MovementCreateRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> VehicleMovementOut:
    return await _record(session, principal, body, body.type)


@router.post(
    "/entry",
    response_model=VehicleMovementOut,
    status_code=HTTP_201_CREATED,
    dependencies=[Depends(require_roles(_A, _M, UserRole.operator))],
)
async def register_entry(
    body: MovementShortcutRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> VehicleMovementOut:
    return await _record(session, principal, body, MovementType.entry)


@router.post(
    "/test-drive",
    response_model=VehicleMovementOut,
    status_code=HTTP_201_CREATED,
    dependencies=[Depends(require_roles(_A, _M, UserRole.salesperson))],
)
async def register_test_drive(
    body: MovementShortcutRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> VehicleMovementOut:
    return await _record(session, principal, body, MovementType.test_drive)


@router.post(
    "/reservation",
    response_model=VehicleMovementOut,
    status_code=HTTP_201_CREATED,
    dependencies=[Depends(require_roles(_A, _M, UserRole.salesperson))],
)
async def register_reservation(
    body: MovementShortcutRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> VehicleMovementOut:
    return await _record(session, principal, body, MovementType.reservation)


@router.post(
    "/sale",
    response_model=VehicleMovementOut,
    status_code=HTTP_201_CREATED,
    dependencies=[Depends(require_roles(_A, _M, UserRole.salesperson))],
)
async def register_sale(
    body: MovementShortcutRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> VehicleMovementOut:
    return await _record(session, principal, body, MovementType.sale)


@router.post(
    "/maintenance",
    response_model=VehicleMovementOut,
    status_code=HTTP_201_CREATED,
    dependencies=[Depends(require_roles(_A, _M, UserRole.mechanic))],
)
async def register_maintenance(
    body: MovementShortcutRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> VehicleMovementOut:
    return await _record(session, principal, body, MovementType.maintenance)


@router.delete(
    "/{movement_id}",
    status_code=HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(_A))],
)
async def delete_movement(movement_id: int, session: AsyncSession = Depends(db_session)) -> None:
    await MovementService(session).delete(movement_id)


# --- Module Notes -----------------------------------------------------------
# Static paths (/report, /vehicle/..., /customer/...) are declared before /{movement_id}
# so they are matched first.
