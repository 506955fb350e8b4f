"""
dealership_inventory.api.routers.vehicles

Vehicle inventory endpoints (`/api/vehicles`).

Responsibilities:
- List and look up vehicles (by id or VIN).
- Create/update vehicles (managers and administrators).
- Delete vehicles that have no movement history (administrators).
"""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from dealership_inventory.api.deps import db_session
from dealership_inventory.api.schemas import VehicleOut
from dealership_inventory.auth.deps import get_principal, require_roles
from dealership_inventory.db.models import (
    FuelType,
    TransmissionType,
    UserRole,
    VehicleStatus,
    VehicleType,
)
from dealership_inventory.db.repositories.manufacturers import ManufacturerRepo
from dealership_inventory.db.repositories.movements import MovementRepo
from dealership_inventory.db.repositories.vehicles import VehicleRepo
from dealership_inventory.errors import BusinessRuleError
from dealership_inventory.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(
    prefix="/api/vehicles", tags=["vehicles"], dependencies=[Depends(get_principal)]
)


class VehicleUpdateRequest(BaseModel):
    make: str = Field(min_length=1, max_length=50)
    model: str = Field(min_length=1, max_length=50)
    year: int = Field(ge=1900, le=2100)
    color: str = Field(min_length=1, max_length=30)
    type: VehicleType = VehicleType.new
    status: VehicleStatus = VehicleStatus.available
    fuel_type: FuelType = FuelType.gasoline
    transmission_type: TransmissionType = TransmissionType.manual
    mileage: int = Field(default=0, ge=0)
    cost_price: Decimal = Field(default=Decimal(0), ge=0, max_digits=18, decimal_places=2)
    selling_price: Decimal = Field(default=Decimal(0), ge=0, max_digits=18, decimal_places=2)
    notes: str | None = None
    manufacturer_id: int


class VehicleCreateRequest(VehicleUpdateRequest):
    vin: str = Field(min_length=1, max_length=17)


@router.get("", response_model=list[VehicleOut])
async def list_vehicles(session: AsyncSession = Depends(db_session)) -> list[VehicleOut]:
    return [VehicleOut.from_model(v) for v in await VehicleRepo(session).list_all()]


@router.get("/vin/{vin}", response_model=VehicleOut)
async def get_vehicle_by_vin(vin: str, session: AsyncSession = Depends(db_session)) -> VehicleOut:
    vehicle = await VehicleRepo(session).get_by_vin(vin)
    if vehicle is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Vehicle not found")
    return VehicleOut.from_model(vehicle)


@router.get("/{vehicle_id}", response_model=VehicleOut)
async def get_vehicle(vehicle_id: int, session: AsyncSession = Depends(db_session)) -> VehicleOut:
    vehicle = await VehicleRepo(session).get(vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Vehicle not found")
    return VehicleOut.from_model(vehicle)


@router.post(
    "",
    response_model=VehicleOut,
    status_code=HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.administrator, UserRole.manager))],
)
async def create_vehicle(
    body: VehicleCreateRequest, session: AsyncSession = Depends(db_session)
) -> VehicleOut:
    vehicles = VehicleRepo(session)
    if await vehicles.vin_taken(body.vin):
        raise BusinessRuleError("A vehicle with this VIN already exists")
    manufacturer = await ManufacturerRepo(session).get(body.manufacturer_id)
    if manufacturer is None:
        raise BusinessRuleError("Manufacturer not found")

    fields = body.model_dump(exclude={"manufacturer_id"})
    vehicle = await vehicles.create(**fields, manufacturer=manufacturer, customer=None)
    await session.commit()
    log.info("vehicle_created", vehicle_id=vehicle.id, vin=vehicle.vin)
    return VehicleOut.from_model(vehicle)


@router.put(
    "/{vehicle_id}",
    status_code=HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(UserRole.administrator, UserRole.manager))],
)
async def update_vehicle(
    vehicle_id: int, body: VehicleUpdateRequest, session: AsyncSession = Depends(db_session)
) -> None:
    vehicle = await VehicleRepo(session).get(vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Vehicle not found")
    manufacturer = await ManufacturerRepo(session).get(body.manufacturer_id)
    if manufacturer is None:
        raise BusinessRuleError("Manufacturer not found")

    # VIN is immutable; everything else is replaced.
    for name, value in body.model_dump(exclude={"manufacturer_id"}).items():
        setattr(vehicle, name, value)
    vehicle.manufacturer = manufacturer
    await session.commit()


@router.delete(
    "/{vehicle_id}",
    status_code=HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(UserRole.administrator))],
)
async def delete_vehicle(vehicle_id: int, session: AsyncSession = Depends(db_session)) -> None:
    vehicles = VehicleRepo(session)
    vehicle = await vehicles.get(vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Vehicle not found")
    if await MovementRepo(session).exists_for_vehicle(vehicle_id):
        raise BusinessRuleError("Cannot delete a vehicle with movement history")
    await vehicles.delete(vehicle)
    await session.commit()
    log.info("vehicle_deleted", vehicle_id=vehicle_id)
