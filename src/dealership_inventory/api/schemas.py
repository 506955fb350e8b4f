"""
dealership_inventory.api.schemas

Response models shared across routers.

Responsibilities:
- Define the public JSON shape of each entity (DTOs).
- Map ORM rows into DTOs (`from_model` constructors).

Request bodies live next to the routes that accept them.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

from dealership_inventory.db.models import (
    Customer,
    FuelType,
    Manufacturer,
    MovementType,
    TransmissionType,
    User,
    UserRole,
    Vehicle,
    VehicleMovement,
    VehicleStatus,
    VehicleType,
)

# Money is Decimal internally but rendered as a JSON number.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ManufacturerOut(BaseModel):
    id: int
    name: str
    contact_name: str
    email: str
    phone: str
    address: str
    country: str
    is_active: bool
    created_at: datetime

    @classmethod
    def from_model(cls, m: Manufacturer) -> ManufacturerOut:
        return cls(
            id=m.id,
            name=m.name,
            contact_name=m.contact_name,
            email=m.email,
            phone=m.phone,
            address=m.address,
            country=m.country,
            is_active=m.is_active,
            created_at=m.created_at,
        )


class ManufacturerWithCountOut(ManufacturerOut):
    vehicle_count: int


class CustomerOut(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    address: str
    city: str | None
    state: str | None
    postal_code: str | None
    cpf_cnpj: str | None
    birth_date: date | None
    is_active: bool
    created_at: datetime
    purchased_vehicles_count: int

    @classmethod
    def from_model(cls, c: Customer, *, purchased_vehicles_count: int) -> CustomerOut:
        return cls(
            id=c.id,
            name=c.name,
            email=c.email,
            phone=c.phone,
            address=c.address,
            city=c.city,
            state=c.state,
            postal_code=c.postal_code,
            cpf_cnpj=c.cpf_cnpj,
            birth_date=c.birth_date,
            is_active=c.is_active,
            created_at=c.created_at,
            purchased_vehicles_count=purchased_vehicles_count,
        )


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None

    @classmethod
    def from_model(cls, u: User) -> UserOut:
        return cls(
            id=u.id,
            username=u.username,
            email=u.email,
            first_name=u.first_name,
            last_name=u.last_name,
            full_name=u.full_name,
            role=u.role,
            is_active=u.is_active,
            created_at=u.created_at,
            last_login_at=u.last_login_at,
        )


class VehicleOut(BaseModel):
    id: int
    vin: str
    make: str
    model: str
    year: int
    color: str
    type: VehicleType
    status: VehicleStatus
    fuel_type: FuelType
    transmission_type: TransmissionType
    mileage: int
    cost_price: Money
    selling_price: Money
    arrival_date: datetime
    sold_date: datetime | None
    notes: str | None
    manufacturer_id: int
    manufacturer_name: str
    customer_id: int | None
    customer_name: str | None

    @classmethod
    def from_model(cls, v: Vehicle) -> VehicleOut:
        return cls(
            id=v.id,
            vin=v.vin,
            make=v.make,
            model=v.model,
            year=v.year,
            color=v.color,
            type=v.type,
            status=v.status,
            fuel_type=v.fuel_type,
            transmission_type=v.transmission_type,
            mileage=v.mileage,
            cost_price=v.cost_price,
            selling_price=v.selling_price,
            arrival_date=v.arrival_date,
            sold_date=v.sold_date,
            notes=v.notes,
            manufacturer_id=v.manufacturer_id,
            manufacturer_name=v.manufacturer.name if v.manufacturer is not None else "",
            customer_id=v.customer_id,
            customer_name=v.customer.name if v.customer is not None else None,
        )


class VehicleMovementOut(BaseModel):
    id: int
    type: MovementType
    movement_date: datetime
    description: str
    value: Money | None
    notes: str | None
    vehicle_id: int
    vehicle_vin: str
    vehicle_make_model: str
    customer_id: int | None
    customer_name: str | None
    user_id: int
    user_name: str

    @classmethod
    def from_model(cls, m: VehicleMovement) -> VehicleMovementOut:
        return cls(
            id=m.id,
            type=m.type,
            movement_date=m.movement_date,
            description=m.description,
            value=m.value,
            notes=m.notes,
            vehicle_id=m.vehicle_id,
            vehicle_vin=m.vehicle.vin,
            vehicle_make_model=f"{m.vehicle.make} {m.vehicle.model}",
            customer_id=m.customer_id,
            customer_name=m.customer.name if m.customer is not None else None,
            user_id=m.user_id,
            user_name=m.user.username,
        )
