"""
dealership_inventory.db.models

Persistence schema for the dealership inventory.

Responsibilities:
- Define the stable enums exposed through the API.
- Define ORM models:
  - Manufacturer: vehicle suppliers
  - Customer: buyers and prospects
  - User: staff accounts (role drives authorization)
  - Vehicle: inventory unit with current status/owner
  - VehicleMovement: append-mostly log of events that drive vehicle status
"""

from __future__ import annotations

import enum
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealership_inventory.db.base import Base


def utcnow() -> datetime:
    # Persist naive UTC timestamps; SQLite has no tz-aware datetime type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class VehicleStatus(enum.StrEnum):
    available = "AVAILABLE"
    reserved = "RESERVED"
    test_drive = "TEST_DRIVE"
    maintenance = "MAINTENANCE"
    sold = "SOLD"
    inactive = "INACTIVE"


class VehicleType(enum.StrEnum):
    new = "NEW"
    semi_new = "SEMI_NEW"
    used = "USED"


class FuelType(enum.StrEnum):
    gasoline = "GASOLINE"
    ethanol = "ETHANOL"
    diesel = "DIESEL"
    flex = "FLEX"
    electric = "ELECTRIC"
    hybrid = "HYBRID"


class TransmissionType(enum.StrEnum):
    manual = "MANUAL"
    automatic = "AUTOMATIC"
    cvt = "CVT"
    semi_automatic = "SEMI_AUTOMATIC"


class MovementType(enum.StrEnum):
    entry = "ENTRY"
    test_drive = "TEST_DRIVE"
    reservation = "RESERVATION"
    sale = "SALE"
    maintenance = "MAINTENANCE"
    transfer = "TRANSFER"
    inspection = "INSPECTION"
    status_change = "STATUS_CHANGE"


class UserRole(enum.StrEnum):
    administrator = "ADMINISTRATOR"
    manager = "MANAGER"
    salesperson = "SALESPERSON"
    mechanic = "MECHANIC"
    operator = "OPERATOR"


class Manufacturer(Base):
    __tablename__ = "manufacturers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    contact_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    address: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    address: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # Brazilian individual/company tax id (CPF/CNPJ).
    cpf_cnpj: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), nullable=False, default=UserRole.operator, index=True
    )
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    last_login_at: Mapped[datetime | None] = mapped_column(nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    vin: Mapped[str] = mapped_column(String(17), nullable=False, unique=True)
    make: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(50), nullable=False)
    year: Mapped[int] = mapped_column(nullable=False)
    color: Mapped[str] = mapped_column(String(30), nullable=False)

    type: Mapped[VehicleType] = mapped_column(
        Enum(VehicleType), nullable=False, default=VehicleType.new
    )
    status: Mapped[VehicleStatus] = mapped_column(
        Enum(VehicleStatus), nullable=False, default=VehicleStatus.available, index=True
    )
    fuel_type: Mapped[FuelType] = mapped_column(
        Enum(FuelType), nullable=False, default=FuelType.gasoline
    )
    transmission_type: Mapped[TransmissionType] = mapped_column(
        Enum(TransmissionType), nullable=False, default=TransmissionType.manual
    )

    mileage: Mapped[int] = mapped_column(nullable=False, default=0)
    cost_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    selling_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)

    arrival_date: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    sold_date: Mapped[datetime | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    manufacturer_id: Mapped[int] = mapped_column(
        ForeignKey("manufacturers.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    # Buyer; set by SALE movements.
    customer_id: Mapped[int | None] = mapped_column(
        ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # selectin: DTOs always need the names and async sessions cannot lazy-load.
    manufacturer: Mapped[Manufacturer] = relationship(lazy="selectin")
    customer: Mapped[Customer | None] = relationship(lazy="selectin")


class VehicleMovement(Base):
    __tablename__ = "vehicle_movements"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    type: Mapped[MovementType] = mapped_column(Enum(MovementType), nullable=False, index=True)
    movement_date: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    value: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    vehicle_id: Mapped[int] = mapped_column(
        ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id: Mapped[int | None] = mapped_column(
        ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    vehicle: Mapped[Vehicle] = relationship(lazy="selectin")
    customer: Mapped[Customer | None] = relationship(lazy="selectin")
    user: Mapped[User] = relationship(lazy="selectin")

    __table_args__ = (Index("ix_movements_vehicle_date", "vehicle_id", "movement_date"),)


# --- Module Notes -----------------------------------------------------------
# Enum values are part of the public API contract; add members, never rename them.
