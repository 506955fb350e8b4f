"""
dealership_inventory.services.vehicle_status

Vehicle-status state machine driven by movement events.

Responsibilities:
- Map each movement type to the vehicle status it produces.
- Apply ownership/sale-date side effects of a SALE.
- Revert those effects when a SALE movement is deleted.

Transition table (movement -> resulting status):

    ENTRY          -> AVAILABLE
    TEST_DRIVE     -> TEST_DRIVE
    RESERVATION    -> RESERVED
    SALE           -> SOLD (owner := customer, sold_date := at)
    MAINTENANCE    -> MAINTENANCE
    TRANSFER       -> AVAILABLE
    INSPECTION     -> (unchanged)
    STATUS_CHANGE  -> (unchanged)

Transitions are unconditional: the resulting status depends only on the movement
type, never on the vehicle's current status.
"""

from __future__ import annotations

from datetime import datetime
from types import MappingProxyType

from dealership_inventory.db.models import Customer, MovementType, Vehicle, VehicleStatus

STATUS_AFTER_MOVEMENT: MappingProxyType[MovementType, VehicleStatus] = MappingProxyType(
    {
        MovementType.entry: VehicleStatus.available,
        MovementType.test_drive: VehicleStatus.test_drive,
        MovementType.reservation: VehicleStatus.reserved,
        MovementType.sale: VehicleStatus.sold,
        MovementType.maintenance: VehicleStatus.maintenance,
        MovementType.transfer: VehicleStatus.available,
    }
)


def status_after(movement_type: MovementType, current: VehicleStatus) -> VehicleStatus:
    return STATUS_AFTER_MOVEMENT.get(movement_type, current)


def apply_movement(
    vehicle: Vehicle,
    movement_type: MovementType,
    *,
    customer: Customer | None,
    at: datetime,
) -> None:
    vehicle.status = status_after(movement_type, vehicle.status)
    if movement_type == MovementType.sale:
        # Assign the relationship (not just the FK) so DTO mapping sees the buyer.
        vehicle.customer = customer
        vehicle.sold_date = at


def revert_movement(vehicle: Vehicle, movement_type: MovementType) -> None:
    # Only a sale is undone; other movements leave the vehicle as it is now.
    if movement_type != MovementType.sale:
        return
    vehicle.status = VehicleStatus.available
    vehicle.customer = None
    vehicle.sold_date = None
