"""
dealership_inventory.api.routers.manufacturers

Manufacturer endpoints (`/api/manufacturers`).

Responsibilities:
- List active manufacturers (optionally with vehicle counts).
- Create/update with case-insensitive name uniqueness.
- Soft-delete and (de)activate.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from dealership_inventory.api.deps import db_session
from dealership_inventory.api.schemas import ManufacturerOut, ManufacturerWithCountOut
from dealership_inventory.auth.deps import get_principal, require_roles
from dealership_inventory.db.models import Manufacturer, UserRole
from dealership_inventory.db.repositories.manufacturers import ManufacturerRepo
from dealership_inventory.errors import BusinessRuleError

router = APIRouter(
    prefix="/api/manufacturers", tags=["manufacturers"], dependencies=[Depends(get_principal)]
)

_editors = Depends(require_roles(UserRole.administrator, UserRole.manager))


class ManufacturerRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    contact_name: str = Field(default="", max_length=100)
    email: str = Field(default="", max_length=100)
    phone: str = Field(default="", max_length=20)
    address: str = Field(default="", max_length=200)
    country: str = Field(default="", max_length=50)


async def _get_or_404(repo: ManufacturerRepo, manufacturer_id: int) -> Manufacturer:
    manufacturer = await repo.get(manufacturer_id)
    if manufacturer is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Manufacturer not found")
    return manufacturer


@router.get("", response_model=list[ManufacturerOut])
async def list_manufacturers(session: AsyncSession = Depends(db_session)) -> list[ManufacturerOut]:
    return [ManufacturerOut.from_model(m) for m in await ManufacturerRepo(session).list_active()]


@router.get("/with-vehicle-count", response_model=list[ManufacturerWithCountOut])
async def list_with_vehicle_count(
    session: AsyncSession = Depends(db_session),
) -> list[ManufacturerWithCountOut]:
    rows = await ManufacturerRepo(session).list_active_with_vehicle_count()
    return [
        ManufacturerWithCountOut(**ManufacturerOut.from_model(m).model_dump(), vehicle_count=n)
        for m, n in rows
    ]


@router.get("/{manufacturer_id}", response_model=ManufacturerOut)
async def get_manufacturer(
    manufacturer_id: int, session: AsyncSession = Depends(db_session)
) -> ManufacturerOut:
    return ManufacturerOut.from_model(await _get_or_404(ManufacturerRepo(session), manufacturer_id))


@router.post(
    "", response_model=ManufacturerOut, status_code=HTTP_201_CREATED, dependencies=[_editors]
)
async def create_manufacturer(
    body: ManufacturerRequest, session: AsyncSession = Depends(db_session)
) -> ManufacturerOut:
    repo = ManufacturerRepo(session)
    if await repo.name_taken(body.name):
        raise BusinessRuleError("A manufacturer with this name already exists")
    manufacturer = await repo.create(**body.model_dump(), is_active=True)
    await session.commit()
    return ManufacturerOut.from_model(manufacturer)


@router.put("/{manufacturer_id}", status_code=HTTP_204_NO_CONTENT, dependencies=[_editors])
async def update_manufacturer(
    manufacturer_id: int, body: ManufacturerRequest, session: AsyncSession = Depends(db_session)
) -> None:
    repo = ManufacturerRepo(session)
    manufacturer = await _get_or_404(repo, manufacturer_id)
    if await repo.name_taken(body.name, exclude_id=manufacturer_id):
        raise BusinessRuleError("A manufacturer with this name already exists")
    for name, value in body.model_dump().items():
        setattr(manufacturer, name, value)
    await session.commit()


@router.delete(
    "/{manufacturer_id}",
    status_code=HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(UserRole.administrator))],
)
async def delete_manufacturer(
    manufacturer_id: int, session: AsyncSession = Depends(db_session)
) -> None:
    repo = ManufacturerRepo(session)
    manufacturer = await _get_or_404(repo, manufacturer_id)
    if await repo.has_vehicles(manufacturer_id):
        raise BusinessRuleError("Cannot delete a manufacturer that has vehicles")
    # Soft delete: rows stay for history.
    manufacturer.is_active = False
    await session.commit()


@router.patch(
    "/{manufacturer_id}/deactivate", status_code=HTTP_204_NO_CONTENT, dependencies=[_editors]
)
async def deactivate_manufacturer(
    manufacturer_id: int, session: AsyncSession = Depends(db_session)
) -> None:
    (await _get_or_404(ManufacturerRepo(session), manufacturer_id)).is_active = False
    await session.commit()


@router.patch(
    "/{manufacturer_id}/activate", status_code=HTTP_204_NO_CONTENT, dependencies=[_editors]
)
async def activate_manufacturer(
    manufacturer_id: int, session: AsyncSession = Depends(db_session)
) -> None:
    (await _get_or_404(ManufacturerRepo(session), manufacturer_id)).is_active = True
    await session.commit()
