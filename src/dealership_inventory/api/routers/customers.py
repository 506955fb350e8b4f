"""
dealership_inventory.api.routers.customers

Customer endpoints (`/api/customers`).

Responsibilities:
- List/search active customers with purchase counts.
- Create/update with tax id and email uniqueness.
- Soft-delete, (de)activate and purchase summaries.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from dealership_inventory.api.deps import db_session
from dealership_inventory.api.schemas import CustomerOut, VehicleOut
from dealership_inventory.auth.deps import get_principal, require_roles
from dealership_inventory.db.models import Customer, UserRole
from dealership_inventory.db.repositories.customers import CustomerRepo
from dealership_inventory.errors import BusinessRuleError

router = APIRouter(prefix="/api/customers", tags=["customers"], dependencies=[Depends(get_principal)])

_sales_staff = Depends(require_roles(UserRole.administrator, UserRole.manager, UserRole.salesperson))
_managers = Depends(require_roles(UserRole.administrator, UserRole.manager))


class CustomerRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(default="", max_length=100)
    phone: str = Field(default="", max_length=20)
    address: str = Field(default="", max_length=200)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    postal_code: str | None = Field(default=None, max_length=20)
    cpf_cnpj: str | None = Field(default=None, max_length=20)
    birth_date: date | None = None


async def _get_or_404(repo: CustomerRepo, customer_id: int) -> Customer:
    customer = await repo.get(customer_id)
    if customer is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


async def _check_unique(repo: CustomerRepo, body: CustomerRequest, *, exclude_id: int | None = None) -> None:
    # Blank identifiers are not considered duplicates.
    if body.cpf_cnpj and await repo.cpf_cnpj_taken(body.cpf_cnpj, exclude_id=exclude_id):
        raise BusinessRuleError("A customer with this CPF/CNPJ already exists")
    if body.email and await repo.email_taken(body.email, exclude_id=exclude_id):
        raise BusinessRuleError("A customer with this email already exists")


async def _to_out(repo: CustomerRepo, customer: Customer) -> CustomerOut:
    return CustomerOut.from_model(
        customer, purchased_vehicles_count=await repo.purchased_count(customer.id)
    )


@router.get("", response_model=list[CustomerOut])
async def list_customers(session: AsyncSession = Depends(db_session)) -> list[CustomerOut]:
    rows = await CustomerRepo(session).list_active_with_purchase_count()
    return [CustomerOut.from_model(c, purchased_vehicles_count=n) for c, n in rows]


@router.get("/search", response_model=list[CustomerOut])
async def search_customers(
    name: str = Query(default=""), session: AsyncSession = Depends(db_session)
) -> list[CustomerOut]:
    if not name.strip():
        raise BusinessRuleError("A name to search for is required")
    rows = await CustomerRepo(session).search_active_by_name(name.strip())
    return [CustomerOut.from_model(c, purchased_vehicles_count=n) for c, n in rows]


@router.get("/search/cpf-cnpj/{cpf_cnpj:path}", response_model=CustomerOut)
async def get_customer_by_cpf_cnpj(
    cpf_cnpj: str, session: AsyncSession = Depends(db_session)
) -> CustomerOut:
    repo = CustomerRepo(session)
    customer = await repo.get_active_by_cpf_cnpj(cpf_cnpj)
    if customer is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Customer not found")
    return await _to_out(repo, customer)


@router.get("/{customer_id}", response_model=CustomerOut)
async def get_customer(customer_id: int, session: AsyncSession = Depends(db_session)) -> CustomerOut:
    repo = CustomerRepo(session)
    return await _to_out(repo, await _get_or_404(repo, customer_id))


@router.get("/{customer_id}/vehicles", response_model=list[VehicleOut])
async def get_customer_vehicles(
    customer_id: int, session: AsyncSession = Depends(db_session)
) -> list[VehicleOut]:
    repo = CustomerRepo(session)
    await _get_or_404(repo, customer_id)
    return [VehicleOut.from_model(v) for v in await repo.purchased_vehicles(customer_id)]


@router.post("", response_model=CustomerOut, status_code=HTTP_201_CREATED, dependencies=[_sales_staff])
async def create_customer(
    body: CustomerRequest, session: AsyncSession = Depends(db_session)
) -> CustomerOut:
    repo = CustomerRepo(session)
    await _check_unique(repo, body)
    customer = await repo.create(**body.model_dump(), is_active=True)
    await session.commit()
    return CustomerOut.from_model(customer, purchased_vehicles_count=0)


@router.put("/{customer_id}", status_code=HTTP_204_NO_CONTENT, dependencies=[_sales_staff])
async def update_customer(
    customer_id: int, body: CustomerRequest, session: AsyncSession = Depends(db_session)
) -> None:
    repo = CustomerRepo(session)
    customer = await _get_or_404(repo, customer_id)
    await _check_unique(repo, body, exclude_id=customer_id)
    for name, value in body.model_dump().items():
        setattr(customer, name, value)
    await session.commit()


@router.delete(
    "/{customer_id}",
    status_code=HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(UserRole.administrator))],
)
async def delete_customer(customer_id: int, session: AsyncSession = Depends(db_session)) -> None:
    repo = CustomerRepo(session)
    customer = await _get_or_404(repo, customer_id)
    if await repo.has_vehicles_or_movements(customer_id):
        raise BusinessRuleError("Cannot delete a customer with purchases or movement history")
    customer.is_active = False
    await session.commit()


@router.patch("/{customer_id}/deactivate", status_code=HTTP_204_NO_CONTENT, dependencies=[_managers])
async def deactivate_customer(customer_id: int, session: AsyncSession = Depends(db_session)) -> None:
    (await _get_or_404(CustomerRepo(session), customer_id)).is_active = False
    await session.commit()


@router.patch("/{customer_id}/activate", status_code=HTTP_204_NO_CONTENT, dependencies=[_managers])
async def activate_customer(customer_id: int, session: AsyncSession = Depends(db_session)) -> None:
    (await _get_or_404(CustomerRepo(session), customer_id)).is_active = True
    await session.commit()


@router.get("/{customer_id}/purchase-summary", dependencies=[_sales_staff])
async def purchase_summary(
    customer_id: int, session: AsyncSession = Depends(db_session)
) -> dict[str, Any]:
    repo = CustomerRepo(session)
    customer = await _get_or_404(repo, customer_id)
    vehicles = await repo.purchased_vehicles(customer_id)

    total = sum((v.selling_price for v in vehicles), Decimal(0))
    sold_dates = [v.sold_date for v in vehicles if v.sold_date is not None]
    by_year = Counter(v.year for v in vehicles)
    return {
        "customer_id": customer.id,
        "customer_name": customer.name,
        "total_vehicles_purchased": len(vehicles),
        "total_amount_spent": float(total),
        "first_purchase_date": min(sold_dates, default=None),
        "last_purchase_date": max(sold_dates, default=None),
        "average_vehicle_price": float(total / len(vehicles)) if vehicles else 0.0,
        "vehicles_by_year": [{"year": y, "count": n} for y, n in sorted(by_year.items())],
    }
