"""
tests.test_vehicles

Vehicle CRUD, VIN lookups and delete rules.
"""

from __future__ import annotations

import httpx
import pytest


@pytest.mark.asyncio
async def test_create_and_fetch_vehicle(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_vehicle
) -> None:
    v = await make_vehicle(fuel_type="FLEX", transmission_type="AUTOMATIC", cost_price="45999.90")
    assert v["status"] == "AVAILABLE"
    assert v["manufacturer_name"] == "Ford"
    assert v["customer_id"] is None
    assert v["customer_name"] is None
    assert v["cost_price"] == 45999.9
    assert v["sold_date"] is None

    r = await client.get(f"/api/vehicles/{v['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["vin"] == v["vin"]

    r = await client.get(f"/api/vehicles/vin/{v['vin']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["id"] == v["id"]

    r = await client.get("/api/vehicles/vin/NOPE", headers=admin_headers)
    assert r.status_code == 404

    r = await client.get("/api/vehicles", headers=admin_headers)
    assert [x["id"] for x in r.json()] == [v["id"]]


@pytest.mark.asyncio
async def test_duplicate_vin_and_unknown_manufacturer(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_vehicle, manufacturer_id: int
) -> None:
    v = await make_vehicle()
    body = {
        "vin": v["vin"],
        "make": "Ford",
        "model": "Ka",
        "year": 2021,
        "color": "Blue",
        "manufacturer_id": manufacturer_id,
    }
    r = await client.post("/api/vehicles", json=body, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "A vehicle with this VIN already exists"

    r = await client.post(
        "/api/vehicles", json={**body, "vin": "NEWVIN00000000001", "manufacturer_id": 9999},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Manufacturer not found"


@pytest.mark.asyncio
async def test_update_replaces_fields_but_not_vin(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_vehicle
) -> None:
    v = await make_vehicle()
    manufacturers = (await client.get("/api/manufacturers", headers=admin_headers)).json()
    toyota = next(m for m in manufacturers if m["name"] == "Toyota")

    body = {
        "vin": "IGNOREDVIN0000000",
        "make": "Toyota",
        "model": "Corolla",
        "year": 2023,
        "color": "Silver",
        "mileage": 1200,
        "selling_price": 150000,
        "manufacturer_id": toyota["id"],
    }
    r = await client.put(f"/api/vehicles/{v['id']}", json=body, headers=admin_headers)
    assert r.status_code == 204

    updated = (await client.get(f"/api/vehicles/{v['id']}", headers=admin_headers)).json()
    assert updated["vin"] == v["vin"]
    assert updated["model"] == "Corolla"
    assert updated["mileage"] == 1200
    assert updated["manufacturer_name"] == "Toyota"

    r = await client.put("/api/vehicles/9999", json=body, headers=admin_headers)
    assert r.status_code == 404
    r = await client.put(
        f"/api/vehicles/{v['id']}", json={**body, "manufacturer_id": 9999}, headers=admin_headers
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_validation_errors_are_422(
    client: httpx.AsyncClient, admin_headers: dict[str, str], manufacturer_id: int
) -> None:
    r = await client.post(
        "/api/vehicles",
        json={"vin": "X" * 18, "make": "", "model": "M", "year": 1800, "color": "c",
              "manufacturer_id": manufacturer_id},
        headers=admin_headers,
    )
    assert r.status_code == 422
    body = r.json()
    assert body["message"] == "Request validation failed"
    fields = {tuple(e["loc"])[-1] for e in body["detail"]}
    assert {"vin", "make", "year"} <= fields


@pytest.mark.asyncio
async def test_delete_rules_and_roles(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_vehicle, make_user
) -> None:
    _, manager = await make_user("MANAGER")
    _, sales = await make_user("SALESPERSON")

    v = await make_vehicle()
    r = await client.post(
        "/api/vehicles",
        json={"vin": "SALESVIN000000001", "make": "a", "model": "b", "year": 2020, "color": "c",
              "manufacturer_id": v["manufacturer_id"]},
        headers=sales,
    )
    assert r.status_code == 403

    r = await client.delete(f"/api/vehicles/{v['id']}", headers=manager)
    assert r.status_code == 403

    r = await client.post(
        "/api/vehiclemovements/entry",
        json={"description": "Arrived", "vehicle_id": v["id"]},
        headers=admin_headers,
    )
    assert r.status_code == 201
    r = await client.delete(f"/api/vehicles/{v['id']}", headers=admin_headers)
    assert r.status_code == 400

    other = await make_vehicle()
    r = await client.delete(f"/api/vehicles/{other['id']}", headers=admin_headers)
    assert r.status_code == 204
    r = await client.get(f"/api/vehicles/{other['id']}", headers=admin_headers)
    assert r.status_code == 404
