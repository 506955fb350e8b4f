"""
tests.test_manufacturers

Manufacturer CRUD, soft delete and role enforcement.
"""

from __future__ import annotations

import httpx
import pytest


@pytest.mark.asyncio
async def test_seeded_manufacturers_are_listed(
    client: httpx.AsyncClient, admin_headers: dict[str, str]
) -> None:
    r = await client.get("/api/manufacturers", headers=admin_headers)
    assert r.status_code == 200
    names = {m["name"] for m in r.json()}
    assert names == {"Ford", "Chevrolet", "Volkswagen", "Fiat", "Toyota"}
    assert all(m["country"] == "Brasil" for m in r.json())


@pytest.mark.asyncio
async def test_create_update_and_name_uniqueness(
    client: httpx.AsyncClient, admin_headers: dict[str, str]
) -> None:
    r = await client.post(
        "/api/manufacturers", json={"name": "Honda", "country": "Japan"}, headers=admin_headers
    )
    assert r.status_code == 201
    honda = r.json()
    assert honda["is_active"] is True

    r = await client.post("/api/manufacturers", json={"name": "HONDA"}, headers=admin_headers)
    assert r.status_code == 400

    r = await client.put(
        f"/api/manufacturers/{honda['id']}", json={"name": "ford"}, headers=admin_headers
    )
    assert r.status_code == 400

    r = await client.put(
        f"/api/manufacturers/{honda['id']}",
        json={"name": "Honda Motor", "country": "Japan"},
        headers=admin_headers,
    )
    assert r.status_code == 204
    r = await client.get(f"/api/manufacturers/{honda['id']}", headers=admin_headers)
    assert r.json()["name"] == "Honda Motor"

    r = await client.put("/api/manufacturers/9999", json={"name": "Nope"}, headers=admin_headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_is_soft_and_blocked_by_vehicles(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_vehicle, manufacturer_id: int
) -> None:
    await make_vehicle()
    r = await client.delete(f"/api/manufacturers/{manufacturer_id}", headers=admin_headers)
    assert r.status_code == 400

    r = await client.post("/api/manufacturers", json={"name": "Kia"}, headers=admin_headers)
    kia_id = r.json()["id"]
    r = await client.delete(f"/api/manufacturers/{kia_id}", headers=admin_headers)
    assert r.status_code == 204

    listed = await client.get("/api/manufacturers", headers=admin_headers)
    assert kia_id not in {m["id"] for m in listed.json()}
    # Still addressable by id.
    r = await client.get(f"/api/manufacturers/{kia_id}", headers=admin_headers)
    assert r.json()["is_active"] is False

    r = await client.patch(f"/api/manufacturers/{kia_id}/activate", headers=admin_headers)
    assert r.status_code == 204
    r = await client.get(f"/api/manufacturers/{kia_id}", headers=admin_headers)
    assert r.json()["is_active"] is True


@pytest.mark.asyncio
async def test_with_vehicle_count(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_vehicle, manufacturer_id: int
) -> None:
    await make_vehicle()
    await make_vehicle()
    r = await client.get("/api/manufacturers/with-vehicle-count", headers=admin_headers)
    assert r.status_code == 200
    counts = {m["id"]: m["vehicle_count"] for m in r.json()}
    assert counts[manufacturer_id] == 2
    assert sum(counts.values()) == 2


@pytest.mark.asyncio
async def test_roles(client: httpx.AsyncClient, make_user) -> None:
    _, sales = await make_user("SALESPERSON")
    _, manager = await make_user("MANAGER")

    r = await client.get("/api/manufacturers", headers=sales)
    assert r.status_code == 200
    r = await client.post("/api/manufacturers", json={"name": "BYD"}, headers=sales)
    assert r.status_code == 403

    r = await client.post("/api/manufacturers", json={"name": "BYD"}, headers=manager)
    assert r.status_code == 201
    r = await client.delete(f"/api/manufacturers/{r.json()['id']}", headers=manager)
    assert r.status_code == 403
