"""
tests.test_customers

Customer CRUD, searches, soft delete and purchase summaries.
"""

from __future__ import annotations

import httpx
import pytest


@pytest.mark.asyncio
async def test_create_get_and_optional_fields(
    client: httpx.AsyncClient, admin_headers: dict[str, str]
) -> None:
    body = {
        "name": "Maria Souza",
        "email": "maria@example.com",
        "city": "Brasilia",
        "state": "DF",
        "postal_code": "70000-000",
        "cpf_cnpj": "123.456.789-00",
        "birth_date": "1990-04-12",
    }
    r = await client.post("/api/customers", json=body, headers=admin_headers)
    assert r.status_code == 201
    created = r.json()
    assert created["purchased_vehicles_count"] == 0

    r = await client.get(f"/api/customers/{created['id']}", headers=admin_headers)
    fetched = r.json()
    assert fetched["city"] == "Brasilia"
    assert fetched["birth_date"] == "1990-04-12"

    r = await client.get("/api/customers/search/cpf-cnpj/123.456.789-00", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["id"] == created["id"]

    r = await client.get("/api/customers/search/cpf-cnpj/000", headers=admin_headers)
    assert r.status_code == 404

    r = await client.get("/api/customers/9999", headers=admin_headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_lookup_by_formatted_cnpj_with_slash(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_customer
) -> None:
    company = await make_customer(name="Locadora Central Ltda", cpf_cnpj="12.345.678/0001-90")

    r = await client.get(
        "/api/customers/search/cpf-cnpj/12.345.678/0001-90", headers=admin_headers
    )
    assert r.status_code == 200
    assert r.json()["id"] == company["id"]
    assert r.json()["cpf_cnpj"] == "12.345.678/0001-90"

    r = await client.get(
        "/api/customers/search/cpf-cnpj/12.345.678%2F0001-90", headers=admin_headers
    )
    assert r.status_code == 200
    assert r.json()["id"] == company["id"]

    r = await client.get(
        "/api/customers/search/cpf-cnpj/12.345.678/0001-99", headers=admin_headers
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_uniqueness_of_tax_id_and_email(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_customer
) -> None:
    first = await make_customer(email="dup@example.com", cpf_cnpj="111")

    r = await client.post(
        "/api/customers", json={"name": "B", "cpf_cnpj": "111"}, headers=admin_headers
    )
    assert r.status_code == 400
    r = await client.post(
        "/api/customers", json={"name": "C", "email": "DUP@example.com"}, headers=admin_headers
    )
    assert r.status_code == 400

    # Blank identifiers never collide.
    for name in ("D", "E"):
        r = await client.post(
            "/api/customers", json={"name": name, "email": "", "cpf_cnpj": ""}, headers=admin_headers
        )
        assert r.status_code == 201

    # Updating a customer with its own identifiers is fine.
    r = await client.put(
        f"/api/customers/{first['id']}",
        json={"name": "Renamed", "email": "dup@example.com", "cpf_cnpj": "111"},
        headers=admin_headers,
    )
    assert r.status_code == 204
    other = await make_customer()
    r = await client.put(
        f"/api/customers/{other['id']}",
        json={"name": "Other", "cpf_cnpj": "111"},
        headers=admin_headers,
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_search_by_name(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_customer
) -> None:
    await make_customer(name="Carlos Pereira")
    await make_customer(name="Ana Carla")
    await make_customer(name="Bruno")

    r = await client.get("/api/customers/search", params={"name": "CARL"}, headers=admin_headers)
    assert r.status_code == 200
    assert {c["name"] for c in r.json()} == {"Carlos Pereira", "Ana Carla"}

    r = await client.get("/api/customers/search", params={"name": "  "}, headers=admin_headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_customer
) -> None:
    await make_customer(name="Auto 50% Off")
    await make_customer(name="Auto 5000")
    await make_customer(name="Frota_Sul")
    await make_customer(name="FrotaXSul")

    r = await client.get("/api/customers/search", params={"name": "50%"}, headers=admin_headers)
    assert [c["name"] for c in r.json()] == ["Auto 50% Off"]

    r = await client.get("/api/customers/search", params={"name": "a_s"}, headers=admin_headers)
    assert [c["name"] for c in r.json()] == ["Frota_Sul"]


@pytest.mark.asyncio
async def test_soft_delete_and_activation(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_customer, make_user
) -> None:
    c = await make_customer()
    _, manager = await make_user("MANAGER")

    r = await client.delete(f"/api/customers/{c['id']}", headers=manager)
    assert r.status_code == 403

    r = await client.delete(f"/api/customers/{c['id']}", headers=admin_headers)
    assert r.status_code == 204
    listed = (await client.get("/api/customers", headers=admin_headers)).json()
    assert c["id"] not in {x["id"] for x in listed}

    r = await client.patch(f"/api/customers/{c['id']}/activate", headers=manager)
    assert r.status_code == 204
    listed = (await client.get("/api/customers", headers=admin_headers)).json()
    assert c["id"] in {x["id"] for x in listed}


@pytest.mark.asyncio
async def test_delete_blocked_by_movement_history(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_customer, make_vehicle
) -> None:
    c = await make_customer()
    v = await make_vehicle()
    r = await client.post(
        "/api/vehiclemovements/test-drive",
        json={"description": "Weekend drive", "vehicle_id": v["id"], "customer_id": c["id"]},
        headers=admin_headers,
    )
    assert r.status_code == 201

    r = await client.delete(f"/api/customers/{c['id']}", headers=admin_headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_vehicles_and_purchase_summary(
    client: httpx.AsyncClient, admin_headers: dict[str, str], make_customer, make_vehicle, make_user
) -> None:
    c = await make_customer()
    v1 = await make_vehicle(year=2020, selling_price=100000)
    v2 = await make_vehicle(year=2022, selling_price=50000)
    for v in (v1, v2):
        r = await client.post(
            "/api/vehiclemovements/sale",
            json={"description": "Sold", "vehicle_id": v["id"], "customer_id": c["id"],
                  "value": 1000},
            headers=admin_headers,
        )
        assert r.status_code == 201

    r = await client.get(f"/api/customers/{c['id']}/vehicles", headers=admin_headers)
    assert {v["id"] for v in r.json()} == {v1["id"], v2["id"]}
    assert all(v["customer_name"] == c["name"] for v in r.json())

    r = await client.get(f"/api/customers/{c['id']}", headers=admin_headers)
    assert r.json()["purchased_vehicles_count"] == 2

    r = await client.get(f"/api/customers/{c['id']}/purchase-summary", headers=admin_headers)
    assert r.status_code == 200
    summary = r.json()
    assert summary["total_vehicles_purchased"] == 2
    assert summary["total_amount_spent"] == 150000
    assert summary["average_vehicle_price"] == 75000
    assert summary["first_purchase_date"] is not None
    assert summary["vehicles_by_year"] == [{"year": 2020, "count": 1}, {"year": 2022, "count": 1}]

    empty = await make_customer()
    r = await client.get(f"/api/customers/{empty['id']}/purchase-summary", headers=admin_headers)
    assert r.json()["average_vehicle_price"] == 0
    assert r.json()["first_purchase_date"] is None

    _, mechanic = await make_user("MECHANIC")
    r = await client.get(f"/api/customers/{c['id']}/purchase-summary", headers=mechanic)
    assert r.status_code == 403
