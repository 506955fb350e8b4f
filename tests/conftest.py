"""
tests.conftest

Shared fixtures: an isolated app per test (fresh SQLite file), an in-process
HTTP client and helpers for authenticating as users with a given role.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from itertools import count
from typing import Any

import httpx
import pytest_asyncio
from fastapi import FastAPI

from dealership_inventory.api.app import create_app
from dealership_inventory.settings import Settings

ADMIN_PASSWORD = "Admin123!"
USER_PASSWORD = "Secret123!"

_seq = count(1)


def make_settings(tmp_path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "env": "test",
        "log_level": "WARNING",
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        "jwt_secret": "test-secret-0123456789-abcdefghijklmnop",
        "admin_password": ADMIN_PASSWORD,
    }
    values.update(overrides)
    return Settings(**values)


@pytest_asyncio.fixture
async def app(tmp_path) -> AsyncIterator[FastAPI]:
    application = create_app(settings=make_settings(tmp_path))
    # httpx ASGITransport does not run lifespan events; enter them explicitly.
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def login(client: httpx.AsyncClient, username: str, password: str) -> dict[str, str]:
    r = await client.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest_asyncio.fixture
async def admin_headers(client: httpx.AsyncClient) -> dict[str, str]:
    return await login(client, "admin", ADMIN_PASSWORD)


UserFactory = Callable[..., Awaitable[tuple[dict[str, Any], dict[str, str]]]]


@pytest_asyncio.fixture
async def make_user(client: httpx.AsyncClient, admin_headers: dict[str, str]) -> UserFactory:
    """Create a user with `role` through the API and return (user_json, auth_headers)."""

    async def _make(role: str, **fields: Any) -> tuple[dict[str, Any], dict[str, str]]:
        n = next(_seq)
        body = {
            "username": f"{role.lower()}{n}",
            "email": f"{role.lower()}{n}@example.com",
            "first_name": role.title(),
            "last_name": f"User{n}",
            "password": USER_PASSWORD,
            "role": role,
            **fields,
        }
        r = await client.post("/api/users", json=body, headers=admin_headers)
        assert r.status_code == 201, r.text
        return r.json(), await login(client, body["username"], body["password"])

    return _make


@pytest_asyncio.fixture
async def manufacturer_id(client: httpx.AsyncClient, admin_headers: dict[str, str]) -> int:
    r = await client.get("/api/manufacturers", headers=admin_headers)
    return next(m["id"] for m in r.json() if m["name"] == "Ford")


@pytest_asyncio.fixture
async def make_vehicle(
    client: httpx.AsyncClient, admin_headers: dict[str, str], manufacturer_id: int
) -> Callable[..., Awaitable[dict[str, Any]]]:
    async def _make(**fields: Any) -> dict[str, Any]:
        n = next(_seq)
        body = {
            "vin": f"9BWZZZ377VT{n:06d}",
            "make": "Ford",
            "model": "Ka",
            "year": 2022,
            "color": "Red",
            "cost_price": 50000,
            "selling_price": 60000,
            "manufacturer_id": manufacturer_id,
            **fields,
        }
        r = await client.post("/api/vehicles", json=body, headers=admin_headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest_asyncio.fixture
async def make_customer(
    client: httpx.AsyncClient, admin_headers: dict[str, str]
) -> Callable[..., Awaitable[dict[str, Any]]]:
    async def _make(**fields: Any) -> dict[str, Any]:
        n = next(_seq)
        body = {
            "name": f"Customer {n}",
            "email": f"customer{n}@example.com",
            "phone": "(61) 99999-0000",
            "cpf_cnpj": f"000.000.{n:03d}-00",
            **fields,
        }
        r = await client.post("/api/customers", json=body, headers=admin_headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _make
