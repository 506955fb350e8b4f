"""
tests.test_errors

Uniform error bodies produced by the global exception handlers.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI
from sqlalchemy.exc import IntegrityError

from dealership_inventory.api.errors import classify_integrity_error
from dealership_inventory.errors import BusinessRuleError, NotFoundError

ERROR_KEYS = {"status_code", "message", "detail", "timestamp", "request_id"}


def _integrity(msg: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception(msg))


@pytest.mark.parametrize(
    ("driver_message", "expected"),
    [
        ("UNIQUE constraint failed: vehicles.vin", "A record with the same unique identifier already exists"),
        ("FOREIGN KEY constraint failed", "Cannot perform this operation due to related data constraints"),
        ("NOT NULL constraint failed: users.email", "Required field cannot be empty"),
        ("CHECK constraint failed: price", "The provided data violates business rules"),
        ("something else", "Database operation failed due to data validation error"),
    ],
)
def test_integrity_error_classification(driver_message: str, expected: str) -> None:
    assert classify_integrity_error(_integrity(driver_message)) == expected


def test_domain_errors_carry_status_and_message() -> None:
    e = BusinessRuleError("nope")
    assert (e.status_code, e.message, e.detail) == (400, "Invalid operation", "nope")
    assert NotFoundError("x").status_code == 404


@pytest.mark.asyncio
async def test_not_found_route_uses_error_body(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/does-not-exist")
    assert r.status_code == 404
    body = r.json()
    assert set(body) == ERROR_KEYS
    assert body["message"] == "Resource not found"


@pytest.mark.asyncio
async def test_unhandled_exception_becomes_generic_500(app: FastAPI) -> None:
    async def boom() -> None:
        raise RuntimeError("secret internals")

    async def duplicate() -> None:
        raise _integrity("UNIQUE constraint failed: customers.email")

    app.add_api_route("/boom", boom)
    app.add_api_route("/duplicate", duplicate)

    # Starlette re-raises after rendering the 500; keep the response instead.
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        r = await c.get("/boom")
        assert r.status_code == 500
        body = r.json()
        assert set(body) == ERROR_KEYS
        assert body["message"] == "An internal server error occurred"
        assert "secret" not in r.text

        r = await c.get("/duplicate")
        assert r.status_code == 400
        assert r.json()["message"] == "Database operation failed"
        assert r.json()["detail"] == "A record with the same unique identifier already exists"
