"""
dealership_inventory.api.routers.info

Anonymous service information endpoints under `/api/info`.

Responsibilities:
- Describe the API (name, version, entrypoints) for humans and dashboards.
- Report database health with entity counts.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from dealership_inventory import __version__
from dealership_inventory.api.deps import db_session, settings_dep
from dealership_inventory.db.repositories.manufacturers import ManufacturerRepo
from dealership_inventory.db.repositories.users import UserRepo
from dealership_inventory.db.repositories.vehicles import VehicleRepo
from dealership_inventory.observability.logging import get_logger
from dealership_inventory.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/api/info", tags=["info"])

_MAIN_ENDPOINTS = {
    "auth": "/api/auth",
    "vehicles": "/api/vehicles",
    "manufacturers": "/api/manufacturers",
    "customers": "/api/customers",
    "vehicle_movements": "/api/vehiclemovements",
    "users": "/api/users",
}


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()


@router.get("/home")
async def home(settings: Settings = Depends(settings_dep)) -> dict[str, Any]:
    return {
        "title": "Dealership Inventory System",
        "version": __version__,
        "description": "Inventory management API for an automobile dealership",
        "status": "Online",
        "documentation": {"swagger_ui": "/docs", "openapi": "/openapi.json"},
        "authentication": {"type": "JWT Bearer Token", "login_endpoint": "/api/auth/login"},
        "main_endpoints": _MAIN_ENDPOINTS,
        "probe_endpoints": {"liveness": "/healthz", "readiness": "/readyz"},
        "environment": settings.env,
    }


@router.get("/health")
async def health(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Any:
    try:
        counts = {
            "manufacturers": await ManufacturerRepo(session).count(),
            "users": await UserRepo(session).count(),
            "vehicles": await VehicleRepo(session).count(),
        }
    except SQLAlchemyError as e:
        log.error("health_check_failed", error_type=type(e).__name__, exc_info=e)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "Unhealthy", "error": type(e).__name__, "timestamp": _now()},
        )
    return {
        "status": "Healthy",
        "timestamp": _now(),
        "database": {"status": "Connected", **counts},
        "environment": settings.env,
        "version": __version__,
    }


@router.get("/details")
async def details(settings: Settings = Depends(settings_dep)) -> dict[str, Any]:
    return {
        "api_name": "Dealership Inventory System API",
        "version": __version__,
        "environment": settings.env,
        "framework": "FastAPI",
        "database": settings.database_url.split("://", 1)[0],
        "authentication": "JWT Bearer",
        "features": [
            "CRUD operations for vehicles, manufacturers, customers and users",
            "Vehicle status driven by movement events",
            "Role-based authorization",
            "Uniform JSON error bodies",
            "Structured request logging with correlation ids",
            "OpenAPI documentation",
        ],
        "endpoints": _MAIN_ENDPOINTS,
    }


@router.get("/status")
async def status(request: Request, settings: Settings = Depends(settings_dep)) -> dict[str, Any]:
    started_at: datetime = request.app.state.started_at
    return {
        "application": {
            "name": settings.service_name,
            "status": "Running",
            "port": settings.api_port,
            "start_time": started_at.isoformat(),
            "uptime_seconds": int((datetime.now(tz=UTC) - started_at).total_seconds()),
            "environment": settings.env,
        },
        "database": {
            "provider": settings.database_url.split("://", 1)[0],
            "seed_data_enabled": settings.seed_demo_data,
        },
        "authentication": {
            "type": "JWT",
            "token_expiration_hours": settings.jwt_expiration_hours,
            "self_registration": settings.allow_self_registration and settings.env != "prod",
        },
        "features": {
            "docs": "/docs",
            "cors_origins": settings.cors_allow_origins,
            "request_logging": True,
        },
    }
