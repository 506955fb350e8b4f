"""
dealership_inventory.api.app

FastAPI app factory for the dealership inventory service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Seed reference data and the bootstrap administrator on startup.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dealership_inventory import __version__
from dealership_inventory.api.errors import setup_exception_handlers
from dealership_inventory.api.routers.auth import router as auth_router
from dealership_inventory.api.routers.customers import router as customers_router
from dealership_inventory.api.routers.health import router as health_router
from dealership_inventory.api.routers.info import router as info_router
from dealership_inventory.api.routers.manufacturers import router as manufacturers_router
from dealership_inventory.api.routers.movements import router as movements_router
from dealership_inventory.api.routers.users import router as users_router
from dealership_inventory.api.routers.vehicles import router as vehicles_router
from dealership_inventory.db.init_db import init_db
from dealership_inventory.db.seed import seed_demo_data
from dealership_inventory.db.session import create_engine, create_sessionmaker
from dealership_inventory.observability.logging import configure_logging, get_logger
from dealership_inventory.observability.middleware import RequestContextMiddleware
from dealership_inventory.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod schemas are managed by Alembic.
            await init_db(engine)
        if settings.seed_demo_data:
            async with app.state.sessionmaker() as session:
                await seed_demo_data(session, settings)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Dealership Inventory System",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.started_at = datetime.now(tz=UTC)

    # Last added runs first: CORS wraps request logging.
    app.add_middleware(RequestContextMiddleware, slow_request_ms=settings.slow_request_ms)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Total-Count", "X-Page", "X-Page-Size", "x-request-id"],
    )
    setup_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(info_router)
    app.include_router(auth_router)
    app.include_router(vehicles_router)
    app.include_router(manufacturers_router)
    app.include_router(customers_router)
    app.include_router(users_router)
    app.include_router(movements_router)
    return app


# --- Module Notes -----------------------------------------------------------
# Settings live on app.state so several apps (e.g. tests) can run side by side.
