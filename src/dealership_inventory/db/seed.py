"""
dealership_inventory.db.seed

Idempotent startup seeding: default manufacturers and the bootstrap administrator.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership_inventory.auth.passwords import hash_password
from dealership_inventory.db.models import Manufacturer, User, UserRole
from dealership_inventory.observability.logging import get_logger
from dealership_inventory.settings import Settings

log = get_logger(__name__)

DEFAULT_MANUFACTURERS: tuple[dict[str, str], ...] = (
    {"name": "Ford", "contact_name": "Ford Brasil", "email": "contato@ford.com.br", "phone": "(11) 4003-3673"},
    {"name": "Chevrolet", "contact_name": "GM Brasil", "email": "contato@chevrolet.com.br", "phone": "(11) 0800-702-4200"},
    {"name": "Volkswagen", "contact_name": "VW Brasil", "email": "contato@vw.com.br", "phone": "(11) 0800-019-5775"},
    {"name": "Fiat", "contact_name": "Fiat Brasil", "email": "contato@fiat.com.br", "phone": "(31) 0800-707-1000"},
    {"name": "Toyota", "contact_name": "Toyota Brasil", "email": "contato@toyota.com.br", "phone": "(11) 0800-703-0206"},
)


async def seed_demo_data(session: AsyncSession, settings: Settings) -> None:
    existing = set(
        (await session.execute(select(func.lower(Manufacturer.name)))).scalars().all()
    )
    added = 0
    for row in DEFAULT_MANUFACTURERS:
        if row["name"].lower() in existing:
            continue
        session.add(Manufacturer(**row, address="", country="Brasil"))
        added += 1

    admin = (
        await session.execute(select(User).where(User.username == settings.admin_username))
    ).scalar_one_or_none()
    if admin is None:
        session.add(
            User(
                username=settings.admin_username,
                email=settings.admin_email,
                password_hash=hash_password(settings.admin_password),
                first_name="System",
                last_name="Administrator",
                role=UserRole.administrator,
            )
        )

    await session.commit()
    log.info("seed_completed", manufacturers_added=added, admin_created=admin is None)
