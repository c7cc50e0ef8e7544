"""Bootstrap a fresh database with the team accounts and the map pool.

Run with ``python -m rosterapp.seed``. Safe to re-run: existing users keep
their password and existing maps keep their template.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from rosterapp.config import settings
from rosterapp.database import AsyncSessionLocal
from rosterapp.logging_config import setup_logging
from rosterapp.models.user import UserRole
from rosterapp.services.auth_service import create_user, get_user_by_email
from rosterapp.services.map_service import get_map, upsert_map

logger = logging.getLogger(__name__)

SEED_USERS: list[tuple[str, str, UserRole]] = [
    ("nyork@example.com", "Nyork", UserRole.player),
    ("kekew@example.com", "Kekew", UserRole.player),
    ("matic@example.com", "Matic", UserRole.player),
    ("sib@example.com", "Sib", UserRole.admin),
    ("celesta@example.com", "Celesta", UserRole.player),
]

DEFAULT_TEMPLATE: dict = {
    "assignments": [
        {"id": 1, "name": "Poste 1", "x": 25, "y": 25, "zone": {"x1": 15, "y1": 15, "x2": 35, "y2": 35}},
        {"id": 2, "name": "Poste 2", "x": 75, "y": 25, "zone": {"x1": 65, "y1": 15, "x2": 85, "y2": 35}},
        {"id": 3, "name": "Poste 3", "x": 25, "y": 75, "zone": {"x1": 15, "y1": 65, "x2": 35, "y2": 85}},
        {"id": 4, "name": "Poste 4", "x": 75, "y": 75, "zone": {"x1": 65, "y1": 65, "x2": 85, "y2": 85}},
    ]
}

SEED_MAPS: list[tuple[str, str, list[str]]] = [
    ("artefact", "Artefact", ["/maps/artefact/Artefact.png"]),
    ("atlantis", "Atlantis", ["/maps/atlantis/Atlantis.png"]),
    ("ceres", "Ceres", ["/maps/ceres/Ceres.png"]),
    ("engine", "Engine", ["/maps/engine/Engine.png"]),
    ("helios", "Helios", ["/maps/helios/Helios_0.png", "/maps/helios/Helios_1.png"]),
    ("horizon", "Horizon", ["/maps/horizon/Horizon.png"]),
    ("lunar", "Lunar", ["/maps/lunar/Lunar.png"]),
    ("outlaw", "Outlaw", ["/maps/outlaw/Outlaw.png"]),
    ("polaris", "Polaris", ["/maps/polaris/Polaris.png"]),
    ("silva", "Silva", ["/maps/silva/Silva.png"]),
    ("thecliff", "The Cliff", ["/maps/thecliff/TheCliff.png"]),
]


async def seed_users(db: AsyncSession, password: str) -> None:
    for email, name, role in SEED_USERS:
        user = await get_user_by_email(db, email)
        if user is None:
            await create_user(db, email=email, name=name, password=password, role=role)
            logger.info("Created user %s (%s) - %s", name, email, role.value)
            continue
        user.name = name
        user.role = role
        await db.commit()
        logger.info("Updated user %s (%s) - %s", name, email, role.value)


async def seed_maps(db: AsyncSession) -> None:
    for map_id, name, images in SEED_MAPS:
        # The template is only written on creation so admin edits survive a re-seed
        template = DEFAULT_TEMPLATE if await get_map(db, map_id) is None else None
        await upsert_map(db, map_id, name=name, images=images, template=template)


async def seed(db: AsyncSession, password: str | None = None) -> None:
    await seed_users(db, password or settings.seed_password)
    await seed_maps(db)
    logger.info("Seed completed: %d users, %d maps", len(SEED_USERS), len(SEED_MAPS))


async def main() -> None:
    async with AsyncSessionLocal() as db:
        await seed(db)


if __name__ == "__main__":
    setup_logging(settings.log_level)
    asyncio.run(main())
