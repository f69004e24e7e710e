"""Seed the database with the admin account and reference data.

Standalone script (not an Alembic migration). Run after migration 001.
Safe to re-run: existing rows are left untouched.

Usage:
    python -m scripts.seed

Environment:
    SEED_ADMIN_EMAIL     Admin login email (required)
    SEED_ADMIN_PASSWORD  Admin password (required)
    SEED_ADMIN_NAME      Display name (default: "Admin")
"""

import logging
import os
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.auth import hash_password
from portfolio_api.repositories.project_repository import CategoryRepository
from portfolio_api.repositories.skill_repository import LevelRepository
from portfolio_api.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: tuple[str, ...] = ("Web Developer", "Graphic Design")

DEFAULT_LEVELS: tuple[tuple[str, int], ...] = (
    ("Novice", 10),
    ("Beginner", 30),
    ("Skillful", 55),
    ("Experienced", 75),
    ("Expert", 90),
)


@dataclass
class SeedStats:
    """Counters for a single seed run."""

    users_created: int = 0
    categories_created: int = 0
    levels_created: int = 0


async def run_seed(
    db: AsyncSession,
    *,
    admin_email: str | None,
    admin_password: str | None,
    admin_name: str = "Admin",
) -> SeedStats:
    """Insert missing seed rows.

    The admin account is skipped when either credential is missing.

    Args:
        db: Async database session. Caller commits.
        admin_email: Admin login email.
        admin_password: Plaintext admin password, hashed before storage.
        admin_name: Admin display name.

    Returns:
        SeedStats with the number of rows created per table.
    """
    stats = SeedStats()

    if admin_email and admin_password:
        if await UserRepository.get_by_email(db, admin_email) is None:
            await UserRepository.create(
                db,
                email=admin_email,
                name=admin_name,
                password_hash=hash_password(admin_password),
            )
            stats.users_created += 1
    else:
        logger.warning("SEED_ADMIN_EMAIL/SEED_ADMIN_PASSWORD not set, skipping admin")

    for name in DEFAULT_CATEGORIES:
        if await CategoryRepository.get_by_name(db, name) is None:
            await CategoryRepository.create(db, name=name)
            stats.categories_created += 1

    for name, competency in DEFAULT_LEVELS:
        if await LevelRepository.get_by_name(db, name) is None:
            await LevelRepository.create(db, name=name, competency_level=competency)
            stats.levels_created += 1

    logger.info(
        "Seed complete: %d users, %d categories, %d levels created",
        stats.users_created,
        stats.categories_created,
        stats.levels_created,
    )
    return stats


async def main() -> None:
    """CLI entry point: seed the configured database."""
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from portfolio_api.core.config import settings

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = create_async_engine(settings.database_url, echo=False)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        await run_seed(
            session,
            admin_email=os.environ.get("SEED_ADMIN_EMAIL"),
            admin_password=os.environ.get("SEED_ADMIN_PASSWORD"),
            admin_name=os.environ.get("SEED_ADMIN_NAME", "Admin"),
        )
        await session.commit()

    await engine.dispose()


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
