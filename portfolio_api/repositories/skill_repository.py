"""Repository for Skill and Level operations."""

import uuid
from collections.abc import Collection

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from portfolio_api.models.skill import Level, Skill

_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {"name", "level_id", "icon_url", "icon_public_id"}
)


class SkillRepository:
    """Stateless repository for Skill table operations.

    Reads eager-load the skill's level.
    """

    @staticmethod
    async def get_by_id(db: AsyncSession, skill_id: uuid.UUID) -> Skill | None:
        stmt = (
            select(Skill)
            .where(Skill.id == skill_id)
            .options(selectinload(Skill.level))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_many(
        db: AsyncSession, skill_ids: Collection[uuid.UUID]
    ) -> list[Skill]:
        """Fetch skills by id. Missing ids are simply absent from the result."""
        if not skill_ids:
            return []
        stmt = (
            select(Skill)
            .where(Skill.id.in_(list(skill_ids)))
            .options(selectinload(Skill.level))
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_all(db: AsyncSession) -> list[Skill]:
        """List skills alphabetically with their levels."""
        stmt = (
            select(Skill).options(selectinload(Skill.level)).order_by(Skill.name.asc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        level_id: uuid.UUID,
        icon_url: str | None,
        icon_public_id: str | None,
    ) -> Skill:
        """Create a skill.

        Raises:
            sqlalchemy.exc.IntegrityError: If level_id does not exist.
        """
        skill = Skill(
            name=name,
            level_id=level_id,
            icon_url=icon_url,
            icon_public_id=icon_public_id,
        )
        db.add(skill)
        await db.flush()
        loaded = await SkillRepository.get_by_id(db, skill.id)
        assert loaded is not None
        return loaded

    @staticmethod
    async def update(db: AsyncSession, skill: Skill, **kwargs: object) -> Skill:
        """Apply field changes to a skill.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        for field, value in kwargs.items():
            setattr(skill, field, value)
        await db.flush()
        loaded = await SkillRepository.get_by_id(db, skill.id)
        assert loaded is not None
        return loaded

    @staticmethod
    async def delete(db: AsyncSession, skill: Skill) -> None:
        await db.delete(skill)
        await db.flush()


class LevelRepository:
    """Read-only access to the seeded experience levels."""

    @staticmethod
    async def get_by_id(db: AsyncSession, level_id: uuid.UUID) -> Level | None:
        return await db.get(Level, level_id)

    @staticmethod
    async def list_all(db: AsyncSession) -> list[Level]:
        """List levels from least to most competent."""
        result = await db.execute(
            select(Level).order_by(Level.competency_level.asc(), Level.name.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_by_name(db: AsyncSession, name: str) -> Level | None:
        result = await db.execute(select(Level).where(Level.name == name))
        return result.scalar_one_or_none()

    @staticmethod
    async def create(db: AsyncSession, *, name: str, competency_level: int) -> Level:
        level = Level(name=name, competency_level=competency_level)
        db.add(level)
        await db.flush()
        await db.refresh(level)
        return level
