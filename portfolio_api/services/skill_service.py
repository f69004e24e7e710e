"""Skill business logic. Each skill owns one hosted icon (SKILL_ICON)."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.errors import NotFoundError
from portfolio_api.models.skill import Skill
from portfolio_api.repositories.skill_repository import LevelRepository, SkillRepository
from portfolio_api.services.asset_lifecycle import (
    SKILL_ICON,
    AssetLifecycle,
    UploadCandidate,
    validate_upload,
)

logger = logging.getLogger(__name__)


async def list_skills(db: AsyncSession) -> list[Skill]:
    return await SkillRepository.list_all(db)


async def get_skill(db: AsyncSession, skill_id: uuid.UUID) -> Skill:
    """Raises NotFoundError if the skill does not exist."""
    skill = await SkillRepository.get_by_id(db, skill_id)
    if skill is None:
        raise NotFoundError("Skill", str(skill_id))
    return skill


async def _require_level(db: AsyncSession, level_id: uuid.UUID) -> None:
    if await LevelRepository.get_by_id(db, level_id) is None:
        raise NotFoundError("Level", str(level_id))


async def create_skill(
    db: AsyncSession,
    lifecycle: AssetLifecycle,
    *,
    name: str,
    level_id: uuid.UUID,
    icon: UploadCandidate,
) -> Skill:
    """Create a skill with its icon.

    Raises:
        InvalidAssetError: Icon type or size not allowed.
        NotFoundError: Level does not exist.
        StorageUnavailableError: Upload failed.
    """
    validate_upload(icon, SKILL_ICON)
    await _require_level(db, level_id)

    ref = await lifecycle.store(icon, SKILL_ICON)
    async with lifecycle.rollback_on_error(ref):
        skill = await SkillRepository.create(
            db,
            name=name,
            level_id=level_id,
            icon_url=ref.url,
            icon_public_id=ref.external_id,
        )

    logger.info("Created skill %s", skill.id)
    return skill


async def update_skill(
    db: AsyncSession,
    lifecycle: AssetLifecycle,
    skill_id: uuid.UUID,
    *,
    name: str | None = None,
    level_id: uuid.UUID | None = None,
    icon: UploadCandidate | None = None,
) -> Skill:
    """Apply a partial edit; the icon is replaced only when a new one is given.

    Raises:
        NotFoundError: Skill or level does not exist.
        InvalidAssetError: New icon type or size not allowed.
        StorageUnavailableError: Upload of the new icon failed.
    """
    skill = await get_skill(db, skill_id)
    if icon is not None:
        validate_upload(icon, SKILL_ICON)

    changes: dict[str, object] = {}
    if name is not None:
        changes["name"] = name
    if level_id is not None and level_id != skill.level_id:
        await _require_level(db, level_id)
        changes["level_id"] = level_id

    existing = new_ref = None
    if icon is not None:
        existing = SKILL_ICON.ref_from_columns(skill.icon_url, skill.icon_public_id)
        new_ref = await lifecycle.replace(existing, icon, SKILL_ICON)
        changes["icon_url"] = new_ref.url
        changes["icon_public_id"] = new_ref.external_id

    async with lifecycle.rollback_replacements((existing, new_ref)):
        skill = await SkillRepository.update(db, skill, **changes)

    logger.info("Updated skill %s", skill.id)
    return skill


async def delete_skill(
    db: AsyncSession, lifecycle: AssetLifecycle, skill_id: uuid.UUID
) -> None:
    """Delete a skill's icon, then the skill. Project links are dropped.

    Raises:
        NotFoundError: Skill does not exist.
        StorageUnavailableError: Icon delete failed; the row is kept.
    """
    skill = await get_skill(db, skill_id)
    await lifecycle.delete(SKILL_ICON.ref_from_columns(skill.icon_url, skill.icon_public_id))
    await SkillRepository.delete(db, skill)
    logger.info("Deleted skill %s", skill_id)
