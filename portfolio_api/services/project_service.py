"""Project and category business logic.

Projects own one hosted cover image (PROJECT_IMAGE). All request-level checks
(image policy, category and skills exist) run before anything is uploaded, so
a rejected request never touches storage.
"""

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.errors import ConflictError, NotFoundError, ValidationError
from portfolio_api.core.slugs import generate_unique_slug
from portfolio_api.models.project import Project, ProjectCategory
from portfolio_api.models.skill import Skill
from portfolio_api.repositories.project_repository import (
    CategoryRepository,
    ProjectRepository,
)
from portfolio_api.repositories.skill_repository import SkillRepository
from portfolio_api.services.asset_lifecycle import (
    PROJECT_IMAGE,
    AssetLifecycle,
    UploadCandidate,
    validate_upload,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# =============================================================================
# Projects
# =============================================================================


async def list_projects(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    category: str | None = None,
) -> tuple[list[Project], int]:
    """Page through projects newest first.

    The total counts only projects matching the category filter.
    """
    return await ProjectRepository.list_page(
        db, page=page, limit=limit, category_name=category
    )


async def get_project(db: AsyncSession, slug: str) -> Project:
    """Fetch a project by slug.

    Raises:
        NotFoundError: If no project has this slug.
    """
    project = await ProjectRepository.get_by_slug(db, slug)
    if project is None:
        raise NotFoundError("Project", slug)
    return project


async def _require_category(db: AsyncSession, category_id: uuid.UUID) -> ProjectCategory:
    category = await CategoryRepository.get_by_id(db, category_id)
    if category is None:
        raise NotFoundError("Category", str(category_id))
    return category


async def _require_skills(db: AsyncSession, skill_ids: list[uuid.UUID]) -> list[Skill]:
    unique_ids = list(dict.fromkeys(skill_ids))
    skills = await SkillRepository.get_many(db, unique_ids)
    found = {skill.id for skill in skills}
    missing = [str(skill_id) for skill_id in unique_ids if skill_id not in found]
    if missing:
        raise ValidationError(
            "Unknown skill ids",
            details=[{"field": "skill_ids", "missing": missing}],
        )
    # Keep the caller's order
    by_id = {skill.id: skill for skill in skills}
    return [by_id[skill_id] for skill_id in unique_ids]


async def create_project(
    db: AsyncSession,
    lifecycle: AssetLifecycle,
    *,
    title: str,
    description: str,
    category_id: uuid.UUID,
    skill_ids: list[uuid.UUID],
    image: UploadCandidate,
    link_demo: str | None = None,
    link_repository: str | None = None,
) -> Project:
    """Create a project with its cover image.

    Order: validate image -> check category/skills -> upload -> insert.
    If the insert fails, the fresh upload is discarded.

    Raises:
        InvalidAssetError: Image type or size not allowed.
        NotFoundError: Category does not exist.
        ValidationError: A skill id does not exist.
        StorageUnavailableError: Upload failed.
    """
    validate_upload(image, PROJECT_IMAGE)
    await _require_category(db, category_id)
    skills = await _require_skills(db, skill_ids)
    slug = await generate_unique_slug(db, title)

    ref = await lifecycle.store(image, PROJECT_IMAGE)
    async with lifecycle.rollback_on_error(ref):
        project = await ProjectRepository.create(
            db,
            title=title,
            slug=slug,
            description=description,
            category_id=category_id,
            image_url=ref.url,
            image_public_id=ref.external_id,
            skills=skills,
            link_demo=link_demo,
            link_repository=link_repository,
        )

    logger.info("Created project %s (%s)", project.id, project.slug)
    return project


async def update_project(
    db: AsyncSession,
    lifecycle: AssetLifecycle,
    slug: str,
    *,
    title: str | None = None,
    description: str | None = None,
    category_id: uuid.UUID | None = None,
    skill_ids: list[uuid.UUID] | None = None,
    image: UploadCandidate | None = None,
    link_demo: str | None = None,
    link_repository: str | None = None,
) -> Project:
    """Apply a partial edit to a project.

    The slug is regenerated only when the title actually changes. The image
    is replaced only when a new one is supplied.

    Raises:
        NotFoundError: Project or category does not exist.
        InvalidAssetError: New image type or size not allowed.
        ValidationError: A skill id does not exist.
        StorageUnavailableError: Upload of the new image failed.
    """
    project = await get_project(db, slug)
    if image is not None:
        validate_upload(image, PROJECT_IMAGE)

    changes: dict[str, object] = {}
    if category_id is not None and category_id != project.category_id:
        await _require_category(db, category_id)
        changes["category_id"] = category_id
    skills = await _require_skills(db, skill_ids) if skill_ids is not None else None

    if title is not None and title != project.title:
        changes["title"] = title
        changes["slug"] = await generate_unique_slug(
            db, title, current_slug=project.slug
        )
    if description is not None:
        changes["description"] = description
    if link_demo is not None:
        changes["link_demo"] = link_demo
    if link_repository is not None:
        changes["link_repository"] = link_repository

    existing = new_ref = None
    if image is not None:
        existing = PROJECT_IMAGE.ref_from_columns(
            project.image_url, project.image_public_id
        )
        new_ref = await lifecycle.replace(existing, image, PROJECT_IMAGE)
        changes["image_url"] = new_ref.url
        changes["image_public_id"] = new_ref.external_id

    async with lifecycle.rollback_replacements((existing, new_ref)):
        project = await ProjectRepository.update(db, project, skills=skills, **changes)

    logger.info("Updated project %s (%s)", project.id, project.slug)
    return project


async def delete_project(db: AsyncSession, lifecycle: AssetLifecycle, slug: str) -> None:
    """Delete a project's image, then the project.

    Raises:
        NotFoundError: Project does not exist.
        StorageUnavailableError: Image delete failed; the row is kept.
    """
    project = await get_project(db, slug)
    await lifecycle.delete(
        PROJECT_IMAGE.ref_from_columns(project.image_url, project.image_public_id)
    )
    await ProjectRepository.delete(db, project)
    logger.info("Deleted project %s (%s)", project.id, slug)


# =============================================================================
# Categories
# =============================================================================


async def list_categories(db: AsyncSession) -> list[ProjectCategory]:
    return await CategoryRepository.list_all(db)


async def get_category(db: AsyncSession, category_id: uuid.UUID) -> ProjectCategory:
    return await _require_category(db, category_id)


async def _ensure_name_free(
    db: AsyncSession, name: str, *, exclude_id: uuid.UUID | None = None
) -> None:
    existing = await CategoryRepository.get_by_name(db, name)
    if existing is not None and existing.id != exclude_id:
        raise ConflictError("CATEGORY_EXISTS", f"Category '{name}' already exists")


async def create_category(db: AsyncSession, name: str) -> ProjectCategory:
    """Create a category.

    Raises:
        ConflictError: A category with this name (case-insensitive) exists.
    """
    await _ensure_name_free(db, name)
    return await CategoryRepository.create(db, name=name)


async def rename_category(
    db: AsyncSession, category_id: uuid.UUID, name: str
) -> ProjectCategory:
    """Rename a category.

    Raises:
        NotFoundError: Category does not exist.
        ConflictError: Another category already has this name.
    """
    category = await _require_category(db, category_id)
    await _ensure_name_free(db, name, exclude_id=category.id)
    return await CategoryRepository.rename(db, category, name)


async def delete_category(db: AsyncSession, category_id: uuid.UUID) -> None:
    """Delete a category that no project uses.

    Raises:
        NotFoundError: Category does not exist.
        ConflictError: Projects still reference the category.
    """
    category = await _require_category(db, category_id)
    in_use = await ProjectRepository.count_by_category(db, category.id)
    if in_use:
        raise ConflictError(
            "CATEGORY_IN_USE",
            f"Category is used by {in_use} project(s)",
        )
    try:
        await CategoryRepository.delete(db, category)
    except IntegrityError as exc:
        # A project was added between the check and the delete
        raise ConflictError(
            "CATEGORY_IN_USE", "Category is used by one or more projects"
        ) from exc
