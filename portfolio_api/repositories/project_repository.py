"""Repository for Project and ProjectCategory operations."""

import uuid
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from portfolio_api.models.project import Project, ProjectCategory
from portfolio_api.models.skill import Skill

_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "slug",
        "description",
        "category_id",
        "image_url",
        "image_public_id",
        "link_demo",
        "link_repository",
    }
)


def _with_relations(stmt):
    return stmt.options(
        selectinload(Project.category),
        selectinload(Project.skills).selectinload(Skill.level),
    )


class ProjectRepository:
    """Stateless repository for Project table operations.

    Reads eager-load category and skills (with levels) so results can be
    serialized outside the async context.
    """

    @staticmethod
    async def get_by_id(db: AsyncSession, project_id: uuid.UUID) -> Project | None:
        stmt = _with_relations(select(Project).where(Project.id == project_id))
        result = await db.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_slug(db: AsyncSession, slug: str) -> Project | None:
        """Fetch a project by slug (case-insensitive).

        Returns:
            Project if found, None otherwise.
        """
        stmt = _with_relations(select(Project).where(Project.slug == slug.lower()))
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def slug_exists(db: AsyncSession, slug: str) -> bool:
        stmt = select(Project.id).where(Project.slug == slug).limit(1)
        result = await db.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def count_by_category(db: AsyncSession, category_id: uuid.UUID) -> int:
        stmt = select(func.count(Project.id)).where(Project.category_id == category_id)
        return (await db.execute(stmt)).scalar_one()

    @staticmethod
    async def list_page(
        db: AsyncSession,
        *,
        page: int,
        limit: int,
        category_name: str | None = None,
    ) -> tuple[list[Project], int]:
        """List projects newest first, optionally filtered by category name.

        Args:
            db: Async database session.
            page: 1-indexed page number.
            limit: Page size.
            category_name: Exact category name to filter by (case-insensitive).

        Returns:
            Tuple of (projects on this page, total matching the filter).
        """
        filters = []
        if category_name:
            filters.append(
                func.lower(ProjectCategory.name) == category_name.strip().lower()
            )

        count_stmt = (
            select(func.count(Project.id))
            .join(ProjectCategory, Project.category_id == ProjectCategory.id)
            .where(*filters)
        )
        total = (await db.execute(count_stmt)).scalar_one()

        stmt = _with_relations(
            select(Project)
            .join(ProjectCategory, Project.category_id == ProjectCategory.id)
            .where(*filters)
            .order_by(Project.created_at.desc(), Project.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all()), total

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        title: str,
        slug: str,
        description: str,
        category_id: uuid.UUID,
        image_url: str | None,
        image_public_id: str | None,
        skills: Sequence[Skill] = (),
        link_demo: str | None = None,
        link_repository: str | None = None,
    ) -> Project:
        """Create a project and return it with relations loaded.

        Raises:
            sqlalchemy.exc.IntegrityError: On duplicate slug or unknown category.
        """
        project = Project(
            title=title,
            slug=slug,
            description=description,
            category_id=category_id,
            image_url=image_url,
            image_public_id=image_public_id,
            link_demo=link_demo,
            link_repository=link_repository,
            skills=list(skills),
        )
        db.add(project)
        await db.flush()
        loaded = await ProjectRepository.get_by_id(db, project.id)
        assert loaded is not None
        return loaded

    @staticmethod
    async def update(
        db: AsyncSession,
        project: Project,
        *,
        skills: Sequence[Skill] | None = None,
        **kwargs: object,
    ) -> Project:
        """Apply field changes (and optionally replace skills) to a project.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        for field, value in kwargs.items():
            setattr(project, field, value)
        if skills is not None:
            project.skills = list(skills)

        await db.flush()
        loaded = await ProjectRepository.get_by_id(db, project.id)
        assert loaded is not None
        return loaded

    @staticmethod
    async def delete(db: AsyncSession, project: Project) -> None:
        await db.delete(project)
        await db.flush()


class CategoryRepository:
    """Stateless repository for ProjectCategory table operations."""

    @staticmethod
    async def get_by_id(
        db: AsyncSession, category_id: uuid.UUID
    ) -> ProjectCategory | None:
        return await db.get(ProjectCategory, category_id)

    @staticmethod
    async def get_by_name(db: AsyncSession, name: str) -> ProjectCategory | None:
        stmt = select(ProjectCategory).where(
            func.lower(ProjectCategory.name) == name.strip().lower()
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(db: AsyncSession) -> list[ProjectCategory]:
        result = await db.execute(
            select(ProjectCategory).order_by(ProjectCategory.name.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def create(db: AsyncSession, *, name: str) -> ProjectCategory:
        category = ProjectCategory(name=name)
        db.add(category)
        await db.flush()
        await db.refresh(category)
        return category

    @staticmethod
    async def rename(
        db: AsyncSession, category: ProjectCategory, name: str
    ) -> ProjectCategory:
        category.name = name
        await db.flush()
        await db.refresh(category)
        return category

    @staticmethod
    async def delete(db: AsyncSession, category: ProjectCategory) -> None:
        """Delete a category.

        Raises:
            sqlalchemy.exc.IntegrityError: If projects still reference it.
        """
        await db.delete(category)
        await db.flush()
