"""Integration tests for repositories and schema constraints.

Uses real PostgreSQL database; skipped when it is not reachable.
"""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.slugs import generate_unique_slug
from portfolio_api.models.skill import Level
from portfolio_api.repositories.project_repository import (
    CategoryRepository,
    ProjectRepository,
)
from portfolio_api.repositories.skill_repository import LevelRepository, SkillRepository
from portfolio_api.repositories.user_repository import UserRepository

pytestmark = pytest.mark.integration

_IMAGE_URL = "https://storage.test/image/portfolio/project/x"
_IMAGE_ID = "portfolio/project/x"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _seed_project(
    db: AsyncSession,
    *,
    title: str,
    category_name: str = "Web Developer",
    created_at: datetime | None = None,
):
    category = await CategoryRepository.get_by_name(db, category_name)
    if category is None:
        category = await CategoryRepository.create(db, name=category_name)
    project = await ProjectRepository.create(
        db,
        title=title,
        slug=await generate_unique_slug(db, title),
        description=f"{title} description",
        category_id=category.id,
        image_url=_IMAGE_URL,
        image_public_id=_IMAGE_ID,
    )
    if created_at is not None:
        project.created_at = created_at
        await db.flush()
    return project


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_email_is_normalized(self, db_session):
        await UserRepository.create(
            db_session, email="  Ann@Example.COM ", name="Ann", password_hash="x"
        )

        found = await UserRepository.get_by_email(db_session, "ann@example.com")

        assert found is not None
        assert found.email == "ann@example.com"

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, db_session):
        await UserRepository.create(db_session, email="a@b.com", name="A", password_hash="x")

        with pytest.raises(IntegrityError):
            await UserRepository.create(
                db_session, email="A@B.com", name="B", password_hash="y"
            )

    @pytest.mark.asyncio
    async def test_update_rejects_password_hash(self, db_session):
        user = await UserRepository.create(
            db_session, email="a@b.com", name="A", password_hash="x"
        )

        with pytest.raises(ValueError, match="password_hash"):
            await UserRepository.update(db_session, user.id, password_hash="y")

    @pytest.mark.asyncio
    async def test_half_set_asset_reference_rejected(self, db_session):
        user = await UserRepository.create(
            db_session, email="a@b.com", name="A", password_hash="x"
        )

        with pytest.raises(IntegrityError):
            await UserRepository.update(
                db_session, user.id, cv_url="https://storage.test/raw/cv.pdf"
            )


# ---------------------------------------------------------------------------
# Projects and categories
# ---------------------------------------------------------------------------


class TestProjectRepository:
    @pytest.mark.asyncio
    async def test_list_page_newest_first_with_filtered_total(self, db_session):
        now = datetime.now(UTC)
        await _seed_project(db_session, title="Old Site", created_at=now - timedelta(days=2))
        await _seed_project(db_session, title="New Site", created_at=now)
        await _seed_project(
            db_session,
            title="Poster",
            category_name="Graphic Design",
            created_at=now - timedelta(days=1),
        )

        everything, total = await ProjectRepository.list_page(db_session, page=1, limit=10)
        assert [p.title for p in everything] == ["New Site", "Poster", "Old Site"]
        assert total == 3

        web, web_total = await ProjectRepository.list_page(
            db_session, page=1, limit=1, category_name="web developer"
        )
        assert [p.title for p in web] == ["New Site"]
        assert web_total == 2

    @pytest.mark.asyncio
    async def test_slugs_are_unique_and_case_insensitive(self, db_session):
        first = await _seed_project(db_session, title="Blog App")
        second = await _seed_project(db_session, title="Blog App")

        assert first.slug == "blog-app"
        assert second.slug == "blog-app-1"
        assert await ProjectRepository.slug_exists(db_session, "blog-app")

        found = await ProjectRepository.get_by_slug(db_session, "Blog-App")
        assert found is not None
        assert found.id == first.id
        assert found.category.name == "Web Developer"

    @pytest.mark.asyncio
    async def test_count_by_category(self, db_session):
        project = await _seed_project(db_session, title="Blog App")

        assert await ProjectRepository.count_by_category(db_session, project.category_id) == 1

    @pytest.mark.asyncio
    async def test_category_name_lookup_is_case_insensitive(self, db_session):
        await CategoryRepository.create(db_session, name="Web Developer")

        found = await CategoryRepository.get_by_name(db_session, " WEB developer ")

        assert found is not None
        assert found.name == "Web Developer"

    @pytest.mark.asyncio
    async def test_category_in_use_cannot_be_deleted(self, db_session):
        project = await _seed_project(db_session, title="Blog App")
        category = await CategoryRepository.get_by_id(db_session, project.category_id)

        with pytest.raises(IntegrityError):
            await CategoryRepository.delete(db_session, category)
            await db_session.flush()


# ---------------------------------------------------------------------------
# Levels and skills
# ---------------------------------------------------------------------------


class TestSkillRepository:
    @pytest.mark.asyncio
    async def test_levels_ordered_by_competency(self, db_session):
        await LevelRepository.create(db_session, name="Expert", competency_level=90)
        await LevelRepository.create(db_session, name="Novice", competency_level=10)

        levels = await LevelRepository.list_all(db_session)

        assert [lvl.name for lvl in levels] == ["Novice", "Expert"]

    @pytest.mark.asyncio
    async def test_competency_must_be_a_percentage(self, db_session):
        db_session.add(Level(name="Godlike", competency_level=101))

        with pytest.raises(IntegrityError):
            await db_session.flush()

    @pytest.mark.asyncio
    async def test_get_many_loads_levels(self, db_session):
        level = await LevelRepository.create(db_session, name="Expert", competency_level=90)
        skill = await SkillRepository.create(
            db_session,
            name="Python",
            level_id=level.id,
            icon_url="https://storage.test/image/portfolio/skill/py",
            icon_public_id="portfolio/skill/py",
        )

        found = await SkillRepository.get_many(db_session, [skill.id])

        assert [s.level.name for s in found] == ["Expert"]
