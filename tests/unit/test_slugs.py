"""Tests for project slug generation."""

from unittest.mock import AsyncMock, patch

import pytest

from portfolio_api.core.slugs import generate_unique_slug, slugify

_SLUG_EXISTS = "portfolio_api.core.slugs.ProjectRepository.slug_exists"


class TestSlugify:
    """Tests for slugify()."""

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("My Portfolio Site", "my-portfolio-site"),
            ("  Trim me  ", "trim-me"),
            ("Café Menu -- v2!", "cafe-menu-v2"),
            ("C++ & Rust", "c-rust"),
            ("already-a-slug", "already-a-slug"),
        ],
    )
    def test_slugify(self, title, expected):
        assert slugify(title) == expected

    def test_symbols_only_falls_back(self):
        assert slugify("!!!") == "untitled"

    def test_long_title_is_cut(self):
        slug = slugify("word " * 100)
        assert len(slug) <= 240
        assert not slug.endswith("-")


class TestGenerateUniqueSlug:
    """Tests for generate_unique_slug()."""

    @pytest.mark.asyncio
    async def test_free_slug_used_as_is(self):
        with patch(_SLUG_EXISTS, new_callable=AsyncMock, return_value=False):
            assert await generate_unique_slug(AsyncMock(), "Blog App") == "blog-app"

    @pytest.mark.asyncio
    async def test_counter_appended_until_free(self):
        taken = {"blog-app", "blog-app-1"}

        async def _exists(_db, slug):
            return slug in taken

        with patch(_SLUG_EXISTS, side_effect=_exists):
            assert await generate_unique_slug(AsyncMock(), "Blog App") == "blog-app-2"

    @pytest.mark.asyncio
    async def test_current_slug_treated_as_free(self):
        """Editing a project keeps its own slug when the base matches."""
        with patch(_SLUG_EXISTS, new_callable=AsyncMock, return_value=True) as exists:
            slug = await generate_unique_slug(
                AsyncMock(), "Blog App", current_slug="blog-app"
            )

        assert slug == "blog-app"
        exists.assert_not_called()

    @pytest.mark.asyncio
    async def test_current_suffixed_slug_reused(self):
        taken = {"blog-app", "blog-app-1"}

        async def _exists(_db, slug):
            return slug in taken

        with patch(_SLUG_EXISTS, side_effect=_exists):
            slug = await generate_unique_slug(
                AsyncMock(), "Blog App", current_slug="blog-app-1"
            )

        assert slug == "blog-app-1"
