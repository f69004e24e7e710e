"""URL slug generation for projects."""

import re
import unicodedata

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.repositories.project_repository import ProjectRepository

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Column is String(255); leave room for a "-NNN" suffix
_MAX_BASE_LENGTH = 240

_FALLBACK_SLUG = "untitled"


def slugify(text: str) -> str:
    """Lowercase ASCII slug: accents folded, other characters become hyphens.

    >>> slugify("Café Menu -- v2!")
    'cafe-menu-v2'
    """
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_ALNUM.sub("-", ascii_text).strip("-")
    slug = slug[:_MAX_BASE_LENGTH].rstrip("-")
    return slug or _FALLBACK_SLUG


async def generate_unique_slug(
    db: AsyncSession,
    title: str,
    *,
    current_slug: str | None = None,
) -> str:
    """Slugify a title, appending -1, -2, ... until no other project uses it.

    Args:
        db: Async database session.
        title: Project title.
        current_slug: Slug the project being edited already holds; it is
            treated as free.

    Returns:
        Slug not used by any other project.
    """
    base = slugify(title)
    candidate = base
    counter = 1
    while candidate != current_slug and await ProjectRepository.slug_exists(
        db, candidate
    ):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
