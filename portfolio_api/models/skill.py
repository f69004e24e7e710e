"""Skill and experience Level models."""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_api.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
    asset_pair_check,
    asset_public_id_column,
    asset_url_column,
)


class Level(Base, UUIDPrimaryKeyMixin):
    """Experience level a skill is rated at (e.g., "Expert", 90).

    Seeded once by scripts/seed.py; read-only through the API.
    """

    __tablename__ = "levels"
    __table_args__ = (
        CheckConstraint(
            "competency_level BETWEEN 0 AND 100",
            name="ck_levels_competency_range",
        ),
    )

    name: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
    )
    competency_level: Mapped[int] = mapped_column(
        Integer(),
        nullable=False,
    )


class Skill(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A skill shown on the portfolio, with a hosted icon.

    Attributes:
        name: Skill name (e.g., "Python").
        level_id: FK to the experience level.
        icon_url / icon_public_id: Hosted icon (raster or SVG).
    """

    __tablename__ = "skills"
    __table_args__ = (
        CheckConstraint(asset_pair_check("icon"), name="ck_skills_icon_pair"),
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    level_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("levels.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    icon_url: Mapped[str | None] = asset_url_column()
    icon_public_id: Mapped[str | None] = asset_public_id_column()

    level: Mapped[Level] = relationship()
