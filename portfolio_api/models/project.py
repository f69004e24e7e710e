"""Project, ProjectCategory and the project/skill association."""

import uuid

from sqlalchemy import CheckConstraint, Column, ForeignKey, String, Table, Text
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
from portfolio_api.models.skill import Skill

# Deleting a project or a skill drops its association rows
project_skills = Table(
    "project_skills",
    Base.metadata,
    Column(
        "project_id",
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "skill_id",
        UUID(as_uuid=True),
        ForeignKey("skills.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class ProjectCategory(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Category used to filter projects (e.g., "Web Developer")."""

    __tablename__ = "project_categories"

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
    )


class Project(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A portfolio project, addressed publicly by its slug.

    Attributes:
        title: Display title.
        slug: Unique URL key derived from the title.
        description: Free-form description.
        category_id: FK to ProjectCategory. RESTRICT: a category in use
            cannot be deleted.
        image_url / image_public_id: Hosted cover image.
        link_demo / link_repository: Optional external links.
        skills: Skills used in the project (many-to-many).
    """

    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(asset_pair_check("image"), name="ck_projects_image_pair"),
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text(),
        nullable=False,
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("project_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str | None] = asset_url_column()
    image_public_id: Mapped[str | None] = asset_public_id_column()
    link_demo: Mapped[str | None] = mapped_column(
        Text(),
        nullable=True,
    )
    link_repository: Mapped[str | None] = mapped_column(
        Text(),
        nullable=True,
    )

    category: Mapped[ProjectCategory] = relationship()
    skills: Mapped[list[Skill]] = relationship(
        secondary=project_skills,
        passive_deletes=True,
    )
