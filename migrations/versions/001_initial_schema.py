"""Initial portfolio schema.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Creates users, levels, skills, project_categories, projects, project_skills
and certificates. Every hosted-file reference is a url/public_id column pair
that must be set or cleared together.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_UUID_DEFAULT = sa.text("gen_random_uuid()")


def _id_column() -> sa.Column:
    return sa.Column(
        "id", UUID(as_uuid=True), primary_key=True, server_default=_UUID_DEFAULT
    )


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _asset_columns(prefix: str) -> list[sa.Column]:
    return [
        sa.Column(f"{prefix}_url", sa.Text(), nullable=True),
        sa.Column(f"{prefix}_public_id", sa.Text(), nullable=True),
    ]


def _asset_pair_check(table: str, prefix: str) -> sa.CheckConstraint:
    return sa.CheckConstraint(
        f"({prefix}_url IS NULL) = ({prefix}_public_id IS NULL)",
        name=f"ck_{table}_{prefix}_pair",
    )


def upgrade() -> None:
    # pgcrypto provides gen_random_uuid() on PostgreSQL < 13
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "users",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        *_asset_columns("profile"),
        *_asset_columns("cv"),
        *_timestamp_columns(),
        _asset_pair_check("users", "profile"),
        _asset_pair_check("users", "cv"),
    )

    op.create_table(
        "levels",
        _id_column(),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("competency_level", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "competency_level BETWEEN 0 AND 100",
            name="ck_levels_competency_range",
        ),
    )

    op.create_table(
        "skills",
        _id_column(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column(
            "level_id",
            UUID(as_uuid=True),
            sa.ForeignKey("levels.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        *_asset_columns("icon"),
        *_timestamp_columns(),
        _asset_pair_check("skills", "icon"),
    )
    op.create_index("ix_skills_level_id", "skills", ["level_id"])

    op.create_table(
        "project_categories",
        _id_column(),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        *_timestamp_columns(),
    )

    op.create_table(
        "projects",
        _id_column(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "category_id",
            UUID(as_uuid=True),
            sa.ForeignKey("project_categories.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        *_asset_columns("image"),
        sa.Column("link_demo", sa.Text(), nullable=True),
        sa.Column("link_repository", sa.Text(), nullable=True),
        *_timestamp_columns(),
        _asset_pair_check("projects", "image"),
    )
    op.create_index("ix_projects_category_id", "projects", ["category_id"])
    op.create_index("ix_projects_created_at", "projects", ["created_at"])

    op.create_table(
        "project_skills",
        sa.Column(
            "project_id",
            UUID(as_uuid=True),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "skill_id",
            UUID(as_uuid=True),
            sa.ForeignKey("skills.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "certificates",
        _id_column(),
        sa.Column("title", sa.String(255), nullable=False),
        *_asset_columns("image"),
        *_timestamp_columns(),
        _asset_pair_check("certificates", "image"),
    )


def downgrade() -> None:
    op.drop_table("certificates")
    op.drop_table("project_skills")
    op.drop_index("ix_projects_created_at", table_name="projects")
    op.drop_index("ix_projects_category_id", table_name="projects")
    op.drop_table("projects")
    op.drop_table("project_categories")
    op.drop_index("ix_skills_level_id", table_name="skills")
    op.drop_table("skills")
    op.drop_table("levels")
    op.drop_table("users")
