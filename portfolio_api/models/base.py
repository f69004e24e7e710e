"""SQLAlchemy base classes and common mixins.

Defines the declarative base plus reusable mixins for timestamp tracking and
for columns that hold a reference to an externally hosted file.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Text, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

DEFAULT_UUID = text("gen_random_uuid()")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class UUIDPrimaryKeyMixin:
    """Mixin that adds a server-generated UUID primary key."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        server_default=DEFAULT_UUID,
    )


class TimestampMixin:
    """Mixin that adds created_at and updated_at columns.

    Attributes:
        created_at: Timestamp when the record was created. Set automatically
            by the database on insert.
        updated_at: Timestamp when the record was last modified. Updated
            automatically by the database on each update.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def asset_url_column() -> Mapped[str | None]:
    """Public URL half of a hosted-file reference."""
    return mapped_column(Text(), nullable=True)


def asset_public_id_column() -> Mapped[str | None]:
    """Storage handle half of a hosted-file reference.

    Never serialized to API clients; only the asset lifecycle reads it.
    """
    return mapped_column(Text(), nullable=True)


def asset_pair_check(prefix: str) -> str:
    """SQL expression requiring a reference's url and handle to be set together.

    Args:
        prefix: Column prefix, e.g. "image" for image_url/image_public_id.

    Returns:
        CHECK constraint body.
    """
    return f"({prefix}_url IS NULL) = ({prefix}_public_id IS NULL)"
