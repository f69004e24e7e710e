"""Project and project category schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from portfolio_api.schemas.skill import SkillRead


class CategoryCreate(BaseModel):
    """Request body for POST /categories."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)


class CategoryUpdate(BaseModel):
    """Request body for PUT /categories/{id}."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str


class ProjectRead(BaseModel):
    """Project with category and skills.

    Attributes:
        slug: Public URL key.
        image_url: Hosted cover image. The storage handle is never exposed.
        skills: Skills used, each with its level.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    slug: str
    description: str
    image_url: str | None = None
    link_demo: str | None = None
    link_repository: str | None = None
    category: CategoryRead
    skills: list[SkillRead]
    created_at: datetime
    updated_at: datetime
