"""Skill and level response schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class LevelRead(BaseModel):
    """Experience level."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    competency_level: int


class SkillRead(BaseModel):
    """Skill with its level. The icon's storage handle is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    icon_url: str | None = None
    level: LevelRead
    created_at: datetime
    updated_at: datetime
