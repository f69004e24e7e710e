"""User response schema."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserRead(BaseModel):
    """Public profile of a user.

    Security: password_hash and storage handles are deliberately absent;
    from_attributes only copies the fields declared here.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    profile_url: str | None = None
    cv_url: str | None = None
    created_at: datetime
    updated_at: datetime
