"""Certificate response schema."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CertificateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime
