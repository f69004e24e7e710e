"""Login and session schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class SessionResponse(BaseModel):
    """Issued session, returned by login alongside the cookie.

    Attributes:
        access_token: The signed session token (same value as the cookie).
        token_type: Always "bearer".
        expires_at: Instant from which the token is rejected.
        user_id: Authenticated user.
    """

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user_id: uuid.UUID


class SessionStatus(BaseModel):
    """Result of GET /auth/me."""

    authenticated: bool = True
    user_id: uuid.UUID
