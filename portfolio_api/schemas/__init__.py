"""Pydantic request/response schemas for API endpoints."""

from portfolio_api.schemas.auth import LoginRequest, SessionResponse, SessionStatus
from portfolio_api.schemas.certificate import CertificateRead
from portfolio_api.schemas.contact import ContactRequest
from portfolio_api.schemas.project import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    ProjectRead,
)
from portfolio_api.schemas.skill import LevelRead, SkillRead
from portfolio_api.schemas.user import UserRead

__all__ = [
    # Auth
    "LoginRequest",
    "SessionResponse",
    "SessionStatus",
    # Portfolio content
    "CategoryCreate",
    "CategoryRead",
    "CategoryUpdate",
    "CertificateRead",
    "LevelRead",
    "ProjectRead",
    "SkillRead",
    "UserRead",
    # Contact
    "ContactRequest",
]
