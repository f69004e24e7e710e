"""SQLAlchemy ORM models for the portfolio API.

All models are exported from this module for convenient imports:
    from portfolio_api.models import User, Project, Skill, ...

Models are organized by domain:
- user.py: User (login credential + profile assets)
- skill.py: Level, Skill
- project.py: ProjectCategory, Project, project_skills association
- certificate.py: Certificate
"""

from portfolio_api.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from portfolio_api.models.certificate import Certificate
from portfolio_api.models.project import Project, ProjectCategory, project_skills
from portfolio_api.models.skill import Level, Skill
from portfolio_api.models.user import User

__all__ = [
    "Base",
    "Certificate",
    "Level",
    "Project",
    "ProjectCategory",
    "Skill",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "User",
    "project_skills",
]
