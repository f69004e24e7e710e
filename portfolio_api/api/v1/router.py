"""API v1 router aggregator.

All v1 endpoint routers are included here and mounted at /api/v1.
"""

from fastapi import APIRouter

from portfolio_api.api.v1 import (
    auth,
    categories,
    certificates,
    contact,
    levels,
    projects,
    skills,
    users,
)

router = APIRouter()

# =============================================================================
# Authentication
# =============================================================================

router.include_router(auth.router, prefix="/auth", tags=["auth"])

# =============================================================================
# Portfolio Content
# =============================================================================

router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(levels.router, prefix="/levels", tags=["levels"])
router.include_router(skills.router, prefix="/skills", tags=["skills"])
router.include_router(
    certificates.router, prefix="/certificates", tags=["certificates"]
)
router.include_router(users.router, prefix="/users", tags=["users"])

# =============================================================================
# Contact
# =============================================================================

router.include_router(contact.router, prefix="/contact", tags=["contact"])
