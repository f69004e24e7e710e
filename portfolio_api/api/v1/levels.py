"""Experience levels API router (read-only; levels are seeded)."""

from fastapi import APIRouter

from portfolio_api.api.deps import DbSession
from portfolio_api.core.responses import ListResponse, PaginationMeta
from portfolio_api.repositories.skill_repository import LevelRepository
from portfolio_api.schemas.skill import LevelRead

router = APIRouter()


@router.get("")
async def list_levels(db: DbSession) -> ListResponse[LevelRead]:
    levels = await LevelRepository.list_all(db)
    return ListResponse(
        data=[LevelRead.model_validate(level) for level in levels],
        meta=PaginationMeta(total=len(levels), page=1, per_page=len(levels)),
    )
