"""Skills API router."""

import uuid
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile

from portfolio_api.api.deps import Assets, CurrentUserId, DbSession, optional_upload
from portfolio_api.core.responses import (
    DataResponse,
    ListResponse,
    MessageResponse,
    PaginationMeta,
)
from portfolio_api.schemas.skill import SkillRead
from portfolio_api.services import skill_service
from portfolio_api.services.asset_lifecycle import read_upload

router = APIRouter()


@router.get("")
async def list_skills(db: DbSession) -> ListResponse[SkillRead]:
    """List skills alphabetically, each with its level."""
    skills = await skill_service.list_skills(db)
    return ListResponse(
        data=[SkillRead.model_validate(s) for s in skills],
        meta=PaginationMeta(total=len(skills), page=1, per_page=len(skills)),
    )


@router.get("/{skill_id}")
async def get_skill(skill_id: uuid.UUID, db: DbSession) -> DataResponse[SkillRead]:
    skill = await skill_service.get_skill(db, skill_id)
    return DataResponse(data=SkillRead.model_validate(skill))


@router.post("", status_code=201)
async def create_skill(
    _user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
    name: Annotated[str, Form(min_length=1, max_length=100)],
    level_id: Annotated[uuid.UUID, Form()],
    icon: Annotated[UploadFile, File()],
) -> DataResponse[SkillRead]:
    """Create a skill. The icon may also be an SVG."""
    skill = await skill_service.create_skill(
        db,
        assets,
        name=name.strip(),
        level_id=level_id,
        icon=await read_upload(icon),
    )
    return DataResponse(
        message="Skill created successfully!",
        data=SkillRead.model_validate(skill),
    )


@router.put("/{skill_id}")
async def update_skill(
    skill_id: uuid.UUID,
    _user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
    name: Annotated[str | None, Form(min_length=1, max_length=100)] = None,
    level_id: Annotated[uuid.UUID | None, Form()] = None,
    icon: Annotated[UploadFile | None, File()] = None,
) -> DataResponse[SkillRead]:
    skill = await skill_service.update_skill(
        db,
        assets,
        skill_id,
        name=name.strip() if name is not None else None,
        level_id=level_id,
        icon=await optional_upload(icon),
    )
    return DataResponse(
        message="Skill updated successfully!",
        data=SkillRead.model_validate(skill),
    )


@router.delete("/{skill_id}")
async def delete_skill(
    skill_id: uuid.UUID,
    _user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
) -> MessageResponse:
    await skill_service.delete_skill(db, assets, skill_id)
    return MessageResponse(message="Skill deleted successfully!")
