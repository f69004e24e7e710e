"""Projects API router.

Public reads, authenticated writes. Create and edit take multipart forms
because they carry the cover image.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile

from portfolio_api.api.deps import Assets, CurrentUserId, DbSession, optional_upload
from portfolio_api.api.v1.forms import blank_to_none, parse_id_list
from portfolio_api.core.errors import ValidationError
from portfolio_api.core.responses import (
    DataResponse,
    ListResponse,
    MessageResponse,
    PaginationMeta,
)
from portfolio_api.schemas.project import ProjectRead
from portfolio_api.services import project_service
from portfolio_api.services.asset_lifecycle import read_upload

router = APIRouter()


@router.get("")
async def list_projects(
    db: DbSession,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[
        int, Query(ge=1, le=project_service.MAX_PAGE_SIZE)
    ] = project_service.DEFAULT_PAGE_SIZE,
    category: Annotated[str | None, Query(max_length=100)] = None,
) -> ListResponse[ProjectRead]:
    """List projects newest first, optionally filtered by category name."""
    projects, total = await project_service.list_projects(
        db, page=page, limit=limit, category=blank_to_none(category)
    )
    return ListResponse(
        data=[ProjectRead.model_validate(p) for p in projects],
        meta=PaginationMeta(total=total, page=page, per_page=limit),
    )


@router.get("/{slug}")
async def get_project(slug: str, db: DbSession) -> DataResponse[ProjectRead]:
    project = await project_service.get_project(db, slug)
    return DataResponse(data=ProjectRead.model_validate(project))


@router.post("", status_code=201)
async def create_project(
    _user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
    title: Annotated[str, Form(min_length=1, max_length=255)],
    description: Annotated[str, Form(min_length=10)],
    category_id: Annotated[uuid.UUID, Form()],
    skill_ids: Annotated[list[str], Form()],
    image: Annotated[UploadFile, File()],
    link_demo: Annotated[str | None, Form()] = None,
    link_repository: Annotated[str | None, Form()] = None,
) -> DataResponse[ProjectRead]:
    """Create a project with its cover image.

    Raises:
        InvalidAssetError: Image is not JPG/JPEG/PNG/WEBP or is over 2MB.
        NotFoundError: Category does not exist.
        StorageUnavailableError: Image upload failed.
    """
    parsed_skill_ids = parse_id_list(skill_ids, "skill_ids") or []
    if not parsed_skill_ids:
        raise ValidationError(
            "At least one skill is required",
            details=[{"field": "skill_ids", "error": "REQUIRED"}],
        )

    project = await project_service.create_project(
        db,
        assets,
        title=title.strip(),
        description=description,
        category_id=category_id,
        skill_ids=parsed_skill_ids,
        image=await read_upload(image),
        link_demo=blank_to_none(link_demo),
        link_repository=blank_to_none(link_repository),
    )
    return DataResponse(
        message="Project created successfully!",
        data=ProjectRead.model_validate(project),
    )


@router.put("/{slug}")
async def update_project(
    slug: str,
    _user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
    title: Annotated[str | None, Form(min_length=1, max_length=255)] = None,
    description: Annotated[str | None, Form(min_length=1)] = None,
    category_id: Annotated[uuid.UUID | None, Form()] = None,
    skill_ids: Annotated[list[str] | None, Form()] = None,
    image: Annotated[UploadFile | None, File()] = None,
    link_demo: Annotated[str | None, Form()] = None,
    link_repository: Annotated[str | None, Form()] = None,
) -> DataResponse[ProjectRead]:
    """Edit a project. Omitted fields keep their current value."""
    project = await project_service.update_project(
        db,
        assets,
        slug,
        title=title.strip() if title is not None else None,
        description=description,
        category_id=category_id,
        skill_ids=parse_id_list(skill_ids, "skill_ids"),
        image=await optional_upload(image),
        link_demo=blank_to_none(link_demo),
        link_repository=blank_to_none(link_repository),
    )
    return DataResponse(
        message="Project updated successfully!",
        data=ProjectRead.model_validate(project),
    )


@router.delete("/{slug}")
async def delete_project(
    slug: str,
    _user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
) -> MessageResponse:
    await project_service.delete_project(db, assets, slug)
    return MessageResponse(message="Project deleted successfully!")
