"""Project categories API router."""

import uuid

from fastapi import APIRouter

from portfolio_api.api.deps import CurrentUserId, DbSession
from portfolio_api.core.responses import (
    DataResponse,
    ListResponse,
    MessageResponse,
    PaginationMeta,
)
from portfolio_api.schemas.project import CategoryCreate, CategoryRead, CategoryUpdate
from portfolio_api.services import project_service

router = APIRouter()


@router.get("")
async def list_categories(db: DbSession) -> ListResponse[CategoryRead]:
    categories = await project_service.list_categories(db)
    return ListResponse(
        data=[CategoryRead.model_validate(c) for c in categories],
        meta=PaginationMeta(total=len(categories), page=1, per_page=len(categories)),
    )


@router.get("/{category_id}")
async def get_category(
    category_id: uuid.UUID, db: DbSession
) -> DataResponse[CategoryRead]:
    category = await project_service.get_category(db, category_id)
    return DataResponse(data=CategoryRead.model_validate(category))


@router.post("", status_code=201)
async def create_category(
    body: CategoryCreate,
    _user_id: CurrentUserId,
    db: DbSession,
) -> DataResponse[CategoryRead]:
    category = await project_service.create_category(db, body.name)
    return DataResponse(
        message="Category created successfully!",
        data=CategoryRead.model_validate(category),
    )


@router.put("/{category_id}")
async def update_category(
    category_id: uuid.UUID,
    body: CategoryUpdate,
    _user_id: CurrentUserId,
    db: DbSession,
) -> DataResponse[CategoryRead]:
    category = await project_service.rename_category(db, category_id, body.name)
    return DataResponse(
        message="Category updated successfully!",
        data=CategoryRead.model_validate(category),
    )


@router.delete("/{category_id}")
async def delete_category(
    category_id: uuid.UUID,
    _user_id: CurrentUserId,
    db: DbSession,
) -> MessageResponse:
    """Delete a category. Fails with 409 while projects still use it."""
    await project_service.delete_category(db, category_id)
    return MessageResponse(message="Category deleted successfully!")
