"""Users API router.

GET /users and GET /users/{id} are public profile reads. PUT /users/me edits
the authenticated user's name, profile image and CV.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile

from portfolio_api.api.deps import Assets, CurrentUserId, DbSession, optional_upload
from portfolio_api.core.responses import DataResponse, ListResponse, PaginationMeta
from portfolio_api.schemas.user import UserRead
from portfolio_api.services import user_service

router = APIRouter()


@router.get("")
async def list_users(db: DbSession) -> ListResponse[UserRead]:
    users = await user_service.list_users(db)
    return ListResponse(
        data=[UserRead.model_validate(u) for u in users],
        meta=PaginationMeta(total=len(users), page=1, per_page=len(users)),
    )


@router.put("/me")
async def update_me(
    user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
    name: Annotated[str | None, Form(min_length=1, max_length=255)] = None,
    profile: Annotated[UploadFile | None, File()] = None,
    cv: Annotated[UploadFile | None, File()] = None,
) -> DataResponse[UserRead]:
    """Edit the current user's profile.

    Raises:
        InvalidAssetError: Profile image not JPG/JPEG/PNG/WEBP, CV not PDF,
            or either over 2MB. Nothing is uploaded in that case.
    """
    user = await user_service.update_profile(
        db,
        assets,
        user_id,
        name=name.strip() if name is not None else None,
        profile=await optional_upload(profile),
        cv=await optional_upload(cv),
    )
    return DataResponse(
        message="Profile updated successfully!",
        data=UserRead.model_validate(user),
    )


@router.get("/{user_id}")
async def get_user(user_id: uuid.UUID, db: DbSession) -> DataResponse[UserRead]:
    user = await user_service.get_user(db, user_id)
    return DataResponse(data=UserRead.model_validate(user))
