"""User profile logic. A user owns a profile image and a CV, both optional."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.errors import NotFoundError, StorageUnavailableError
from portfolio_api.models.user import User
from portfolio_api.repositories.user_repository import UserRepository
from portfolio_api.services.asset_lifecycle import (
    CV_DOCUMENT,
    PROFILE_IMAGE,
    AssetLifecycle,
    AssetRef,
    UploadCandidate,
    validate_upload,
)

logger = logging.getLogger(__name__)


async def list_users(db: AsyncSession) -> list[User]:
    return await UserRepository.list_all(db)


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", str(user_id))
    return user


async def update_profile(
    db: AsyncSession,
    lifecycle: AssetLifecycle,
    user_id: uuid.UUID,
    *,
    name: str | None = None,
    profile: UploadCandidate | None = None,
    cv: UploadCandidate | None = None,
) -> User:
    """Edit the current user's name, profile image and CV.

    Both files are validated before either is uploaded, so a bad CV never
    costs the user their existing profile image. Each slot is replaced only
    when a new file is given.

    The profile image is replaced before the CV. If the CV upload then fails,
    the new profile image (and name) are saved and committed before the error
    propagates, so the row never points at the deleted profile image.

    Raises:
        NotFoundError: User does not exist.
        InvalidAssetError: A supplied file violates its policy.
        StorageUnavailableError: An upload failed.
    """
    user = await get_user(db, user_id)
    if profile is not None:
        validate_upload(profile, PROFILE_IMAGE)
    if cv is not None:
        validate_upload(cv, CV_DOCUMENT)

    changes: dict[str, str | None] = {}
    if name is not None:
        changes["name"] = name

    replacements: list[tuple[AssetRef | None, AssetRef]] = []
    if profile is not None:
        existing = PROFILE_IMAGE.ref_from_columns(user.profile_url, user.profile_public_id)
        ref = await lifecycle.replace(existing, profile, PROFILE_IMAGE)
        replacements.append((existing, ref))
        changes["profile_url"] = ref.url
        changes["profile_public_id"] = ref.external_id
    if cv is not None:
        existing = CV_DOCUMENT.ref_from_columns(user.cv_url, user.cv_public_id)
        try:
            ref = await lifecycle.replace(existing, cv, CV_DOCUMENT)
        except StorageUnavailableError:
            if replacements:
                await _save(db, lifecycle, user.id, changes, replacements)
                await db.commit()
                logger.warning("Saved profile for user %s before CV upload failure", user_id)
            raise
        replacements.append((existing, ref))
        changes["cv_url"] = ref.url
        changes["cv_public_id"] = ref.external_id

    updated = await _save(db, lifecycle, user.id, changes, replacements)
    logger.info("Updated profile for user %s", user_id)
    return updated


async def _save(
    db: AsyncSession,
    lifecycle: AssetLifecycle,
    user_id: uuid.UUID,
    changes: dict[str, str | None],
    replacements: list[tuple[AssetRef | None, AssetRef]],
) -> User:
    async with lifecycle.rollback_replacements(*replacements):
        updated = await UserRepository.update(db, user_id, **changes)
    if updated is None:
        raise NotFoundError("User", str(user_id))
    return updated
