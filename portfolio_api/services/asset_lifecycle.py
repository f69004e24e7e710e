"""Managed-asset lifecycle for entities that own a hosted file.

Projects, skills, certificates and the user profile each keep one or two
files on the object storage host. They all follow the same protocol:

    validate -> upload -> persist reference
    (edit)    validate -> delete previous (best effort) -> upload -> persist
    (delete)  delete asset -> delete row

Validation always happens before any storage call. Upload failures surface
as StorageUnavailableError; nothing silently falls back to an empty
reference.

Known tradeoffs:
- replace() deletes the previous asset before uploading the new one. If the
  upload then fails, the row still points at the deleted asset until the
  next successful edit.
- If the database write after a create fails, callers remove the fresh
  upload best-effort; a failure there leaves an orphan on the host.
- If the database write after a replace fails, the new upload is kept and
  logged (asset_replacement_unlinked) instead of removed, because its
  predecessor is already gone.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from portfolio_api.core.errors import InvalidAssetError, StorageUnavailableError
from portfolio_api.providers.config import StorageConfig
from portfolio_api.providers.errors import StorageError
from portfolio_api.providers.retry import RetryPolicy
from portfolio_api.providers.storage.base import AssetRef, ObjectStorage, ResourceType

if TYPE_CHECKING:
    from fastapi import UploadFile

logger = structlog.get_logger()

__all__ = [
    "AssetClass",
    "AssetLifecycle",
    "AssetRef",
    "CERTIFICATE_IMAGE",
    "CV_DOCUMENT",
    "PROFILE_IMAGE",
    "PROJECT_IMAGE",
    "SKILL_ICON",
    "UploadCandidate",
    "read_upload",
    "validate_upload",
]

# Chunk size for reading uploads (64 KB)
CHUNK_SIZE_BYTES = 64 * 1024

MAX_ASSET_SIZE_BYTES = 2 * 1024 * 1024

_RASTER_IMAGE_TYPES: frozenset[str] = frozenset(
    {"image/jpg", "image/jpeg", "image/png", "image/webp"}
)
_RASTER_DESCRIPTION = "JPG, JPEG, PNG, or WEBP"


@dataclass(frozen=True)
class AssetClass:
    """Upload policy for one kind of hosted file.

    Attributes:
        label: Human name used in rejection messages ("image", "icon image").
        allowed_mime_types: Accepted declared content types.
        max_size_bytes: Largest accepted file, inclusive.
        folder: Sub-folder under the storage root.
        resource_type: Host resource type ("image" or "raw").
        allowed_description: Allowlist as shown to clients.
    """

    label: str
    allowed_mime_types: frozenset[str]
    max_size_bytes: int
    folder: str
    resource_type: ResourceType
    allowed_description: str

    @property
    def rejection_message(self) -> str:
        max_mb = self.max_size_bytes // (1024 * 1024)
        return (
            f"Invalid {self.label} file! "
            f"Must be {self.allowed_description} under {max_mb}MB."
        )

    def ref_from_columns(self, url: str | None, external_id: str | None) -> AssetRef | None:
        """Rebuild a stored reference for a slot of this class."""
        return AssetRef.from_columns(url, external_id, self.resource_type)


PROJECT_IMAGE = AssetClass(
    label="image",
    allowed_mime_types=_RASTER_IMAGE_TYPES,
    max_size_bytes=MAX_ASSET_SIZE_BYTES,
    folder="project",
    resource_type="image",
    allowed_description=_RASTER_DESCRIPTION,
)

SKILL_ICON = AssetClass(
    label="icon image",
    allowed_mime_types=_RASTER_IMAGE_TYPES | {"image/svg+xml"},
    max_size_bytes=MAX_ASSET_SIZE_BYTES,
    folder="skill",
    resource_type="image",
    allowed_description="JPG, JPEG, PNG, WEBP, or SVG",
)

CERTIFICATE_IMAGE = AssetClass(
    label="image",
    allowed_mime_types=_RASTER_IMAGE_TYPES,
    max_size_bytes=MAX_ASSET_SIZE_BYTES,
    folder="certificate",
    resource_type="image",
    allowed_description=_RASTER_DESCRIPTION,
)

PROFILE_IMAGE = AssetClass(
    label="profile image",
    allowed_mime_types=_RASTER_IMAGE_TYPES,
    max_size_bytes=MAX_ASSET_SIZE_BYTES,
    folder="profile",
    resource_type="image",
    allowed_description=_RASTER_DESCRIPTION,
)

CV_DOCUMENT = AssetClass(
    label="CV",
    allowed_mime_types=frozenset({"application/pdf"}),
    max_size_bytes=MAX_ASSET_SIZE_BYTES,
    folder="my_CV",
    resource_type="raw",
    allowed_description="PDF",
)


@dataclass(frozen=True)
class UploadCandidate:
    """An uploaded file read into memory, not yet validated.

    Attributes:
        filename: Client-supplied filename.
        content_type: Declared MIME type.
        content: File bytes, cut off one byte past the read limit.
        size: Bytes received. Greater than the class limit whenever the
            file was too large.
    """

    filename: str
    content_type: str
    content: bytes
    size: int


async def read_upload(
    file: "UploadFile",
    max_size_bytes: int = MAX_ASSET_SIZE_BYTES,
) -> UploadCandidate:
    """Read an UploadFile in chunks, stopping just past the size limit.

    Security: Oversized uploads are never fully buffered. Reading stops at
    max_size_bytes + 1, which is enough for validate_upload() to reject.

    Args:
        file: UploadFile from FastAPI.
        max_size_bytes: Largest size any asset class accepts.

    Returns:
        UploadCandidate with the declared content type and observed size.
    """
    limit = max_size_bytes + 1
    chunks: list[bytes] = []
    total_size = 0

    while total_size < limit:
        chunk = await file.read(min(CHUNK_SIZE_BYTES, limit - total_size))
        if not chunk:
            break
        chunks.append(chunk)
        total_size += len(chunk)

    return UploadCandidate(
        filename=file.filename or "upload",
        content_type=(file.content_type or "").lower(),
        content=b"".join(chunks),
        size=total_size,
    )


def validate_upload(candidate: UploadCandidate, asset_class: AssetClass) -> None:
    """Reject a file whose type is not allowed or whose size is over the limit.

    Either condition alone is enough to reject.

    Args:
        candidate: File read by read_upload().
        asset_class: Policy for the slot being filled.

    Raises:
        InvalidAssetError: If the content type or size violates the policy.
    """
    problems: list[dict] = []
    if candidate.content_type not in asset_class.allowed_mime_types:
        problems.append(
            {
                "field": asset_class.folder,
                "error": "UNSUPPORTED_TYPE",
                "content_type": candidate.content_type,
            }
        )
    if candidate.size > asset_class.max_size_bytes:
        problems.append({"field": asset_class.folder, "error": "FILE_TOO_LARGE"})

    if problems:
        logger.warning(
            "asset_rejected",
            asset_class=asset_class.folder,
            content_type=candidate.content_type,
            size_bytes=candidate.size,
        )
        raise InvalidAssetError(asset_class.rejection_message, details=problems)


class AssetLifecycle:
    """Upload, replace and delete hosted files for owning entities.

    Args:
        storage: Object storage provider.
        config: Storage configuration (root folder and retry policy).
    """

    def __init__(self, storage: ObjectStorage, config: StorageConfig | None = None) -> None:
        self.storage = storage
        self.config = config or StorageConfig()
        self.upload_policy = RetryPolicy.for_uploads(self.config)
        self.delete_policy = RetryPolicy.for_deletes(self.config)

    def _folder(self, asset_class: AssetClass) -> str:
        root = self.config.root_folder.strip("/")
        return f"{root}/{asset_class.folder}" if root else asset_class.folder

    async def store(self, candidate: UploadCandidate, asset_class: AssetClass) -> AssetRef:
        """Upload a validated file.

        Args:
            candidate: File that already passed validate_upload().
            asset_class: Policy for the slot being filled.

        Returns:
            Reference to the stored file.

        Raises:
            StorageUnavailableError: If the upload fails or returns no handle.
        """
        folder = self._folder(asset_class)

        async def _upload() -> AssetRef:
            return await self.storage.upload(
                candidate.content,
                folder=folder,
                resource_type=asset_class.resource_type,
                filename=candidate.filename,
            )

        try:
            ref = await self.upload_policy.run(_upload, action="upload")
        except StorageError as e:
            logger.error(
                "asset_store_failed",
                provider=self.storage.provider_name,
                folder=folder,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StorageUnavailableError("Failed to upload file") from e

        if ref is None or not ref.url or not ref.external_id:
            logger.error(
                "asset_store_empty_result",
                provider=self.storage.provider_name,
                folder=folder,
            )
            raise StorageUnavailableError("Failed to upload file")

        return ref

    async def replace(
        self,
        existing: AssetRef | None,
        candidate: UploadCandidate,
        asset_class: AssetClass,
    ) -> AssetRef:
        """Swap a slot's file for a new, already validated one.

        The previous file is deleted first. A missing previous file is fine;
        any other delete failure is logged and the upload still proceeds.

        Args:
            existing: Current reference, or None if the slot is empty.
            candidate: File that already passed validate_upload().
            asset_class: Policy for the slot being filled.

        Returns:
            Reference to the new file.

        Raises:
            StorageUnavailableError: If the upload fails.
        """
        if existing is not None:
            try:
                await self.delete_policy.run(
                    lambda: self.storage.delete(
                        existing.external_id, resource_type=existing.resource_type
                    ),
                    action="delete",
                )
            except StorageError as e:
                logger.warning(
                    "asset_replace_delete_failed",
                    provider=self.storage.provider_name,
                    external_id=existing.external_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        return await self.store(candidate, asset_class)

    async def delete(self, ref: AssetRef | None) -> None:
        """Delete a slot's file ahead of deleting its owning row.

        None is a no-op. A file that is already gone counts as deleted.

        Args:
            ref: Reference to delete, or None.

        Raises:
            StorageUnavailableError: If the host refuses or fails the delete.
                Callers must not delete the row in that case.
        """
        if ref is None:
            return

        try:
            await self.delete_policy.run(
                lambda: self.storage.delete(
                    ref.external_id, resource_type=ref.resource_type
                ),
                action="delete",
            )
        except StorageError as e:
            logger.error(
                "asset_delete_failed",
                provider=self.storage.provider_name,
                external_id=ref.external_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StorageUnavailableError("Failed to delete stored file") from e

    async def discard(self, ref: AssetRef) -> None:
        """Best-effort removal of a fresh upload whose row was never written."""
        try:
            await self.storage.delete(ref.external_id, resource_type=ref.resource_type)
        except StorageError as e:
            logger.warning(
                "asset_orphaned",
                provider=self.storage.provider_name,
                external_id=ref.external_id,
                error=str(e),
            )

    @asynccontextmanager
    async def rollback_on_error(self, *refs: AssetRef | None) -> AsyncIterator[None]:
        """Discard fresh uploads if the enclosed database write raises.

        Usage:
            ref = await lifecycle.store(candidate, PROJECT_IMAGE)
            async with lifecycle.rollback_on_error(ref):
                project = await ProjectRepository.create(db, ...)
        """
        try:
            yield
        except Exception:
            for ref in refs:
                if ref is not None:
                    await self.discard(ref)
            raise

    @asynccontextmanager
    async def rollback_replacements(
        self, *replacements: tuple[AssetRef | None, AssetRef | None]
    ) -> AsyncIterator[None]:
        """Clean up after an edit whose database write raises.

        Each replacement is a (previous, new) pair from replace(). A new file
        that filled an empty slot is discarded. A new file whose predecessor
        was already deleted is kept and logged, so the slot can still be
        pointed at a file that exists.

        Usage:
            new_ref = await lifecycle.replace(existing, candidate, PROJECT_IMAGE)
            async with lifecycle.rollback_replacements((existing, new_ref)):
                project = await ProjectRepository.update(db, project, ...)
        """
        try:
            yield
        except Exception:
            for previous, new in replacements:
                if new is None:
                    continue
                if previous is None:
                    await self.discard(new)
                else:
                    logger.warning(
                        "asset_replacement_unlinked",
                        provider=self.storage.provider_name,
                        previous_external_id=previous.external_id,
                        external_id=new.external_id,
                        url=new.url,
                    )
            raise
