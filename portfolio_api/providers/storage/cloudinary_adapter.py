"""Cloudinary adapter for hosted images and documents.

The Cloudinary SDK is synchronous, so every call runs in a worker thread.
Credentials are passed per call instead of through cloudinary.config(), so
two adapters with different accounts can coexist (e.g., in tests).
"""

import asyncio
import io
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader
import structlog

from portfolio_api.providers.config import StorageConfig
from portfolio_api.providers.errors import (
    StorageAuthenticationError,
    StorageError,
    StorageRateLimitError,
    TransientStorageError,
)
from portfolio_api.providers.storage.base import AssetRef, ObjectStorage, ResourceType

logger = structlog.get_logger()

_PROVIDER = "cloudinary"


def _classify_cloudinary_error(error: Exception) -> StorageError:
    """Map Cloudinary SDK exceptions to the storage error taxonomy.

    Returns a StorageError subclass instance (does not raise).
    The caller is responsible for raising via
    ``raise _classify_cloudinary_error(e) from e``.
    """
    if isinstance(error, cloudinary.exceptions.RateLimited):
        return StorageRateLimitError(str(error))

    if isinstance(
        error,
        cloudinary.exceptions.AuthorizationRequired | cloudinary.exceptions.NotAllowed,
    ):
        return StorageAuthenticationError(str(error))

    # GeneralError covers network failures and unexpected 5xx responses
    if isinstance(error, cloudinary.exceptions.GeneralError | OSError):
        return TransientStorageError(str(error))

    return StorageError(str(error))


class CloudinaryStorage(ObjectStorage):
    """ObjectStorage backed by the Cloudinary upload API."""

    def __init__(self, config: StorageConfig) -> None:
        self._credentials = {
            "cloud_name": config.cloud_name,
            "api_key": config.api_key,
            "api_secret": config.api_secret,
        }

    @property
    def provider_name(self) -> str:
        return _PROVIDER

    async def upload(
        self,
        content: bytes,
        *,
        folder: str,
        resource_type: ResourceType,
        filename: str | None = None,
    ) -> AssetRef:
        logger.info(
            "storage_upload_start",
            provider=_PROVIDER,
            folder=folder,
            resource_type=resource_type,
            size_bytes=len(content),
        )
        options: dict[str, Any] = {
            "folder": folder,
            "resource_type": resource_type,
            **self._credentials,
        }
        if filename:
            options["filename_override"] = filename
            # Raw resources keep their extension in the public id
            options["use_filename"] = resource_type == "raw"

        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload, io.BytesIO(content), **options
            )
        except Exception as e:
            logger.error(
                "storage_upload_failed",
                provider=_PROVIDER,
                folder=folder,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise _classify_cloudinary_error(e) from e

        url = (result or {}).get("secure_url") or (result or {}).get("url")
        public_id = (result or {}).get("public_id")
        if not url or not public_id:
            logger.error(
                "storage_upload_empty_result", provider=_PROVIDER, folder=folder
            )
            raise StorageError("Cloudinary returned no url or public_id")

        logger.info(
            "storage_upload_complete",
            provider=_PROVIDER,
            folder=folder,
            external_id=public_id,
        )
        return AssetRef(url=url, external_id=public_id, resource_type=resource_type)

    async def delete(self, external_id: str, *, resource_type: ResourceType) -> bool:
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                external_id,
                resource_type=resource_type,
                invalidate=True,
                **self._credentials,
            )
        except Exception as e:
            logger.error(
                "storage_delete_failed",
                provider=_PROVIDER,
                external_id=external_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise _classify_cloudinary_error(e) from e

        outcome = (result or {}).get("result")
        if outcome == "ok":
            logger.info(
                "storage_delete_complete", provider=_PROVIDER, external_id=external_id
            )
            return True
        if outcome == "not found":
            logger.info(
                "storage_delete_not_found", provider=_PROVIDER, external_id=external_id
            )
            return False

        logger.error(
            "storage_delete_unexpected_result",
            provider=_PROVIDER,
            external_id=external_id,
            result=outcome,
        )
        raise StorageError(f"Unexpected Cloudinary destroy result: {outcome!r}")
