"""Certificate business logic. Each certificate owns one hosted image."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.errors import NotFoundError
from portfolio_api.models.certificate import Certificate
from portfolio_api.repositories.certificate_repository import CertificateRepository
from portfolio_api.services.asset_lifecycle import (
    CERTIFICATE_IMAGE,
    AssetLifecycle,
    UploadCandidate,
    validate_upload,
)

logger = logging.getLogger(__name__)


async def list_certificates(db: AsyncSession) -> list[Certificate]:
    return await CertificateRepository.list_all(db)


async def get_certificate(db: AsyncSession, certificate_id: uuid.UUID) -> Certificate:
    certificate = await CertificateRepository.get_by_id(db, certificate_id)
    if certificate is None:
        raise NotFoundError("Certificate", str(certificate_id))
    return certificate


async def create_certificate(
    db: AsyncSession,
    lifecycle: AssetLifecycle,
    *,
    title: str,
    image: UploadCandidate,
) -> Certificate:
    validate_upload(image, CERTIFICATE_IMAGE)

    ref = await lifecycle.store(image, CERTIFICATE_IMAGE)
    async with lifecycle.rollback_on_error(ref):
        certificate = await CertificateRepository.create(
            db,
            title=title,
            image_url=ref.url,
            image_public_id=ref.external_id,
        )

    logger.info("Created certificate %s", certificate.id)
    return certificate


async def update_certificate(
    db: AsyncSession,
    lifecycle: AssetLifecycle,
    certificate_id: uuid.UUID,
    *,
    title: str | None = None,
    image: UploadCandidate | None = None,
) -> Certificate:
    """Apply a partial edit.

    The same type-or-size policy as create applies to a new image.
    """
    certificate = await get_certificate(db, certificate_id)
    if image is not None:
        validate_upload(image, CERTIFICATE_IMAGE)

    changes: dict[str, object] = {}
    if title is not None:
        changes["title"] = title

    existing = new_ref = None
    if image is not None:
        existing = CERTIFICATE_IMAGE.ref_from_columns(
            certificate.image_url, certificate.image_public_id
        )
        new_ref = await lifecycle.replace(existing, image, CERTIFICATE_IMAGE)
        changes["image_url"] = new_ref.url
        changes["image_public_id"] = new_ref.external_id

    async with lifecycle.rollback_replacements((existing, new_ref)):
        certificate = await CertificateRepository.update(db, certificate, **changes)

    logger.info("Updated certificate %s", certificate.id)
    return certificate


async def delete_certificate(
    db: AsyncSession, lifecycle: AssetLifecycle, certificate_id: uuid.UUID
) -> None:
    certificate = await get_certificate(db, certificate_id)
    await lifecycle.delete(
        CERTIFICATE_IMAGE.ref_from_columns(
            certificate.image_url, certificate.image_public_id
        )
    )
    await CertificateRepository.delete(db, certificate)
    logger.info("Deleted certificate %s", certificate_id)
