"""Repository for Certificate operations."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.models.certificate import Certificate

_UPDATABLE_FIELDS: frozenset[str] = frozenset({"title", "image_url", "image_public_id"})


class CertificateRepository:
    """Stateless repository for Certificate table operations."""

    @staticmethod
    async def get_by_id(
        db: AsyncSession, certificate_id: uuid.UUID
    ) -> Certificate | None:
        return await db.get(Certificate, certificate_id)

    @staticmethod
    async def list_all(db: AsyncSession) -> list[Certificate]:
        """List certificates newest first."""
        result = await db.execute(
            select(Certificate).order_by(Certificate.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        title: str,
        image_url: str | None,
        image_public_id: str | None,
    ) -> Certificate:
        certificate = Certificate(
            title=title,
            image_url=image_url,
            image_public_id=image_public_id,
        )
        db.add(certificate)
        await db.flush()
        await db.refresh(certificate)
        return certificate

    @staticmethod
    async def update(
        db: AsyncSession, certificate: Certificate, **kwargs: object
    ) -> Certificate:
        """Apply field changes to a certificate.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        for field, value in kwargs.items():
            setattr(certificate, field, value)
        await db.flush()
        await db.refresh(certificate)
        return certificate

    @staticmethod
    async def delete(db: AsyncSession, certificate: Certificate) -> None:
        await db.delete(certificate)
        await db.flush()
