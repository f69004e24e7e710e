"""Certificates API router."""

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
from portfolio_api.schemas.certificate import CertificateRead
from portfolio_api.services import certificate_service
from portfolio_api.services.asset_lifecycle import read_upload

router = APIRouter()


@router.get("")
async def list_certificates(db: DbSession) -> ListResponse[CertificateRead]:
    """List certificates newest first."""
    certificates = await certificate_service.list_certificates(db)
    return ListResponse(
        data=[CertificateRead.model_validate(c) for c in certificates],
        meta=PaginationMeta(
            total=len(certificates), page=1, per_page=len(certificates)
        ),
    )


@router.get("/{certificate_id}")
async def get_certificate(
    certificate_id: uuid.UUID, db: DbSession
) -> DataResponse[CertificateRead]:
    certificate = await certificate_service.get_certificate(db, certificate_id)
    return DataResponse(data=CertificateRead.model_validate(certificate))


@router.post("", status_code=201)
async def create_certificate(
    _user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
    title: Annotated[str, Form(min_length=1, max_length=255)],
    image: Annotated[UploadFile, File()],
) -> DataResponse[CertificateRead]:
    certificate = await certificate_service.create_certificate(
        db,
        assets,
        title=title.strip(),
        image=await read_upload(image),
    )
    return DataResponse(
        message="Certificate created successfully!",
        data=CertificateRead.model_validate(certificate),
    )


@router.put("/{certificate_id}")
async def update_certificate(
    certificate_id: uuid.UUID,
    _user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
    title: Annotated[str | None, Form(min_length=1, max_length=255)] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> DataResponse[CertificateRead]:
    certificate = await certificate_service.update_certificate(
        db,
        assets,
        certificate_id,
        title=title.strip() if title is not None else None,
        image=await optional_upload(image),
    )
    return DataResponse(
        message="Certificate updated successfully!",
        data=CertificateRead.model_validate(certificate),
    )


@router.delete("/{certificate_id}")
async def delete_certificate(
    certificate_id: uuid.UUID,
    _user_id: CurrentUserId,
    db: DbSession,
    assets: Assets,
) -> MessageResponse:
    await certificate_service.delete_certificate(db, assets, certificate_id)
    return MessageResponse(message="Certificate deleted successfully!")
