"""Shared dependencies for API endpoints.

The session manager, asset lifecycle and mailer are built once by
create_app() and stored on app.state; these dependencies hand them to routes.
Tests swap them with app.dependency_overrides or by replacing app.state.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.auth import SessionManager, extract_token
from portfolio_api.core.database import get_db
from portfolio_api.core.email import ContactMailer
from portfolio_api.services.asset_lifecycle import (
    AssetLifecycle,
    UploadCandidate,
    read_upload,
)


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_asset_lifecycle(request: Request) -> AssetLifecycle:
    return request.app.state.asset_lifecycle


def get_mailer(request: Request) -> ContactMailer:
    return request.app.state.mailer


async def get_current_user_id(
    request: Request,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> uuid.UUID:
    """Authentication gate for protected routes.

    Reads the token from the Authorization header (Bearer) or the session
    cookie, validates it, and records the user id on request.state.

    Args:
        request: HTTP request (injected by FastAPI).
        session_manager: Token validator (injected).

    Returns:
        UUID of the authenticated user.

    Raises:
        MissingTokenError: No token on the request (401).
        InvalidTokenError: Token rejected (401).
    """
    user_id = session_manager.authenticate(extract_token(request))
    request.state.user_id = user_id
    return user_id


async def optional_upload(file: UploadFile | None) -> UploadCandidate | None:
    """Read an optional multipart file; an empty file field counts as absent."""
    if file is None or not file.filename:
        return None
    return await read_upload(file)


# Type aliases for cleaner endpoint signatures
CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
Sessions = Annotated[SessionManager, Depends(get_session_manager)]
Assets = Annotated[AssetLifecycle, Depends(get_asset_lifecycle)]
Mailer = Annotated[ContactMailer, Depends(get_mailer)]
