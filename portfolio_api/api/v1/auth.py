"""Authentication endpoints.

POST /auth/login: verify email/password, set the session cookie.
POST /auth/logout: clear the session cookie.
GET  /auth/me: report the authenticated user id.
"""

from fastapi import APIRouter, Request, Response

from portfolio_api.api.deps import CurrentUserId, DbSession, Sessions
from portfolio_api.core.auth import clear_session_cookie, set_session_cookie
from portfolio_api.core.config import settings
from portfolio_api.core.rate_limiting import limiter
from portfolio_api.core.responses import DataResponse, MessageResponse
from portfolio_api.schemas.auth import LoginRequest, SessionResponse, SessionStatus

router = APIRouter()


@router.post("/login")
@limiter.limit(lambda: settings.rate_limit_login)
async def login(
    request: Request,  # noqa: ARG001 - required by slowapi
    response: Response,
    body: LoginRequest,
    db: DbSession,
    sessions: Sessions,
) -> DataResponse[SessionResponse]:
    """Log in with email and password.

    Sets an httpOnly session cookie and also returns the token, so clients
    that cannot use cookies can send it as a Bearer header.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password (401).
    """
    issued = await sessions.login(db, body.email, body.password)
    set_session_cookie(response, issued)
    return DataResponse(
        message="Login Successfully!",
        data=SessionResponse(
            access_token=issued.token,
            expires_at=issued.expires_at,
            user_id=issued.subject_id,
        ),
    )


@router.post("/logout")
async def logout(
    response: Response,
    _user_id: CurrentUserId,
) -> MessageResponse:
    """Clear the session cookie.

    The token itself stays valid until it expires.
    """
    clear_session_cookie(response)
    return MessageResponse(message="Logout Successfully!")


@router.get("/me")
async def me(user_id: CurrentUserId) -> DataResponse[SessionStatus]:
    """Check whether the caller holds a valid session."""
    return DataResponse(data=SessionStatus(user_id=user_id))
