"""Rate limiting configuration using slowapi.

Security: Throttles the login endpoint (credential stuffing) and the contact
form (mail spam). Keys on the client IP; the portfolio has a single admin so
per-user keying adds nothing.

Usage in routers:
    from portfolio_api.core.rate_limiting import limiter

    @router.post("/login")
    @limiter.limit(lambda: settings.rate_limit_login)
    async def login(request: Request, ...):
        ...
"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from portfolio_api.core.config import settings
from portfolio_api.core.responses import ErrorDetail, ErrorResponse

# In-memory storage (single instance). For multi-instance deployments,
# configure Redis storage via RATELIMIT_STORAGE_URL.
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Handle rate limit exceeded errors.

    Returns 429 Too Many Requests with the standard error envelope.

    Args:
        request: The incoming request.
        exc: The rate limit exception.

    Returns:
        JSONResponse with 429 status and retry-after header.
    """
    # Parse retry-after from exception detail (e.g., "10 per 1 minute")
    # Fallback to 60 seconds if parsing fails
    try:
        retry_after = str(exc.detail.split()[-1])
        int(retry_after.rstrip("s"))
    except (ValueError, AttributeError, IndexError):
        retry_after = "60"

    return JSONResponse(
        status_code=429,
        content=ErrorResponse(
            error=ErrorDetail(
                code="RATE_LIMITED",
                message=f"Rate limit exceeded: {exc.detail}",
            )
        ).model_dump(),
        headers={"Retry-After": retry_after},
    )
