"""FastAPI application entry point.

This module creates and configures the FastAPI application, including:
- Collaborators shared by all requests (database, session manager,
  storage, mailer)
- Exception handlers for API errors
- API v1 router mounting
- Health check endpoint
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from portfolio_api.api.v1.router import router as v1_router
from portfolio_api.core.auth import SessionManager
from portfolio_api.core.config import Settings, settings
from portfolio_api.core.database import build_engine, build_session_factory
from portfolio_api.core.email import ContactMailer
from portfolio_api.core.errors import APIError
from portfolio_api.core.logging_config import configure_logging
from portfolio_api.core.rate_limiting import limiter, rate_limit_exceeded_handler
from portfolio_api.core.responses import ErrorDetail, ErrorResponse
from portfolio_api.providers.config import StorageConfig
from portfolio_api.providers.factory import build_storage_provider
from portfolio_api.providers.storage.base import ObjectStorage
from portfolio_api.services.asset_lifecycle import AssetLifecycle

logger = structlog.get_logger()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses.

    Headers added:
    - X-Frame-Options: Prevents clickjacking attacks
    - X-Content-Type-Options: Prevents MIME sniffing
    - Referrer-Policy: Controls referrer information leakage
    - Cache-Control: Prevents caching of authenticated API responses
    - Content-Security-Policy: Restricts resource loading (API returns no HTML)
    - Strict-Transport-Security: Forces HTTPS (production only)
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Add security headers to response."""
        response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Public GETs may be cached by the browser; anything else may carry
        # session data
        if request.url.path.startswith("/api/") and request.method != "GET":
            response.headers["Cache-Control"] = "no-store, max-age=0"

        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none'"
        )

        # HSTS only in production (assumes HTTPS via reverse proxy)
        if request.app.state.settings.environment == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors.

    Args:
        request: The incoming request.
        exc: The APIError that was raised.

    Returns:
        JSONResponse with error envelope and appropriate status code.
    """
    if exc.status_code >= 500:
        logger.error("api_error", code=exc.code, message=exc.message)

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
            )
        ).model_dump(),
    )


def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors from FastAPI.

    Converts FastAPI's validation errors to the standard envelope with
    field-level details.

    Args:
        request: The incoming request.
        exc: The RequestValidationError from Pydantic.

    Returns:
        JSONResponse with VALIDATION_ERROR code and field-level details.
    """
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details=[
                    {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
                    for e in exc.errors()
                ],
            )
        ).model_dump(),
    )


def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions.

    Returns 500 INTERNAL_ERROR without exposing stack traces; the exception
    is logged for debugging.

    Args:
        request: The incoming request.
        exc: The unhandled exception.

    Returns:
        JSONResponse with generic error message (500).
    """
    logger.exception("Unhandled exception", exc_info=exc, path=str(request.url.path))

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
            )
        ).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Dispose of the database pool on shutdown."""
    yield
    await app.state.db_engine.dispose()
    logger.info("db_engine_disposed")


def create_app(
    app_settings: Settings | None = None,
    *,
    storage: ObjectStorage | None = None,
    mailer: ContactMailer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build collaborators from. Defaults to the
            environment-loaded settings.
        storage: Object storage provider. Defaults to the configured one.
        mailer: Contact mailer. Defaults to Resend from settings.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    configure_logging(
        app_settings.log_level,
        json_output=app_settings.environment == "production",
    )

    app = FastAPI(
        title="Portfolio API",
        version="1.0.0",
        description="Backend for a personal portfolio site",
        lifespan=lifespan,
    )

    # Request-independent collaborators, built once and shared
    app.state.settings = app_settings
    app.state.db_engine = build_engine(app_settings)
    app.state.db_session_factory = build_session_factory(app.state.db_engine)
    storage_config = StorageConfig.from_settings(app_settings)
    app.state.session_manager = SessionManager.from_settings(app_settings)
    app.state.storage = storage or build_storage_provider(storage_config)
    app.state.asset_lifecycle = AssetLifecycle(app.state.storage, storage_config)
    app.state.mailer = mailer or ContactMailer.from_settings(app_settings)

    # Middleware order: Starlette uses LIFO, so the LAST added runs FIRST.
    # CORS must run first to handle preflight requests, so add it last.
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization"],
    )

    # Order matters: specific handlers first, then catch-all
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.state.limiter = limiter

    app.include_router(v1_router, prefix="/api/v1")

    # Health check endpoint (outside versioned API)
    @app.get("/health")
    def health_check() -> dict:
        """Health check endpoint for monitoring.

        Returns:
            {"status": "healthy"} if service is running.
        """
        return {"status": "healthy"}

    logger.info(
        "app_created",
        environment=app_settings.environment,
        storage_provider=app.state.storage.provider_name,
    )
    return app


# Used by uvicorn: uvicorn portfolio_api.main:app
app = create_app()
