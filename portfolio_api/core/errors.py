"""API error classes.

Every failure a route can surface maps to one of these. Exception handlers in
main.py turn them into the standard error envelope, so services and
dependencies raise them directly instead of building HTTP responses.
"""


class APIError(Exception):
    """Base class for API errors.

    All API errors have a code, message, and HTTP status.
    Subclasses set default status_code.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional list of additional error details.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Field validation failed (400).

    Use for request body validation errors, query param errors, etc.
    """

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class InvalidAssetError(ValidationError):
    """Uploaded file rejected by its asset class policy (400).

    Raised before any storage call, so nothing is uploaded or deleted.
    """

    def __init__(self, message: str, details: list[dict] | None = None) -> None:
        APIError.__init__(
            self,
            code="INVALID_ASSET",
            message=message,
            status_code=400,
            details=details,
        )


class UnauthorizedError(APIError):
    """Authentication required (401).

    Use when no valid auth credentials provided.
    """

    def __init__(
        self, message: str = "Authentication required", code: str = "UNAUTHORIZED"
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=401,
        )


class InvalidCredentialsError(UnauthorizedError):
    """Login rejected (401).

    Security: Same message for unknown email and wrong password so the
    response does not reveal which accounts exist.
    """

    def __init__(self) -> None:
        super().__init__(
            message="Invalid email or password.",
            code="INVALID_CREDENTIALS",
        )


class MissingTokenError(UnauthorizedError):
    """No session token in the Authorization header or cookie (401)."""

    def __init__(self) -> None:
        super().__init__(
            message="Authentication required",
            code="MISSING_TOKEN",
        )


class InvalidTokenError(UnauthorizedError):
    """Session token present but unusable (401).

    Covers bad signature, malformed token, wrong claims, expiry and
    not-yet-issued tokens. The cause is logged, never returned.
    """

    def __init__(self) -> None:
        super().__init__(
            message="Invalid or expired token.",
            code="INVALID_TOKEN",
        )


class NotFoundError(APIError):
    """Resource not found (404)."""

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
        )


class ConflictError(APIError):
    """Duplicate or conflicting resource (409).

    Use for duplicate entries, rows still referenced elsewhere, etc.
    Accepts custom code for specific conflict types.
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details,
        )


class StorageUnavailableError(APIError):
    """Object storage call failed (500).

    Raised when an upload fails or returns no handle, and when deleting an
    existing asset fails during an entity delete. The caller aborts, so the
    database never points at an asset that was not stored.
    """

    def __init__(self, message: str = "File storage is currently unavailable") -> None:
        super().__init__(
            code="STORAGE_UNAVAILABLE",
            message=message,
            status_code=500,
        )


class InternalError(APIError):
    """Unexpected server error (500).

    Use for unhandled exceptions. Never expose stack traces to clients.
    """

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
        )
