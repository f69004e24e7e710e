"""Storage provider error taxonomy.

Adapters map their SDK's exceptions onto these classes, so the asset
lifecycle and the retry helper never see vendor types.
"""

__all__ = [
    "StorageError",
    "StorageRateLimitError",
    "StorageAuthenticationError",
    "TransientStorageError",
]


class StorageError(Exception):
    """Base class for all storage provider errors.

    All provider-specific exceptions should inherit from this class,
    allowing callers to catch all storage errors with a single handler.
    """

    pass


class StorageRateLimitError(StorageError):
    """Provider rate limit exceeded.

    May carry a retry_after_seconds hint from the provider.
    """

    def __init__(self, message: str, retry_after_seconds: float | None = None):
        """Initialize StorageRateLimitError.

        Args:
            message: Error description from the provider.
            retry_after_seconds: Optional hint from provider on when to retry.
        """
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class StorageAuthenticationError(StorageError):
    """Invalid or missing storage credentials. Not retryable."""

    pass


class TransientStorageError(StorageError):
    """Temporary failure (network, timeout, 5xx). Safe to retry."""

    pass
