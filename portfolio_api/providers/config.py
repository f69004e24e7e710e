"""Storage provider configuration."""

from dataclasses import dataclass

from portfolio_api.core.config import Settings


@dataclass(frozen=True)
class StorageConfig:
    """Centralized storage provider configuration.

    Attributes:
        provider: Which storage backend to use ("cloudinary", "mock").
        cloud_name: Cloudinary cloud name.
        api_key: Cloudinary API key.
        api_secret: Cloudinary API secret.
        root_folder: Folder every upload is placed under.
        max_retries: Max retry attempts for transient errors (0 = none).
        retry_base_delay_ms: Base delay for exponential backoff.
        retry_max_delay_ms: Max delay cap for exponential backoff.
    """

    provider: str = "cloudinary"
    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    root_folder: str = "portfolio"
    max_retries: int = 0
    retry_base_delay_ms: int = 500
    retry_max_delay_ms: int = 5000

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        """Build the storage configuration from application settings.

        Args:
            settings: Loaded application settings.

        Returns:
            StorageConfig with values from the environment.
        """
        return cls(
            provider=settings.storage_provider,
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret.get_secret_value(),
            root_folder=settings.storage_root_folder,
            max_retries=settings.storage_max_retries,
            retry_base_delay_ms=settings.storage_retry_base_delay_ms,
            retry_max_delay_ms=settings.storage_retry_max_delay_ms,
        )
