"""Storage provider factory.

The application builds one provider in create_app() and keeps it on
app.state; there is no module-level singleton.
"""

from portfolio_api.providers.config import StorageConfig
from portfolio_api.providers.storage.base import ObjectStorage
from portfolio_api.providers.storage.cloudinary_adapter import CloudinaryStorage
from portfolio_api.providers.storage.mock_adapter import MockStorage


def build_storage_provider(config: StorageConfig) -> ObjectStorage:
    """Create the configured storage provider.

    Args:
        config: Storage configuration.

    Returns:
        ObjectStorage instance.

    Raises:
        ValueError: If the configured provider is unknown.
    """
    if config.provider == "cloudinary":
        return CloudinaryStorage(config)
    if config.provider == "mock":
        return MockStorage()
    raise ValueError(f"Unknown storage provider: {config.provider}")
