"""Object storage providers for hosted images and documents."""

from portfolio_api.providers.storage.base import AssetRef, ObjectStorage

__all__ = ["AssetRef", "ObjectStorage"]
