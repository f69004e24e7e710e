"""Abstract base class and types for object storage providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

ResourceType = Literal["image", "raw"]

# Documents stored as "raw" on the host; everything else is an image
_RAW_EXTENSIONS = (".pdf", ".docx", ".doc")


def guess_resource_type(external_id: str) -> ResourceType:
    """Infer the host resource type from a storage handle.

    Only used for references whose asset class is unknown; slots with an
    asset class take the resource type from the class.

    Args:
        external_id: Storage handle (public id).

    Returns:
        "raw" for document handles, "image" otherwise.
    """
    return "raw" if external_id.lower().endswith(_RAW_EXTENSIONS) else "image"


@dataclass(frozen=True)
class AssetRef:
    """Reference to one externally hosted file.

    Attributes:
        url: Public URL served to clients.
        external_id: Storage handle used to delete the file later.
        resource_type: Host resource type the file was stored as.
    """

    url: str
    external_id: str
    resource_type: ResourceType = "image"

    @classmethod
    def from_columns(
        cls,
        url: str | None,
        external_id: str | None,
        resource_type: ResourceType | None = None,
    ) -> "AssetRef | None":
        """Rebuild a reference from an entity's url/handle column pair.

        Args:
            url: Stored public URL.
            external_id: Stored storage handle.
            resource_type: Resource type of the slot. Guessed from the handle
                when not given.

        Returns:
            AssetRef when both columns are set, None otherwise.
        """
        if not url or not external_id:
            return None
        return cls(
            url=url,
            external_id=external_id,
            resource_type=resource_type or guess_resource_type(external_id),
        )


class ObjectStorage(ABC):
    """Abstract interface for file hosting backends.

    Implementations must be safe to share across concurrent requests.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short provider identifier used in logs."""
        ...

    @abstractmethod
    async def upload(
        self,
        content: bytes,
        *,
        folder: str,
        resource_type: ResourceType,
        filename: str | None = None,
    ) -> AssetRef:
        """Store a file and return its reference.

        Args:
            content: Raw file bytes.
            folder: Destination folder on the host.
            resource_type: "image" or "raw".
            filename: Original client filename, for the host's metadata.

        Returns:
            AssetRef with a non-empty url and external_id.

        Raises:
            StorageError: On any provider failure.
        """
        ...

    @abstractmethod
    async def delete(self, external_id: str, *, resource_type: ResourceType) -> bool:
        """Delete a stored file.

        Args:
            external_id: Storage handle returned by upload().
            resource_type: Resource type the file was stored as.

        Returns:
            True if the file was deleted, False if it was already absent.

        Raises:
            StorageError: On any provider failure other than not-found.
        """
        ...
