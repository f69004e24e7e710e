"""In-memory object storage for tests and local development.

Select with STORAGE_PROVIDER=mock. Nothing leaves the process.
"""

import uuid
from typing import Any

from portfolio_api.providers.errors import StorageError
from portfolio_api.providers.storage.base import AssetRef, ObjectStorage, ResourceType


class MockStorage(ObjectStorage):
    """Mock storage provider.

    Attributes:
        objects: Stored files keyed by external id.
        calls: Record of all method invocations for test assertions.
        fail_uploads: When set, upload() raises this error.
        fail_deletes: When set, delete() raises this error.
    """

    def __init__(self, base_url: str = "https://storage.test") -> None:
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, dict[str, Any]] = {}
        self.calls: list[dict[str, Any]] = []
        self.fail_uploads: StorageError | None = None
        self.fail_deletes: StorageError | None = None

    @property
    def provider_name(self) -> str:
        """Return 'mock' for testing."""
        return "mock"

    async def upload(
        self,
        content: bytes,
        *,
        folder: str,
        resource_type: ResourceType,
        filename: str | None = None,
    ) -> AssetRef:
        self.calls.append(
            {
                "method": "upload",
                "folder": folder,
                "resource_type": resource_type,
                "filename": filename,
                "size": len(content),
            }
        )
        if self.fail_uploads is not None:
            raise self.fail_uploads

        suffix = ".pdf" if resource_type == "raw" else ""
        external_id = f"{folder}/{uuid.uuid4().hex}{suffix}"
        self.objects[external_id] = {
            "content": content,
            "resource_type": resource_type,
        }
        return AssetRef(
            url=f"{self.base_url}/{resource_type}/{external_id}",
            external_id=external_id,
            resource_type=resource_type,
        )

    async def delete(self, external_id: str, *, resource_type: ResourceType) -> bool:
        self.calls.append(
            {
                "method": "delete",
                "external_id": external_id,
                "resource_type": resource_type,
            }
        )
        if self.fail_deletes is not None:
            raise self.fail_deletes
        return self.objects.pop(external_id, None) is not None

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        """Return recorded calls for one method ("upload" or "delete")."""
        return [call for call in self.calls if call["method"] == method]
