"""Tests for the Cloudinary storage adapter.

The SDK is patched at cloudinary.uploader; no request leaves the process.
"""

from unittest.mock import patch

import cloudinary.exceptions
import pytest

from portfolio_api.providers.config import StorageConfig
from portfolio_api.providers.errors import (
    StorageAuthenticationError,
    StorageError,
    StorageRateLimitError,
    TransientStorageError,
)
from portfolio_api.providers.storage.cloudinary_adapter import (
    CloudinaryStorage,
    _classify_cloudinary_error,
)

_UPLOAD = "cloudinary.uploader.upload"
_DESTROY = "cloudinary.uploader.destroy"


@pytest.fixture
def adapter() -> CloudinaryStorage:
    return CloudinaryStorage(
        StorageConfig(
            cloud_name="demo",
            api_key="key",
            api_secret="secret",  # nosec B106
        )
    )


class TestErrorClassification:
    """Tests for _classify_cloudinary_error()."""

    @pytest.mark.parametrize(
        ("sdk_error", "expected"),
        [
            (cloudinary.exceptions.RateLimited("slow down"), StorageRateLimitError),
            (cloudinary.exceptions.AuthorizationRequired("bad key"), StorageAuthenticationError),
            (cloudinary.exceptions.NotAllowed("forbidden"), StorageAuthenticationError),
            (cloudinary.exceptions.GeneralError("503"), TransientStorageError),
            (ConnectionResetError("reset"), TransientStorageError),
            (cloudinary.exceptions.BadRequest("bad file"), StorageError),
        ],
    )
    def test_maps_sdk_errors(self, sdk_error, expected):
        error = _classify_cloudinary_error(sdk_error)
        assert type(error) is expected
        assert str(sdk_error) in str(error)


class TestUpload:
    """Tests for CloudinaryStorage.upload()."""

    @pytest.mark.asyncio
    async def test_returns_secure_url_and_public_id(self, adapter):
        with patch(_UPLOAD) as upload:
            upload.return_value = {
                "secure_url": "https://res.cloudinary.com/demo/image/upload/p/abc.png",
                "url": "http://res.cloudinary.com/demo/image/upload/p/abc.png",
                "public_id": "portfolio/project/abc",
            }
            ref = await adapter.upload(
                b"png-bytes",
                folder="portfolio/project",
                resource_type="image",
                filename="abc.png",
            )

        assert ref.url.startswith("https://")
        assert ref.external_id == "portfolio/project/abc"
        assert ref.resource_type == "image"

        _, kwargs = upload.call_args
        assert kwargs["folder"] == "portfolio/project"
        assert kwargs["resource_type"] == "image"
        assert kwargs["cloud_name"] == "demo"
        assert kwargs["api_key"] == "key"
        assert kwargs["filename_override"] == "abc.png"
        assert kwargs["use_filename"] is False

    @pytest.mark.asyncio
    async def test_raw_upload_keeps_filename(self, adapter):
        with patch(_UPLOAD) as upload:
            upload.return_value = {
                "secure_url": "https://res.cloudinary.com/demo/raw/upload/cv.pdf",
                "public_id": "portfolio/my_CV/cv.pdf",
            }
            await adapter.upload(
                b"%PDF", folder="portfolio/my_CV", resource_type="raw", filename="cv.pdf"
            )

        assert upload.call_args.kwargs["use_filename"] is True

    @pytest.mark.asyncio
    async def test_missing_public_id_raises(self, adapter):
        with patch(_UPLOAD, return_value={"secure_url": "https://x"}):
            with pytest.raises(StorageError, match="no url or public_id"):
                await adapter.upload(b"x", folder="f", resource_type="image")

    @pytest.mark.asyncio
    async def test_sdk_error_is_classified(self, adapter):
        with patch(_UPLOAD, side_effect=cloudinary.exceptions.GeneralError("timeout")):
            with pytest.raises(TransientStorageError) as exc_info:
                await adapter.upload(b"x", folder="f", resource_type="image")

        assert isinstance(exc_info.value.__cause__, cloudinary.exceptions.GeneralError)


class TestDelete:
    """Tests for CloudinaryStorage.delete()."""

    @pytest.mark.asyncio
    async def test_ok_returns_true(self, adapter):
        with patch(_DESTROY, return_value={"result": "ok"}) as destroy:
            assert await adapter.delete("p/abc", resource_type="image") is True

        args, kwargs = destroy.call_args
        assert args == ("p/abc",)
        assert kwargs["resource_type"] == "image"
        assert kwargs["invalidate"] is True

    @pytest.mark.asyncio
    async def test_not_found_returns_false(self, adapter):
        with patch(_DESTROY, return_value={"result": "not found"}):
            assert await adapter.delete("p/abc", resource_type="raw") is False

    @pytest.mark.asyncio
    async def test_unexpected_result_raises(self, adapter):
        with patch(_DESTROY, return_value={"result": "error"}):
            with pytest.raises(StorageError, match="Unexpected"):
                await adapter.delete("p/abc", resource_type="image")

    @pytest.mark.asyncio
    async def test_sdk_error_is_classified(self, adapter):
        with patch(_DESTROY, side_effect=cloudinary.exceptions.AuthorizationRequired("bad")):
            with pytest.raises(StorageAuthenticationError):
                await adapter.delete("p/abc", resource_type="image")

    def test_provider_name(self, adapter):
        assert adapter.provider_name == "cloudinary"
