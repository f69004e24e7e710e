"""Tests for the skills and certificates APIs.

Both entities own one hosted image; these tests follow the same lifecycle
checks as projects with the in-memory storage.
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from portfolio_api.repositories.certificate_repository import CertificateRepository
from portfolio_api.repositories.skill_repository import LevelRepository, SkillRepository
from tests.conftest import PNG_BYTES, make_certificate, make_level, make_skill

_SVG = b'<svg xmlns="http://www.w3.org/2000/svg"></svg>'


async def _apply(_db, entity, **changes):
    for key, value in changes.items():
        setattr(entity, key, value)
    return entity


class TestSkills:
    """/api/v1/skills."""

    @pytest.mark.asyncio
    async def test_list(self, unauthenticated_client):
        with patch.object(
            SkillRepository,
            "list_all",
            new_callable=AsyncMock,
            return_value=[make_skill("Docker"), make_skill("Python")],
        ):
            response = await unauthenticated_client.get("/api/v1/skills")

        body = response.json()
        assert [s["name"] for s in body["data"]] == ["Docker", "Python"]
        assert body["data"][0]["level"]["name"] == "Expert"
        assert "icon_public_id" not in response.text

    @pytest.mark.asyncio
    async def test_create_accepts_svg_icon(self, client, mock_storage):
        level = make_level()

        async def _create(_db, *, name, level_id, icon_url, icon_public_id):
            return make_skill(
                name, level=level, icon_url=icon_url, icon_public_id=icon_public_id
            )

        with (
            patch.object(LevelRepository, "get_by_id", new_callable=AsyncMock, return_value=level),
            patch.object(SkillRepository, "create", side_effect=_create),
        ):
            response = await client.post(
                "/api/v1/skills",
                data={"name": "Figma", "level_id": str(level.id)},
                files={"icon": ("figma.svg", _SVG, "image/svg+xml")},
            )

        assert response.status_code == 201
        [upload] = mock_storage.calls_to("upload")
        assert upload["folder"] == "portfolio/skill"
        assert response.json()["data"]["icon_url"].startswith("https://storage.test/")

    @pytest.mark.asyncio
    async def test_create_unknown_level_is_404(self, client, mock_storage):
        with patch.object(
            LevelRepository, "get_by_id", new_callable=AsyncMock, return_value=None
        ):
            response = await client.post(
                "/api/v1/skills",
                data={"name": "Figma", "level_id": str(uuid.uuid4())},
                files={"icon": ("f.png", PNG_BYTES, "image/png")},
            )

        assert response.status_code == 404
        assert mock_storage.calls == []

    @pytest.mark.asyncio
    async def test_create_rejects_gif_icon(self, client, mock_storage):
        response = await client.post(
            "/api/v1/skills",
            data={"name": "Figma", "level_id": str(uuid.uuid4())},
            files={"icon": ("f.gif", b"GIF89a", "image/gif")},
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == (
            "Invalid icon image file! Must be JPG, JPEG, PNG, WEBP, or SVG under 2MB."
        )
        assert mock_storage.calls == []

    @pytest.mark.asyncio
    async def test_update_replaces_icon(self, client, mock_storage):
        old = await mock_storage.upload(PNG_BYTES, folder="portfolio/skill", resource_type="image")
        skill = make_skill(icon_url=old.url, icon_public_id=old.external_id)
        mock_storage.calls.clear()

        with (
            patch.object(SkillRepository, "get_by_id", new_callable=AsyncMock, return_value=skill),
            patch.object(SkillRepository, "update", side_effect=_apply),
        ):
            response = await client.put(
                f"/api/v1/skills/{skill.id}",
                files={"icon": ("new.png", PNG_BYTES, "image/png")},
            )

        assert response.status_code == 200
        assert old.external_id not in mock_storage.objects
        assert skill.icon_public_id in mock_storage.objects

    @pytest.mark.asyncio
    async def test_update_name_only_keeps_icon(self, client, mock_storage):
        skill = make_skill()
        with (
            patch.object(SkillRepository, "get_by_id", new_callable=AsyncMock, return_value=skill),
            patch.object(SkillRepository, "update", side_effect=_apply),
        ):
            response = await client.put(f"/api/v1/skills/{skill.id}", data={"name": "Py"})

        assert response.json()["data"]["name"] == "Py"
        assert mock_storage.calls == []

    @pytest.mark.asyncio
    async def test_delete(self, client, mock_storage):
        ref = await mock_storage.upload(PNG_BYTES, folder="portfolio/skill", resource_type="image")
        skill = make_skill(icon_url=ref.url, icon_public_id=ref.external_id)

        with (
            patch.object(SkillRepository, "get_by_id", new_callable=AsyncMock, return_value=skill),
            patch.object(SkillRepository, "delete", new_callable=AsyncMock) as delete,
        ):
            response = await client.delete(f"/api/v1/skills/{skill.id}")

        assert response.status_code == 200
        assert ref.external_id not in mock_storage.objects
        delete.assert_awaited_once()


class TestCertificates:
    """/api/v1/certificates."""

    @pytest.mark.asyncio
    async def test_create(self, client, mock_storage):
        async def _create(_db, *, title, image_url, image_public_id):
            return make_certificate(title, image_url=image_url, image_public_id=image_public_id)

        with patch.object(CertificateRepository, "create", side_effect=_create):
            response = await client.post(
                "/api/v1/certificates",
                data={"title": "AWS Practitioner"},
                files={"image": ("aws.jpg", PNG_BYTES, "image/jpeg")},
            )

        assert response.status_code == 201
        assert mock_storage.calls_to("upload")[0]["folder"] == "portfolio/certificate"

    @pytest.mark.asyncio
    async def test_update_with_bad_type_is_rejected(self, client, mock_storage):
        """A wrong type alone is enough to reject an edit, even when small."""
        certificate = make_certificate()
        with (
            patch.object(
                CertificateRepository, "get_by_id", new_callable=AsyncMock, return_value=certificate
            ),
            patch.object(CertificateRepository, "update", new_callable=AsyncMock) as update,
        ):
            response = await client.put(
                f"/api/v1/certificates/{certificate.id}",
                files={"image": ("c.gif", b"GIF89a", "image/gif")},
            )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ASSET"
        assert mock_storage.calls == []
        update.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_with_oversized_image_is_rejected(self, client, mock_storage):
        """An allowed type over the size limit is rejected too."""
        certificate = make_certificate()
        with patch.object(
            CertificateRepository, "get_by_id", new_callable=AsyncMock, return_value=certificate
        ):
            response = await client.put(
                f"/api/v1/certificates/{certificate.id}",
                files={"image": ("c.png", b"\x00" * (2 * 1024 * 1024 + 1), "image/png")},
            )

        assert response.status_code == 400
        assert mock_storage.calls == []

    @pytest.mark.asyncio
    async def test_missing_is_404(self, unauthenticated_client):
        with patch.object(
            CertificateRepository, "get_by_id", new_callable=AsyncMock, return_value=None
        ):
            response = await unauthenticated_client.get(f"/api/v1/certificates/{uuid.uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_removes_image_first(self, client, mock_storage):
        ref = await mock_storage.upload(
            PNG_BYTES, folder="portfolio/certificate", resource_type="image"
        )
        certificate = make_certificate(image_url=ref.url, image_public_id=ref.external_id)

        with (
            patch.object(
                CertificateRepository, "get_by_id", new_callable=AsyncMock, return_value=certificate
            ),
            patch.object(CertificateRepository, "delete", new_callable=AsyncMock) as delete,
        ):
            response = await client.delete(f"/api/v1/certificates/{certificate.id}")

        assert response.status_code == 200
        assert ref.external_id not in mock_storage.objects
        delete.assert_awaited_once()
