"""Tests for the application shell: health, contact form, middleware."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.database import get_db
from portfolio_api.main import create_app
from portfolio_api.providers.storage.mock_adapter import MockStorage


class TestCreateApp:
    def test_builds_collaborators_on_state(self, test_settings, mock_storage, mock_mailer):
        app = create_app(test_settings, storage=mock_storage, mailer=mock_mailer)

        assert app.state.storage is mock_storage
        assert app.state.asset_lifecycle.storage is mock_storage
        assert app.state.mailer is mock_mailer
        assert app.state.session_manager.ttl.total_seconds() == 5 * 3600

    def test_storage_from_settings(self, test_settings):
        app = create_app(test_settings)
        assert isinstance(app.state.storage, MockStorage)

    def test_database_built_from_app_settings(self, test_settings):
        app_settings = test_settings.model_copy(
            update={"database_host": "db.internal", "database_name": "portfolio_b"}
        )

        app = create_app(app_settings)

        assert app.state.db_engine.url.host == "db.internal"
        assert app.state.db_engine.url.database == "portfolio_b"
        assert app.state.db_session_factory.kw["bind"] is app.state.db_engine

    def test_each_app_gets_its_own_engine(self, test_settings):
        first = create_app(test_settings)
        second = create_app(test_settings)

        assert first.state.db_engine is not second.state.db_engine

    @pytest.mark.asyncio
    async def test_shutdown_disposes_engine(self, test_settings):
        app = create_app(test_settings)
        app.state.db_engine = AsyncMock()

        async with app.router.lifespan_context(app):
            app.state.db_engine.dispose.assert_not_called()

        app.state.db_engine.dispose.assert_awaited_once()


class TestGetDb:
    """get_db() opens sessions from the requesting app's factory."""

    @staticmethod
    def _request(session):
        factory = MagicMock()
        factory.return_value.__aenter__.return_value = session
        request = MagicMock()
        request.app.state.db_session_factory = factory
        return request

    @pytest.mark.asyncio
    async def test_commits_after_handler_returns(self):
        session = AsyncMock(spec=AsyncSession)
        sessions = get_db(self._request(session))

        assert await anext(sessions) is session
        with pytest.raises(StopAsyncIteration):
            await anext(sessions)

        session.commit.assert_awaited_once()
        session.rollback.assert_not_called()

    @pytest.mark.asyncio
    async def test_rolls_back_when_handler_raises(self):
        session = AsyncMock(spec=AsyncSession)
        sessions = get_db(self._request(session))
        await anext(sessions)

        with pytest.raises(RuntimeError):
            await sessions.athrow(RuntimeError("handler failed"))

        session.rollback.assert_awaited_once()
        session.commit.assert_not_called()


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, unauthenticated_client):
        response = await unauthenticated_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestSecurityHeaders:
    @pytest.mark.asyncio
    async def test_headers_present(self, unauthenticated_client):
        response = await unauthenticated_client.get("/health")

        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "Strict-Transport-Security" not in response.headers

    @pytest.mark.asyncio
    async def test_mutations_not_cached(self, unauthenticated_client):
        response = await unauthenticated_client.post("/api/v1/auth/logout")
        assert response.headers["Cache-Control"] == "no-store, max-age=0"

    @pytest.mark.asyncio
    async def test_cors_preflight_allows_frontend_with_credentials(
        self, unauthenticated_client
    ):
        response = await unauthenticated_client.options(
            "/api/v1/auth/login",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert response.headers["access-control-allow-credentials"] == "true"


class TestContact:
    """POST /api/v1/contact."""

    @pytest.mark.asyncio
    async def test_sends_in_background(self, unauthenticated_client, mock_mailer):
        response = await unauthenticated_client.post(
            "/api/v1/contact",
            json={
                "name": "Ann",
                "email": "ann@example.com",
                "message": "Loved the blog project!",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Message sent successfully!"}
        mock_mailer.send_contact_message.assert_awaited_once_with(
            name="Ann", email="ann@example.com", message="Loved the blog project!"
        )

    @pytest.mark.asyncio
    async def test_short_message_rejected(self, unauthenticated_client, mock_mailer):
        response = await unauthenticated_client.post(
            "/api/v1/contact",
            json={"name": "Ann", "email": "ann@example.com", "message": "hi"},
        )

        assert response.status_code == 400
        mock_mailer.send_contact_message.assert_not_called()
