"""
Blogsite Backend — Application Lifecycle Tests
===============================================

What:  Startup and shutdown in the lifespan handler.
Why:   A missing MONGO_URI or an unreachable server must stop the process,
       and shutdown must always close the client.
How:   The lifespan context is entered directly with Database.connect patched.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from blogsite.config import settings
from blogsite.exceptions import DatabaseConnectionError
from blogsite.main import create_app, lifespan


@pytest.fixture(autouse=True)
def quiet_logging():
    """setup_logging() replaces root handlers, which would hide caplog records."""
    with patch("blogsite.main.setup_logging"):
        yield


class TestLifespan:
    """Tests for the lifespan handler."""

    @pytest.mark.asyncio
    async def test_missing_uri_aborts(self, monkeypatch):
        monkeypatch.setattr(settings, "mongo_uri", "")
        connect = AsyncMock()

        with patch("blogsite.main.Database.connect", connect):
            with pytest.raises(ValueError, match="MONGO_URI is not set"):
                async with lifespan(create_app()):
                    pass

        connect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_connection_failure_aborts(self):
        connect = AsyncMock(side_effect=DatabaseConnectionError("no servers available"))

        with patch("blogsite.main.Database.connect", connect):
            with pytest.raises(DatabaseConnectionError):
                async with lifespan(create_app()):
                    pass

    @pytest.mark.asyncio
    async def test_connects_and_disconnects(self, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "static_dir", str(tmp_path))
        database = MagicMock()
        database.disconnect = AsyncMock()
        app = create_app()

        with patch("blogsite.main.Database.connect", AsyncMock(return_value=database)) as connect:
            async with lifespan(app):
                assert app.state.database is database

        connect.assert_awaited_once_with(
            settings.mongo_uri,
            settings.mongo_database,
            timeout=settings.connect_timeout,
        )
        database.disconnect.assert_awaited_once_with(timeout=settings.shutdown_timeout)
        assert app.state.database is None

    @pytest.mark.asyncio
    async def test_missing_frontend_only_warns(self, monkeypatch, tmp_path, caplog):
        monkeypatch.setattr(settings, "static_dir", str(tmp_path / "absent"))
        database = MagicMock()
        database.disconnect = AsyncMock()

        with patch("blogsite.main.Database.connect", AsyncMock(return_value=database)):
            async with lifespan(create_app()):
                pass

        assert "frontend directory not found" in caplog.text
