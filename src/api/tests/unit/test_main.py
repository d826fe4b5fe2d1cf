"""Unit tests for the main FastAPI application."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from infrastructure.version import __version__
from main import app


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


class TestApplicationConfiguration:
    """Tests for the FastAPI application object."""

    def test_app_title(self):
        assert app.title == "Tablero API"

    def test_app_version_matches_package(self):
        assert app.version == __version__

    def test_board_routes_are_included(self):
        paths = {route.path for route in app.routes}

        assert "/boards" in paths
        assert "/boards/{board_id}" in paths


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestLifespan:
    """Tests for startup and shutdown behaviour."""

    def test_memory_backend_skips_table_bootstrap(self):
        with (
            patch("main.get_board_settings") as mock_board_settings,
            patch("main.create_tables", new_callable=AsyncMock) as mock_create,
            patch(
                "main.close_database_connections", new_callable=AsyncMock
            ) as mock_close,
        ):
            mock_board_settings.return_value = MagicMock(storage_backend="memory")
            with TestClient(app):
                pass

        mock_create.assert_not_awaited()
        mock_close.assert_awaited_once()

    def test_postgres_backend_creates_tables(self):
        engine = MagicMock()

        with (
            patch("main.get_board_settings") as mock_board_settings,
            patch("main.get_write_engine", return_value=engine),
            patch("main.create_tables", new_callable=AsyncMock) as mock_create,
            patch("main.close_database_connections", new_callable=AsyncMock),
        ):
            mock_board_settings.return_value = MagicMock(storage_backend="postgres")
            with TestClient(app):
                pass

        mock_create.assert_awaited_once_with(engine)
