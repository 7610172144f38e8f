"""Unit tests for the error handling middleware module.

This module tests setup_error_handlers and the registered handlers for
missing database settings and unexpected exceptions.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI, Request, status
from fastapi.testclient import TestClient

from src.api import api
from src.api.middleware.error_handling import setup_error_handlers
from src.api.routers.database import DatabaseNotConfiguredError, get_settings
from src.config import Settings


@pytest.fixture
def handlers():
    """Register the handlers on a real app and return them by exception type."""
    app = FastAPI()
    setup_error_handlers(app)
    return app.exception_handlers


@pytest.fixture
def mock_request():
    """Create a mock FastAPI Request instance."""
    request = MagicMock(spec=Request)
    request.url.path = "/database"
    return request


class TestSetupErrorHandlers:
    """Test setup_error_handlers registration."""

    def test_registers_database_handler(self, handlers):
        """Test that DatabaseNotConfiguredError has a handler."""
        assert DatabaseNotConfiguredError in handlers

    def test_registers_exception_handler(self, handlers):
        """Test that a catch-all Exception handler is registered."""
        assert Exception in handlers


class TestDatabaseNotConfiguredHandler:
    """Test the handler for missing database settings."""

    @pytest.mark.asyncio
    async def test_returns_503(self, handlers, mock_request):
        """Test that missing settings map to Service Unavailable."""
        handler = handlers[DatabaseNotConfiguredError]

        with patch("src.api.middleware.error_handling.logger") as mock_logger:
            response = await handler(
                mock_request, DatabaseNotConfiguredError("Missing database settings: RDS_ENDPOINT")
            )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        body = json.loads(response.body)
        assert body == {
            "error": "Database not configured",
            "detail": "Missing database settings: RDS_ENDPOINT",
            "type": "DatabaseNotConfiguredError",
        }
        mock_logger.warning.assert_called_once()

    def test_database_endpoint_without_settings_returns_503(self):
        """Test that GET /database on an unconfigured container answers 503."""
        unconfigured = Settings(
            _env_file=None, rds_endpoint=None, rds_username=None, rds_password=None
        )
        api.app.dependency_overrides[get_settings] = lambda: unconfigured
        try:
            response = TestClient(api.app).get("/database")
        finally:
            api.app.dependency_overrides.clear()

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json() == {
            "error": "Database not configured",
            "detail": "Missing database settings: RDS_ENDPOINT, RDS_USERNAME, RDS_PASSWORD",
            "type": "DatabaseNotConfiguredError",
        }


class TestGeneralExceptionHandler:
    """Test the catch-all handler."""

    @pytest.mark.asyncio
    async def test_returns_500_without_details(self, handlers, mock_request):
        """Test that internal errors do not leak their message."""
        handler = handlers[Exception]

        with patch("src.api.middleware.error_handling.logger") as mock_logger:
            response = await handler(mock_request, RuntimeError("connection refused"))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        body = json.loads(response.body)
        assert body["detail"] == "An unexpected error occurred"
        assert body["type"] == "RuntimeError"
        assert "connection refused" not in response.body.decode()
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["exc_info"] is True
