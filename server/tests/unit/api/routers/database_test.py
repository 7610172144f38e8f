"""Unit tests for the database router module."""

import pytest

from src.api.routers.database import (
    DatabaseNotConfiguredError,
    DatabaseSummaryResponse,
    get_database_summary,
    get_settings,
)
from src.config import Settings, settings


@pytest.fixture
def configured_settings():
    """Settings as injected by the ECS task definition."""
    return Settings(
        _env_file=None,
        rds_endpoint="mydb.abc123.us-east-1.rds.amazonaws.com",
        rds_username="admin",
        rds_password="generated-password",
    )


class TestGetDatabaseSummary:
    """Test the GET /database endpoint."""

    @pytest.mark.asyncio
    async def test_summary_for_configured_database(self, configured_settings):
        """Test the summary of a fully configured container."""
        result = await get_database_summary(config=configured_settings)

        assert isinstance(result, DatabaseSummaryResponse)
        assert result.endpoint == "mydb.abc123.us-east-1.rds.amazonaws.com"
        assert result.port == 3306
        assert result.database == "MyDatabase"

    @pytest.mark.asyncio
    async def test_summary_never_contains_password(self, configured_settings):
        """Test that the password value is not part of the response."""
        result = await get_database_summary(config=configured_settings)

        assert "generated-password" not in result.model_dump_json()

    @pytest.mark.asyncio
    async def test_missing_credentials_raise(self):
        """Test that an endpoint without credentials is not treated as configured."""
        config = Settings(_env_file=None, rds_endpoint="db", rds_username=None, rds_password=None)

        with pytest.raises(
            DatabaseNotConfiguredError, match="Missing database settings: RDS_USERNAME, RDS_PASSWORD"
        ):
            await get_database_summary(config=config)

    @pytest.mark.asyncio
    async def test_empty_username_raises(self, configured_settings):
        """Test that an empty injected username counts as missing."""
        config = configured_settings.model_copy(update={"rds_username": ""})

        with pytest.raises(DatabaseNotConfiguredError, match="RDS_USERNAME"):
            await get_database_summary(config=config)

    @pytest.mark.asyncio
    async def test_missing_endpoint_raises(self):
        """Test that a container without RDS_ENDPOINT raises."""
        config = Settings(_env_file=None, rds_endpoint=None)

        with pytest.raises(DatabaseNotConfiguredError, match="RDS_ENDPOINT"):
            await get_database_summary(config=config)


def test_get_settings_returns_singleton():
    """Test that the settings dependency returns the module singleton."""
    assert get_settings() is settings
