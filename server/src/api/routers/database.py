"""Database router exposing the connection summary of the service.

The summary reflects what ECS injected into the container: the RDS endpoint
as a plain environment variable and the credentials from Secrets Manager.
Credential values are never returned. The endpoint answers 503 until the
endpoint and both credentials are present.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.config import Settings, settings

logger = logging.getLogger(__name__)

router = APIRouter()


class DatabaseNotConfiguredError(Exception):
    """Raised when database settings were not injected into the container."""


class DatabaseSummaryResponse(BaseModel):
    """Response model for the database connection summary."""

    endpoint: str = Field(..., description="RDS endpoint address")
    port: int = Field(..., description="RDS port")
    database: str = Field(..., description="Database name")


def get_settings() -> Settings:
    """Dependency returning the application settings."""
    return settings


@router.get("", response_model=DatabaseSummaryResponse)
async def get_database_summary(
    config: Settings = Depends(get_settings),
) -> DatabaseSummaryResponse:
    """Return the database connection summary.

    Args:
        config: Application settings (from dependency).

    Returns:
        DatabaseSummaryResponse describing the injected connection settings.

    Raises:
        DatabaseNotConfiguredError: If the endpoint or a credential is missing or empty.
    """
    if not config.database_configured:
        missing = ", ".join(config.missing_database_settings)
        raise DatabaseNotConfiguredError(f"Missing database settings: {missing}")

    logger.debug(f"Database summary requested for {config.rds_endpoint}")

    return DatabaseSummaryResponse(
        endpoint=config.rds_endpoint,
        port=config.rds_port,
        database=config.rds_database,
    )
