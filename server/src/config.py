"""Configuration management for the service container.

This module loads settings from environment variables (via .env file when
running locally). On ECS the database endpoint is set as a plain environment
variable and the credentials are injected from Secrets Manager at launch.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults."""

    model_config = SettingsConfigDict(
        # Look for .env file in the server directory (parent of src)
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    service_name: str = Field(
        default="ECS Fargate Service",
        description="Human readable service name",
    )
    port: int = Field(
        default=3000,
        description="Port the HTTP server listens on",
    )

    # RDS Configuration
    rds_endpoint: Optional[str] = Field(
        default=None,
        description="RDS MySQL endpoint address",
    )
    rds_port: int = Field(
        default=3306,
        description="RDS MySQL port number",
    )
    rds_database: str = Field(
        default="MyDatabase",
        description="RDS MySQL database name",
    )
    rds_username: Optional[str] = Field(
        default=None,
        description="RDS MySQL username (injected from Secrets Manager)",
    )
    rds_password: Optional[str] = Field(
        default=None,
        description="RDS MySQL password (injected from Secrets Manager)",
    )

    @field_validator("port", "rds_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate that port is within valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def missing_database_settings(self) -> list[str]:
        """Names of the database variables that are unset or empty."""
        values = {
            "RDS_ENDPOINT": self.rds_endpoint,
            "RDS_USERNAME": self.rds_username,
            "RDS_PASSWORD": self.rds_password,
        }
        return [name for name, value in values.items() if not value]

    @property
    def database_configured(self) -> bool:
        """Whether the endpoint and both credentials are available."""
        return not self.missing_database_settings


# Singleton instance - import this in other modules
settings = Settings()
