"""Deploy-time configuration for the CDK app.

Settings are loaded from ``DEPLOY_``-prefixed environment variables (via a
``.env`` file in the server directory when present). CDK context values passed
with ``-c key=value`` take precedence over these where a stack looks them up.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.constants import PRODUCTION_ENV

SERVER_DIR = Path(__file__).parent.parent


class InfrastructureSettings(BaseSettings):
    """Infrastructure settings loaded from environment variables with defaults."""

    model_config = SettingsConfigDict(
        env_file=str(SERVER_DIR / ".env"),
        env_file_encoding="utf-8",
        env_prefix="DEPLOY_",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(
        default="dev",
        description="Deployment environment, used when the 'env' context key is not set",
    )
    account: Optional[str] = Field(
        default=None,
        description="AWS account ID (environment-agnostic stacks when unset)",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region to deploy to",
    )

    # Network
    nat_instance_type: str = Field(
        default="t3.micro",
        description="Instance type of the NAT instance used outside production",
    )

    # Registry
    app_code_dir: Path = Field(
        default=SERVER_DIR,
        description="Directory containing the Dockerfile of the service image",
    )

    # Database
    database_name: str = Field(
        default="MyDatabase",
        description="Name of the database created in the RDS instance",
    )
    database_allocated_storage: int = Field(
        default=20,
        description="Initial RDS storage in GiB",
    )
    database_max_allocated_storage: int = Field(
        default=100,
        description="Upper bound for RDS storage autoscaling in GiB",
    )
    mysql_full_version: str = Field(
        default="8.0.32",
        description="Full MySQL engine version",
    )
    mysql_major_version: str = Field(
        default="8.0",
        description="Major MySQL engine version",
    )

    # Logging
    log_stream_prefix: str = Field(
        default="ecs-fargate-app",
        description="CloudWatch log stream prefix for the service container",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Normalise the environment name and reject empty values."""
        v = v.strip().lower()
        if not v:
            raise ValueError("Deployment environment must not be empty")
        return v

    @field_validator("database_allocated_storage")
    @classmethod
    def validate_allocated_storage(cls, v: int) -> int:
        """RDS MySQL needs at least 20 GiB of storage."""
        if v < 20:
            raise ValueError("Allocated storage must be at least 20 GiB")
        return v

    @field_validator("database_max_allocated_storage")
    @classmethod
    def validate_max_allocated_storage(cls, v: int, info: ValidationInfo) -> int:
        """Validate that the storage ceiling is not below the initial size."""
        allocated = info.data.get("database_allocated_storage")
        if allocated is not None and v < allocated:
            raise ValueError(
                "Max allocated storage must be greater than or equal to allocated storage"
            )
        return v

    @property
    def is_production(self) -> bool:
        """Whether the configured fallback environment is production."""
        return self.env == PRODUCTION_ENV


# Singleton instance - import this in other modules
settings = InfrastructureSettings()
