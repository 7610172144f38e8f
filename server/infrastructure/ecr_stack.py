"""Registry stack: builds the service image and publishes its URI to SSM."""

import logging
from typing import Optional

import aws_cdk as cdk
from aws_cdk import aws_ecr as ecr, aws_ssm as ssm
from aws_cdk.aws_ecr_assets import DockerImageAsset, Platform
from constructs import Construct

from infrastructure.config import InfrastructureSettings, settings as default_settings
from infrastructure.constants import IMAGE_URI_PARAMETER_NAME

logger = logging.getLogger(__name__)

# Local artifacts that must not end up in the build context
IMAGE_EXCLUDES = [
    "cdk.out",
    "tests",
    ".venv",
    "venv",
    ".env",
    "**/__pycache__",
    "**/.pytest_cache",
]


class EcrStack(cdk.Stack):
    """Stack owning the container image of the service.

    The image URI is written to the parameter store under
    ``IMAGE_URI_PARAMETER_NAME`` so that the compute stack can resolve it at
    deploy time instead of holding a reference to the asset.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: Optional[InfrastructureSettings] = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.settings = settings or default_settings

        self.image = self._create_image_asset()
        self.repository: ecr.IRepository = self.image.repository
        self.image_uri_parameter = self._publish_image_uri()

    def _create_image_asset(self) -> DockerImageAsset:
        """Build the service image from the application directory."""
        directory = str(self.settings.app_code_dir)
        logger.info("Building service image from %s", directory)
        return DockerImageAsset(
            self,
            "CDKDockerImage",
            directory=directory,
            platform=Platform.LINUX_AMD64,
            exclude=IMAGE_EXCLUDES,
        )

    def _publish_image_uri(self) -> ssm.StringParameter:
        """Store the image URI in SSM for cross-stack lookup."""
        return ssm.StringParameter(
            self,
            "EcrRepoUrlParameter",
            parameter_name=IMAGE_URI_PARAMETER_NAME,
            string_value=self.image.image_uri,
            description="The URL of the ECR repository",
        )
