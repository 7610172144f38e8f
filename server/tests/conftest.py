"""Pytest configuration and fixtures.

This module configures pytest to properly resolve imports from the src and
infrastructure packages, and provides the fixtures shared by the CDK stack
tests.
"""

import sys
from pathlib import Path

import pytest

# Add the server directory to Python path so src.* and infrastructure.*
# imports work without installing the project
server_dir = Path(__file__).parent.parent
if str(server_dir) not in sys.path:
    sys.path.insert(0, str(server_dir))

import aws_cdk as cdk  # noqa: E402

from infrastructure.config import InfrastructureSettings  # noqa: E402


@pytest.fixture
def app_code_dir(tmp_path):
    """Create a minimal Docker build context."""
    (tmp_path / "Dockerfile").write_text("FROM public.ecr.aws/docker/library/python:3.12-slim\n")
    return tmp_path


@pytest.fixture
def infra_settings(app_code_dir):
    """Infrastructure settings isolated from any .env file."""
    return InfrastructureSettings(_env_file=None, env="dev", app_code_dir=app_code_dir)


@pytest.fixture
def dev_app():
    """CDK app without an environment context."""
    return cdk.App()


@pytest.fixture
def prod_app():
    """CDK app deployed with ``-c env=prod``."""
    return cdk.App(context={"env": "prod"})
