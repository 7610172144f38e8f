"""Wiring of the network, registry and compute stacks into one CDK app."""

import logging
from typing import NamedTuple, Optional

import aws_cdk as cdk

from infrastructure.config import InfrastructureSettings, settings as default_settings
from infrastructure.ecr_stack import EcrStack
from infrastructure.ecs_stack import EcsStack
from infrastructure.vpc_stack import VpcStack

logger = logging.getLogger(__name__)


class Stacks(NamedTuple):
    """The three stacks of the deployment, in deploy order."""

    vpc: VpcStack
    ecr: EcrStack
    ecs: EcsStack


def resolve_environment(
    app: cdk.App, settings: InfrastructureSettings
) -> cdk.Environment:
    """Build the stack environment from context, falling back to settings."""
    return cdk.Environment(
        account=app.node.try_get_context("account") or settings.account,
        region=app.node.try_get_context("region") or settings.region,
    )


def create_stacks(
    app: cdk.App, settings: Optional[InfrastructureSettings] = None
) -> Stacks:
    """Add the network, registry and compute stacks to ``app``.

    Args:
        app: CDK app to add the stacks to.
        settings: Optional settings override, defaults to the module singleton.

    Returns:
        The created stacks.
    """
    settings = settings or default_settings
    env = resolve_environment(app, settings)

    vpc_stack = VpcStack(app, "VpcStack", settings=settings, env=env)
    ecr_stack = EcrStack(app, "EcrStack", settings=settings, env=env)
    ecs_stack = EcsStack(
        app,
        "EcsStack",
        vpc=vpc_stack.vpc,
        repository=ecr_stack.repository,
        settings=settings,
        env=env,
    )

    # The image URI is looked up by parameter name, which CDK cannot see as a
    # reference, so the registry stack must be ordered explicitly.
    ecs_stack.add_stack_dependency(ecr_stack)

    logger.info(
        "Composed stacks %s -> %s -> %s",
        vpc_stack.stack_name,
        ecr_stack.stack_name,
        ecs_stack.stack_name,
    )

    return Stacks(vpc=vpc_stack, ecr=ecr_stack, ecs=ecs_stack)
