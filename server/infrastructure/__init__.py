"""CDK stacks deploying the service to ECS Fargate."""

from infrastructure.composition import Stacks, create_stacks
from infrastructure.ecr_stack import EcrStack
from infrastructure.ecs_stack import EcsStack
from infrastructure.vpc_stack import VpcStack

__all__ = ["EcrStack", "EcsStack", "Stacks", "VpcStack", "create_stacks"]
