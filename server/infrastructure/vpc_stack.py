"""Network stack: VPC with public, private and isolated subnet tiers."""

import logging
from typing import Optional

import aws_cdk as cdk
from aws_cdk import aws_ec2 as ec2
from constructs import Construct

from infrastructure.config import InfrastructureSettings, settings as default_settings
from infrastructure.constants import (
    ENV_CONTEXT_KEY,
    MAX_AZS,
    PRODUCTION_ENV,
    SUBNET_CIDR_MASK,
)

logger = logging.getLogger(__name__)


class VpcStack(cdk.Stack):
    """VPC shared by the registry and compute stacks.

    The NAT strategy is the only thing that varies by environment: production
    gets managed NAT gateways, anything else a single NAT instance.
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
        self.deploy_env = self.node.try_get_context(ENV_CONTEXT_KEY) or self.settings.env
        self.is_production = self.deploy_env == PRODUCTION_ENV

        self.vpc = self._create_vpc()

    def _create_vpc(self) -> ec2.Vpc:
        """Create the VPC with three /24 subnet tiers."""
        if self.is_production:
            logger.info("Environment '%s': using managed NAT gateways", self.deploy_env)
            nat_provider = ec2.NatProvider.gateway()
            nat_gateways = None
        else:
            logger.info(
                "Environment '%s': using a single %s NAT instance",
                self.deploy_env,
                self.settings.nat_instance_type,
            )
            nat_provider = ec2.NatProvider.instance_v2(
                instance_type=ec2.InstanceType(self.settings.nat_instance_type),
            )
            nat_gateways = 1

        return ec2.Vpc(
            self,
            "VPC",
            max_azs=MAX_AZS,
            nat_gateway_provider=nat_provider,
            nat_gateways=nat_gateways,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    subnet_type=ec2.SubnetType.PUBLIC,
                    name="Public",
                    cidr_mask=SUBNET_CIDR_MASK,
                ),
                ec2.SubnetConfiguration(
                    subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS,
                    name="Private",
                    cidr_mask=SUBNET_CIDR_MASK,
                ),
                ec2.SubnetConfiguration(
                    subnet_type=ec2.SubnetType.PRIVATE_ISOLATED,
                    name="Isolated",
                    cidr_mask=SUBNET_CIDR_MASK,
                ),
            ],
        )
