"""Compute stack for the containerised service.

This stack creates everything needed to run the service on ECS Fargate
behind an Application Load Balancer and an API Gateway, including:
- RDS MySQL instance in the isolated subnets with generated credentials
- Secrets Manager secret holding the database credentials
- Application Load Balancer in the public subnets
- ECS cluster, task execution role, task definition and Fargate service
- Security groups restricting database access to the service
- API Gateway REST API proxying to the load balancer
"""

import json
import logging
from typing import Optional

import aws_cdk as cdk
from aws_cdk import (
    aws_apigateway as apigateway,
    aws_ec2 as ec2,
    aws_ecr as ecr,
    aws_ecs as ecs,
    aws_elasticloadbalancingv2 as elbv2,
    aws_iam as iam,
    aws_logs as logs,
    aws_rds as rds,
    aws_secretsmanager as secretsmanager,
    aws_ssm as ssm,
)
from constructs import Construct

from infrastructure.config import InfrastructureSettings, settings as default_settings
from infrastructure.constants import (
    CONTAINER_NAME,
    CONTAINER_PORT,
    DATABASE_PORT,
    DATABASE_USERNAME,
    DESIRED_TASK_COUNT,
    ECR_PULL_ACTIONS,
    HEALTH_CHECK_INTERVAL_SECONDS,
    HEALTH_CHECK_PATH,
    HEALTH_CHECK_TIMEOUT_SECONDS,
    HEALTHY_HTTP_CODES,
    IMAGE_URI_PARAMETER_NAME,
    LISTENER_PORT,
    SECRET_EXCLUDE_CHARACTERS,
    SECRET_PASSWORD_KEY,
    TASK_CPU,
    TASK_MEMORY_MIB,
)

logger = logging.getLogger(__name__)


class EcsStack(cdk.Stack):
    """Stack running the service on Fargate.

    Args:
        scope: Parent construct.
        construct_id: Stack identifier.
        vpc: VPC from the network stack.
        repository: Image repository from the registry stack. The image
            itself is resolved from the parameter store at deploy time.
        settings: Optional settings override, defaults to the module singleton.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.IVpc,
        repository: Optional[ecr.IRepository] = None,
        settings: Optional[InfrastructureSettings] = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.vpc = vpc
        self.repository = repository
        self.settings = settings or default_settings

        self.rds_security_group = self._create_rds_security_group()
        self.rds_secret = self._create_rds_secret()
        self.database = self._create_rds_database()
        self.load_balancer = self._create_application_load_balancer()
        self.cluster = ecs.Cluster(self, "Cluster", vpc=self.vpc)
        self.task_execution_role = self._create_task_execution_role()
        self.log_group = self._create_log_group()
        self.task_definition, self.container = self._create_task_definition()
        self.ecs_security_group = self._create_ecs_security_group()
        self.service = self._create_fargate_service()
        self.listener = self._attach_service_to_load_balancer()
        self.api = self._create_api_gateway()
        self._create_outputs()

        logger.info(
            "Service '%s' listens on %d behind load balancer port %d",
            CONTAINER_NAME,
            CONTAINER_PORT,
            LISTENER_PORT,
        )

    def _create_rds_security_group(self) -> ec2.SecurityGroup:
        """Create the security group guarding the database."""
        return ec2.SecurityGroup(
            self,
            "RdsSG",
            vpc=self.vpc,
            description="Security group for RDS MySQL",
        )

    def _create_rds_secret(self) -> secretsmanager.Secret:
        """Create the secret holding the generated database credentials."""
        return secretsmanager.Secret(
            self,
            "RdsSecret",
            generate_secret_string=secretsmanager.SecretStringGenerator(
                secret_string_template=json.dumps({"username": DATABASE_USERNAME}),
                generate_string_key=SECRET_PASSWORD_KEY,
                exclude_characters=SECRET_EXCLUDE_CHARACTERS,
            ),
        )

    def _create_rds_database(self) -> rds.DatabaseInstance:
        """Create the MySQL instance in the isolated subnets."""
        return rds.DatabaseInstance(
            self,
            "RdsInstance",
            engine=rds.DatabaseInstanceEngine.mysql(
                version=rds.MysqlEngineVersion.of(
                    self.settings.mysql_full_version,
                    self.settings.mysql_major_version,
                )
            ),
            vpc=self.vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_ISOLATED),
            security_groups=[self.rds_security_group],
            credentials=rds.Credentials.from_secret(self.rds_secret),
            database_name=self.settings.database_name,
            allocated_storage=self.settings.database_allocated_storage,
            max_allocated_storage=self.settings.database_max_allocated_storage,
            instance_type=ec2.InstanceType.of(ec2.InstanceClass.T3, ec2.InstanceSize.MICRO),
        )

    def _create_application_load_balancer(self) -> elbv2.ApplicationLoadBalancer:
        """Create the internet-facing load balancer in the public subnets."""
        return elbv2.ApplicationLoadBalancer(
            self,
            "Alb",
            vpc=self.vpc,
            internet_facing=True,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
        )

    def _create_task_execution_role(self) -> iam.Role:
        """Create the role ECS uses to pull the image and start the task."""
        role = iam.Role(
            self,
            "TaskExecutionRole",
            assumed_by=iam.ServicePrincipal("ecs-tasks.amazonaws.com"),
        )

        # The image lives in the CDK asset repository, not a repository we own
        role.add_to_policy(
            iam.PolicyStatement(
                actions=ECR_PULL_ACTIONS,
                resources=["*"],
            )
        )

        return role

    def _create_log_group(self) -> logs.LogGroup:
        """Create the CloudWatch log group for the service container."""
        return logs.LogGroup(
            self,
            "LogGroup",
            retention=logs.RetentionDays.ONE_WEEK,
            removal_policy=cdk.RemovalPolicy.DESTROY,
        )

    def _create_task_definition(
        self,
    ) -> tuple[ecs.FargateTaskDefinition, ecs.ContainerDefinition]:
        """Create the task definition and its single container."""
        task_definition = ecs.FargateTaskDefinition(
            self,
            "TaskDef",
            cpu=TASK_CPU,
            memory_limit_mib=TASK_MEMORY_MIB,
            execution_role=self.task_execution_role,
        )

        # Resolved by CloudFormation at deploy time, not by the registry stack
        repo_url = ssm.StringParameter.value_for_string_parameter(
            self, IMAGE_URI_PARAMETER_NAME
        )

        container = task_definition.add_container(
            CONTAINER_NAME,
            image=ecs.ContainerImage.from_registry(repo_url),
            logging=ecs.LogDriver.aws_logs(
                stream_prefix=self.settings.log_stream_prefix,
                log_group=self.log_group,
            ),
            environment={
                "RDS_ENDPOINT": self.database.db_instance_endpoint_address,
            },
            secrets={
                "RDS_USERNAME": ecs.Secret.from_secrets_manager(self.rds_secret, "username"),
                "RDS_PASSWORD": ecs.Secret.from_secrets_manager(
                    self.rds_secret, SECRET_PASSWORD_KEY
                ),
            },
        )

        container.add_port_mappings(
            ecs.PortMapping(
                container_port=CONTAINER_PORT,
                protocol=ecs.Protocol.TCP,
            )
        )

        return task_definition, container

    def _create_ecs_security_group(self) -> ec2.SecurityGroup:
        """Create the service security group and open the database port to it."""
        ecs_security_group = ec2.SecurityGroup(
            self,
            "ECSSecurityGroup",
            vpc=self.vpc,
            description="Security group for ECS tasks",
        )

        self.rds_security_group.add_ingress_rule(
            ecs_security_group,
            ec2.Port.tcp(DATABASE_PORT),
            "Allow traffic from ECS",
        )

        return ecs_security_group

    def _create_fargate_service(self) -> ecs.FargateService:
        """Create the Fargate service with automatic rollback on failed deployments."""
        return ecs.FargateService(
            self,
            "Service",
            cluster=self.cluster,
            task_definition=self.task_definition,
            desired_count=DESIRED_TASK_COUNT,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS),
            security_groups=[self.ecs_security_group],
            circuit_breaker=ecs.DeploymentCircuitBreaker(rollback=True),
        )

    def _attach_service_to_load_balancer(self) -> elbv2.ApplicationListener:
        """Expose the service through the load balancer with a health check."""
        listener = self.load_balancer.add_listener(
            "Listener",
            port=LISTENER_PORT,
            open=True,
        )

        listener.add_targets(
            "ECS",
            port=LISTENER_PORT,
            targets=[
                self.service.load_balancer_target(
                    container_name=CONTAINER_NAME,
                    container_port=CONTAINER_PORT,
                )
            ],
            health_check=elbv2.HealthCheck(
                path=HEALTH_CHECK_PATH,
                interval=cdk.Duration.seconds(HEALTH_CHECK_INTERVAL_SECONDS),
                timeout=cdk.Duration.seconds(HEALTH_CHECK_TIMEOUT_SECONDS),
                healthy_http_codes=HEALTHY_HTTP_CODES,
            ),
        )

        return listener

    def _create_api_gateway(self) -> apigateway.RestApi:
        """Create a REST API proxying every method and path to the load balancer."""
        api = apigateway.RestApi(
            self,
            "ApiGateway",
            rest_api_name="Service API",
            description="API Gateway on top of ALB",
        )

        alb_url = f"http://{self.load_balancer.load_balancer_dns_name}"

        api.root.add_method(
            "ANY",
            apigateway.Integration(
                type=apigateway.IntegrationType.HTTP_PROXY,
                uri=alb_url,
                integration_http_method="ANY",
            ),
        )

        # Greedy path so that nested paths reach the service too
        proxy = api.root.add_resource("{proxy+}")
        proxy.add_method(
            "ANY",
            apigateway.Integration(
                type=apigateway.IntegrationType.HTTP_PROXY,
                uri=f"{alb_url}/{{proxy}}",
                integration_http_method="ANY",
                options=apigateway.IntegrationOptions(
                    request_parameters={
                        "integration.request.path.proxy": "method.request.path.proxy",
                    },
                ),
            ),
            request_parameters={"method.request.path.proxy": True},
        )

        return api

    def _create_outputs(self) -> None:
        """Publish the public endpoints of the service."""
        cdk.CfnOutput(
            self,
            "LoadBalancerDNS",
            value=self.load_balancer.load_balancer_dns_name,
            description="Application Load Balancer DNS name",
        )

        cdk.CfnOutput(
            self,
            "ApiGatewayURL",
            value=self.api.url,
            description="API Gateway endpoint URL",
        )