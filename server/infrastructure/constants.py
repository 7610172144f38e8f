"""Fixed values shared by the composition units.

These are part of the deployment contract (ports, parameter key, task shape,
secret shape, health check) and are not meant to vary per environment.
"""

# CDK context
ENV_CONTEXT_KEY = "env"
PRODUCTION_ENV = "prod"

# Network
MAX_AZS = 3
SUBNET_CIDR_MASK = 24

# Parameter store handoff between the registry and compute units
IMAGE_URI_PARAMETER_NAME = "/ecr/repo-url"

# Ports
CONTAINER_PORT = 3000
LISTENER_PORT = 80
DATABASE_PORT = 3306

# Fargate task shape (0.25 vCPU / 512 MiB)
TASK_CPU = 256
TASK_MEMORY_MIB = 512
CONTAINER_NAME = "web"
DESIRED_TASK_COUNT = 1

# Generated database credentials
DATABASE_USERNAME = "admin"
SECRET_PASSWORD_KEY = "password"
SECRET_EXCLUDE_CHARACTERS = "/@\"'\\"

# Load balancer health check
HEALTH_CHECK_PATH = "/"
HEALTH_CHECK_INTERVAL_SECONDS = 30
HEALTH_CHECK_TIMEOUT_SECONDS = 5
HEALTHY_HTTP_CODES = "200-299"

# Actions the task execution role needs to pull from ECR
ECR_PULL_ACTIONS = [
    "ecr:GetDownloadUrlForLayer",
    "ecr:BatchGetImage",
    "ecr:BatchCheckLayerAvailability",
    "ecr:GetAuthorizationToken",
]
