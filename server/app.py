#!/usr/bin/env python3
"""CDK App entry point for the ECS Fargate service infrastructure."""

import logging

import aws_cdk as cdk

from infrastructure import create_stacks

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = cdk.App()

create_stacks(app)

app.synth()
