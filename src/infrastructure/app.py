"""CDK app entry point (see cdk.json)."""

import os
import sys
from pathlib import Path

import aws_cdk as cdk

# app.py is at <root>/src/infrastructure/app.py, src is one level up
sys.path.insert(0, str(Path(__file__).parent.parent))

from infrastructure.app_stack import AppStack, DEFAULT_CONTAINER_PORT

app = cdk.App()

AppStack(
    app, "UserDashboardStack",
    domain_name=app.node.try_get_context("domain_name") or "app.example.com",
    zone_name=app.node.try_get_context("zone_name") or "example.com",
    hosted_zone_id=app.node.try_get_context("hosted_zone_id"),
    container_port=int(app.node.try_get_context("container_port") or DEFAULT_CONTAINER_PORT),
    env=cdk.Environment(
        account=os.getenv("CDK_DEFAULT_ACCOUNT"),
        region=os.getenv("CDK_DEFAULT_REGION"),
    ),
)

app.synth()
