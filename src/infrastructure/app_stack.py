"""Deployment topology for the API: VPC, ECS Fargate service, ALB, TLS and DNS."""

from pathlib import Path

from aws_cdk import (
    CfnOutput,
    Duration,
    Stack,
    aws_certificatemanager as acm,
    aws_ec2 as ec2,
    aws_ecs as ecs,
    aws_elasticloadbalancingv2 as elbv2,
    aws_route53 as route53,
    aws_route53_targets as targets,
    aws_secretsmanager as secretsmanager,
)
from constructs import Construct

# app_stack.py is at <root>/src/infrastructure/app_stack.py
PROJECT_ROOT = Path(__file__).parent.parent.parent

DEFAULT_CONTAINER_PORT = 8000
HEALTH_CHECK_PATH = "/health"
MONGODB_SECRET_NAME = "mongodb-uri"
JWT_SECRET_NAME = "jwt-secret-key"


class AppStack(Stack):
    """Declares the runtime environment of the API.

    Args:
        domain_name: public hostname, e.g. app.example.com
        zone_name: hosted zone holding domain_name, e.g. example.com
        hosted_zone_id: use this zone instead of looking zone_name up
        container_port: port the API listens on inside the container
        image: container image, built from the repository Dockerfile by default
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        domain_name: str,
        zone_name: str,
        hosted_zone_id: str | None = None,
        container_port: int = DEFAULT_CONTAINER_PORT,
        desired_count: int = 2,
        image: ecs.ContainerImage | None = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # ── network ──────────────────────────────────────────

        vpc = ec2.Vpc(
            self, "AppVPC",
            max_azs=2,
            nat_gateways=1,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name="Public",
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=24,
                ),
                ec2.SubnetConfiguration(
                    name="Private",
                    subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS,
                    cidr_mask=24,
                ),
            ],
        )

        cluster = ecs.Cluster(
            self, "AppCluster",
            vpc=vpc,
            container_insights_v2=ecs.ContainerInsights.ENABLED,
        )

        # ── DNS and TLS ──────────────────────────────────────

        if hosted_zone_id:
            zone = route53.HostedZone.from_hosted_zone_attributes(
                self, "AppZone", hosted_zone_id=hosted_zone_id, zone_name=zone_name,
            )
        else:
            zone = route53.HostedZone.from_lookup(self, "AppZone", domain_name=zone_name)

        certificate = acm.Certificate(
            self, "AppCert",
            domain_name=domain_name,
            validation=acm.CertificateValidation.from_dns(zone),
        )

        # ── load balancer ────────────────────────────────────

        lb = elbv2.ApplicationLoadBalancer(
            self, "AppLB",
            vpc=vpc,
            internet_facing=True,
        )
        listener = lb.add_listener(
            "HttpsListener",
            port=443,
            protocol=elbv2.ApplicationProtocol.HTTPS,
            certificates=[certificate],
        )
        lb.add_redirect(source_port=80, target_port=443)

        # ── service ──────────────────────────────────────────

        task_definition = ecs.FargateTaskDefinition(
            self, "AppTask",
            memory_limit_mib=512,
            cpu=256,
        )

        mongodb_secret = secretsmanager.Secret.from_secret_name_v2(self, "MongoDbUri", MONGODB_SECRET_NAME)
        jwt_secret = secretsmanager.Secret.from_secret_name_v2(self, "JwtSecretKey", JWT_SECRET_NAME)

        task_definition.add_container(
            "AppContainer",
            image=image or ecs.ContainerImage.from_asset(str(PROJECT_ROOT)),
            environment={
                "PORT": str(container_port),
                "CORS_ORIGINS": f"https://{domain_name}",
            },
            secrets={
                "MONGO_URL": ecs.Secret.from_secrets_manager(mongodb_secret),
                "JWT_SECRET_KEY": ecs.Secret.from_secrets_manager(jwt_secret),
            },
            logging=ecs.LogDriver.aws_logs(stream_prefix="app"),
            port_mappings=[
                ecs.PortMapping(container_port=container_port, protocol=ecs.Protocol.TCP),
            ],
        )

        service_sg = ec2.SecurityGroup(
            self, "AppServiceSG",
            vpc=vpc,
            description="Security group for App Fargate Service",
            allow_all_outbound=True,
        )

        service = ecs.FargateService(
            self, "AppService",
            cluster=cluster,
            task_definition=task_definition,
            desired_count=desired_count,
            assign_public_ip=False,
            security_groups=[service_sg],
        )

        # Registering the service as a target opens the service SG to the ALB only
        listener.add_targets(
            "AppTG",
            port=container_port,
            protocol=elbv2.ApplicationProtocol.HTTP,
            targets=[service],
            health_check=elbv2.HealthCheck(
                path=HEALTH_CHECK_PATH,
                timeout=Duration.seconds(5),
                interval=Duration.seconds(30),
            ),
        )

        route53.ARecord(
            self, "AppDNS",
            zone=zone,
            record_name=domain_name,
            target=route53.RecordTarget.from_alias(targets.LoadBalancerTarget(lb)),
        )

        CfnOutput(self, "LoadBalancerDNS", value=lb.load_balancer_dns_name)
