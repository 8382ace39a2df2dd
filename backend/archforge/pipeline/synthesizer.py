"""
Topology Synthesizer - (scale tier, feature flags) -> ArchitectureModel

Each tier is a TierTemplate (data, not control flow). Feature flags only
ever append services and add cost; the observability service is appended last.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from archforge.ir.architecture import (
    NO_CACHE,
    ArchitectureModel,
    ArchitectureStyle,
    CostBreakdown,
    FeatureFlags,
    RiskLevel,
    ScaleTier,
    ServiceCategory,
    ServiceNode,
    ServiceRole,
)
from archforge.ir.validation import ValidationResult
from archforge.pipeline.stage import PipelineStage


# (name, category, role)
ServiceSpec = Tuple[str, ServiceCategory, ServiceRole]

APP = ServiceCategory.APPLICATION
AI = ServiceCategory.AI_ANALYTICS

OBSERVABILITY_SERVICE: ServiceSpec = (
    "Metrics & Logs (Prometheus/Grafana)",
    ServiceCategory.OBSERVABILITY,
    ServiceRole.SERVICE,
)


@dataclass(frozen=True)
class TierTemplate:
    style: ArchitectureStyle
    services: List[ServiceSpec]
    database: str
    cache: str
    scaling_strategy: str
    cost: CostBreakdown
    risk: RiskLevel
    score: int

    # heavyData
    heavy_data_cost: CostBreakdown = field(default_factory=CostBreakdown)
    heavy_data_services: List[ServiceSpec] = field(default_factory=list)

    # realtime
    realtime_service: Optional[ServiceSpec] = None
    realtime_cost: CostBreakdown = field(default_factory=CostBreakdown)
    realtime_cache: Optional[str] = None  # None keeps the base cache

    # alerts
    alert_services: List[ServiceSpec] = field(default_factory=list)


# ============================================================
# TIER TABLE
# ============================================================

TIER_TEMPLATES: Dict[ScaleTier, TierTemplate] = {
    ScaleTier.SMALL: TierTemplate(
        style=ArchitectureStyle.MONOLITH,
        services=[
            ("Web Server (Next.js)", APP, ServiceRole.SERVICE),
            ("Core API Module", APP, ServiceRole.ENTRY),
        ],
        database="PostgreSQL (Relational)",
        cache=NO_CACHE,
        scaling_strategy="Vertical scaling of primary server. Basic load balancing.",
        cost=CostBreakdown(compute=20, database=10, network=5),
        risk=RiskLevel.LOW,
        score=85,
        heavy_data_cost=CostBreakdown(database=40),
        realtime_service=("WebSocket Gateway", APP, ServiceRole.REALTIME_GATEWAY),
        realtime_cost=CostBreakdown(compute=10, network=10),
        alert_services=[
            ("Basic Alert Cronjob", APP, ServiceRole.ALERTING),
        ],
    ),
    ScaleTier.MEDIUM: TierTemplate(
        style=ArchitectureStyle.MONOLITH,
        services=[
            ("Web Server (Next.js)", APP, ServiceRole.SERVICE),
            ("Core API Module", APP, ServiceRole.ENTRY),
            ("Background Worker", APP, ServiceRole.SERVICE),
        ],
        database="PostgreSQL (Primary) + Read Replica",
        cache="Redis (Cache)",
        scaling_strategy="Horizontal scaling behind Load Balancer. Asynchronous task queues.",
        cost=CostBreakdown(compute=80, database=50, network=20),
        risk=RiskLevel.MEDIUM,
        score=90,
        heavy_data_cost=CostBreakdown(database=100),
        realtime_service=("Realtime Gateway (SSE/WS)", APP, ServiceRole.REALTIME_GATEWAY),
        realtime_cost=CostBreakdown(compute=30, network=50),
        realtime_cache="Redis (Cache + Pub/Sub)",
        alert_services=[
            ("Alert Engine (Rule Processor)", APP, ServiceRole.ALERTING),
            ("Notification Dispatcher", APP, ServiceRole.ALERTING),
        ],
    ),
    ScaleTier.LARGE: TierTemplate(
        style=ArchitectureStyle.MICROSERVICES,
        services=[
            ("API Gateway", APP, ServiceRole.ENTRY),
            ("Auth Service", APP, ServiceRole.SERVICE),
            ("User Service", APP, ServiceRole.SERVICE),
        ],
        database="PostgreSQL (Cluster) + Document DB",
        cache="Redis Cluster",
        scaling_strategy=(
            "Kubernetes auto-scaling. Domain-driven micro-databases "
            "with event sourcing architecture."
        ),
        cost=CostBreakdown(compute=300, database=300, network=200),
        risk=RiskLevel.HIGH,
        score=95,
        heavy_data_cost=CostBreakdown(compute=100, database=300),
        heavy_data_services=[
            ("Data Pipeline (Kafka)", AI, ServiceRole.PIPELINE),
            ("Analytics Engine", AI, ServiceRole.SERVICE),
        ],
        realtime_service=("Realtime Gateway (WS)", APP, ServiceRole.REALTIME_GATEWAY),
        realtime_cost=CostBreakdown(compute=50, network=150),
        realtime_cache="Redis Cluster (Pub/Sub + Edge Caching)",
        alert_services=[
            ("Alert Engine Microservice", APP, ServiceRole.ALERTING),
            ("Notification Dispatcher", APP, ServiceRole.ALERTING),
        ],
    ),
}


def synthesize(
    scale: ScaleTier,
    flags: FeatureFlags,
    project_name: str = "",
) -> ArchitectureModel:
    template = TIER_TEMPLATES[ScaleTier(scale)]

    specs: List[ServiceSpec] = list(template.services)
    cost = template.cost
    cache = template.cache

    if flags.heavy_data:
        specs.extend(template.heavy_data_services)
        cost = cost.plus(template.heavy_data_cost)

    if flags.realtime:
        if template.realtime_service:
            specs.append(template.realtime_service)
        cost = cost.plus(template.realtime_cost)
        if template.realtime_cache:
            cache = template.realtime_cache

    if flags.alerts:
        specs.extend(template.alert_services)

    specs.append(OBSERVABILITY_SERVICE)

    services = [
        ServiceNode(id=f"srv{i}", name=name, category=category, role=role)
        for i, (name, category, role) in enumerate(specs)
    ]

    return ArchitectureModel(
        project_name=project_name,
        style=template.style,
        services=services,
        database=template.database,
        cache=cache,
        scaling_strategy=template.scaling_strategy,
        cost_breakdown=cost,
        risk=template.risk,
        score=template.score,
    )


class SynthesisStage(PipelineStage):
    name = "synthesis"

    def run(self, context):
        context.model = synthesize(
            context.request.scale,
            context.flags,
            project_name=context.request.project_name,
        )
        return ValidationResult.success()
