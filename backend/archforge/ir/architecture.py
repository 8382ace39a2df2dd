from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ---- Enumerations ----

class ScaleTier(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ArchitectureStyle(str, Enum):
    MONOLITH = "Modular Monolith"
    MICROSERVICES = "Microservices"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ServiceCategory(str, Enum):
    APPLICATION = "application"
    AI_ANALYTICS = "ai-analytics"
    OBSERVABILITY = "observability"


class ServiceRole(str, Enum):
    SERVICE = "service"
    ENTRY = "entry"                      # represented by the api / gw entry node
    REALTIME_GATEWAY = "realtime-gateway"
    ALERTING = "alerting"                # fed by pub/sub, never writes to the db
    PIPELINE = "pipeline"
    EDGE_PROTECTION = "edge-protection"


NO_CACHE = "None"


# ---- Inputs ----

class ArchitectureRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_name: str
    scale: ScaleTier
    description: str


class FeatureFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    realtime: bool = False
    heavy_data: bool = False
    alerts: bool = False


# ---- Architecture Model ----

class ServiceNode(BaseModel):
    id: str
    name: str
    category: ServiceCategory = ServiceCategory.APPLICATION
    role: ServiceRole = ServiceRole.SERVICE


class CostBreakdown(BaseModel):
    compute: int = Field(default=0, ge=0)
    database: int = Field(default=0, ge=0)
    network: int = Field(default=0, ge=0)

    def plus(self, other: "CostBreakdown") -> "CostBreakdown":
        return CostBreakdown(
            compute=self.compute + other.compute,
            database=self.database + other.database,
            network=self.network + other.network,
        )


class ArchitectureModel(BaseModel):
    project_name: str = ""
    style: ArchitectureStyle
    services: List[ServiceNode]
    database: str
    cache: str = NO_CACHE
    scaling_strategy: str = ""
    cost_breakdown: CostBreakdown = Field(default_factory=CostBreakdown)
    risk: RiskLevel = RiskLevel.LOW
    score: int = Field(default=0, ge=0, le=100)

    @computed_field
    @property
    def total_cost(self) -> int:
        c = self.cost_breakdown
        return c.compute + c.database + c.network

    @property
    def has_cache(self) -> bool:
        return self.cache != NO_CACHE

    @property
    def is_microservices(self) -> bool:
        return self.style == ArchitectureStyle.MICROSERVICES

    def services_with(self, category: ServiceCategory) -> List[ServiceNode]:
        return [s for s in self.services if s.category == category]

    def has_role(self, role: ServiceRole) -> bool:
        return any(s.role == role for s in self.services)
