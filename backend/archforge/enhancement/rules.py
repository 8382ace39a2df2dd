"""
Enhancement Rules - Ordered catalog of cross-cutting improvements

Each rule has a precondition ("is the concern already covered?") and a
structural patch over the model and its DiagramDocument. Patches never
touch rendered text.
"""

from dataclasses import dataclass
from typing import Callable, List

from archforge.ir.architecture import (
    NO_CACHE,
    ArchitectureModel,
    ServiceCategory,
    ServiceNode,
    ServiceRole,
)
from archforge.ir.diagram import (
    DiagramDocument,
    DiagramEdge,
    DiagramNode,
    LayerKind,
    NodeShape,
)
from archforge.pipeline.compiler import (
    CACHE_ID,
    CLIENT_ID,
    EDGE_GUARD_ID,
    LOAD_BALANCER_ID,
    entry_node_id,
    new_layer,
)


WAF_SERVICE_NAME = "WAF & Rate Limiter (Cloudflare)"

BASIC_CACHE = "Redis (Cache)"
CLUSTER_CACHE = "Redis Cluster (Distributed)"
SESSION_CACHE = "Redis (Cache + Session Store)"

SINGLE_DATABASE = "PostgreSQL (Relational)"
REPLICATED_DATABASE = "PostgreSQL (Primary) + Read Replica"

MULTI_ZONE_MARKER = "multi-az"
MULTI_ZONE_CLAUSE = "Deployed across Multi-AZ zones for high availability."


@dataclass(frozen=True)
class EnhancementRule:
    id: str
    precondition_met: Callable[[ArchitectureModel, DiagramDocument], bool]
    apply: Callable[[ArchitectureModel, DiagramDocument], str]  # returns the description
    rationale: str


# ============================================================
# HELPERS
# ============================================================

def _next_service_id(model: ArchitectureModel) -> str:
    taken = {s.id for s in model.services}
    index = len(model.services)
    while f"srv{index}" in taken:
        index += 1
    return f"srv{index}"


def _ensure_layer(diagram: DiagramDocument, kind: LayerKind, after: LayerKind):
    layer = diagram.layer(kind)
    if layer is not None:
        return layer

    layer = new_layer(kind)
    anchor = diagram.layer(after)
    position = diagram.layers.index(anchor) + 1 if anchor is not None else len(diagram.layers)
    diagram.layers.insert(position, layer)
    return layer


# ============================================================
# 1. EDGE PROTECTION
# ============================================================

def _has_edge_guard(model, diagram) -> bool:
    if model.has_role(ServiceRole.EDGE_PROTECTION):
        return True
    if any("waf" in s.name.lower() for s in model.services):
        return True
    return diagram.find_node(EDGE_GUARD_ID) is not None


def _add_edge_guard(model, diagram) -> str:
    model.services.append(
        ServiceNode(
            id=_next_service_id(model),
            name=WAF_SERVICE_NAME,
            category=ServiceCategory.APPLICATION,
            role=ServiceRole.EDGE_PROTECTION,
        )
    )

    app_layer = _ensure_layer(diagram, LayerKind.APPLICATION, after=LayerKind.CLIENT)
    app_layer.nodes.insert(0, DiagramNode(id=EDGE_GUARD_ID, label=WAF_SERVICE_NAME))

    # Re-route the client through the WAF
    inbound = DiagramEdge(source=CLIENT_ID, target=EDGE_GUARD_ID)
    outbound = DiagramEdge(source=EDGE_GUARD_ID, target=LOAD_BALANCER_ID)
    for i, edge in enumerate(diagram.edges):
        if edge.source == CLIENT_ID and edge.target == LOAD_BALANCER_ID:
            diagram.edges[i:i + 1] = [inbound, outbound]
            break
    else:
        diagram.edges.insert(0, outbound)
        diagram.edges.insert(0, inbound)

    return "Added Web Application Firewall (WAF) & Rate Limiting"


# ============================================================
# 2. CACHE TIER
# ============================================================

def _has_rich_cache(model, diagram) -> bool:
    return model.cache not in (NO_CACHE, BASIC_CACHE)


def _upgrade_cache(model, diagram) -> str:
    old_cache = model.cache
    new_cache = CLUSTER_CACHE if model.is_microservices else SESSION_CACHE
    model.cache = new_cache

    relabeled = diagram.relabel(old_cache, new_cache) if old_cache != NO_CACHE else 0
    existing = diagram.find_node(CACHE_ID)

    if existing is not None and not relabeled:
        existing.label = new_cache
    elif existing is None and not relabeled:
        data_layer = _ensure_layer(diagram, LayerKind.DATA, after=LayerKind.APPLICATION)
        data_layer.nodes.append(
            DiagramNode(id=CACHE_ID, label=new_cache, shape=NodeShape.DECISION)
        )
        entry = entry_node_id(model)
        if not diagram.has_edge(entry, CACHE_ID):
            diagram.edges.append(DiagramEdge(source=entry, target=CACHE_ID))

    return f"Upgraded Cache to {new_cache}"


# ============================================================
# 3. REDUNDANCY
# ============================================================

def _is_multi_zone(model, diagram) -> bool:
    return MULTI_ZONE_MARKER in model.scaling_strategy.lower()


def _add_multi_zone(model, diagram) -> str:
    strategy = model.scaling_strategy.strip()
    if strategy and not strategy.endswith("."):
        strategy += "."
    model.scaling_strategy = f"{strategy} {MULTI_ZONE_CLAUSE}".strip()
    return "Enabled Multi-AZ Deployment in Scaling Strategy"


# ============================================================
# 4. READ REPLICA
# ============================================================

def _is_replicated(model, diagram) -> bool:
    # Only the plain single-instance label gets a replica
    return model.database != SINGLE_DATABASE


def _attach_read_replica(model, diagram) -> str:
    old_database = model.database
    model.database = REPLICATED_DATABASE
    diagram.relabel(old_database, REPLICATED_DATABASE)
    return "Attached Read Replica to Primary Database"


ENHANCEMENT_RULES: List[EnhancementRule] = [
    EnhancementRule(
        id="edge_protection",
        precondition_met=_has_edge_guard,
        apply=_add_edge_guard,
        rationale=(
            "Current architecture exposes the load balancer directly. "
            "A WAF prevents DDoS and scraping."
        ),
    ),
    EnhancementRule(
        id="cache_tier",
        precondition_met=_has_rich_cache,
        apply=_upgrade_cache,
        rationale=(
            "Standard memory caching was insufficient or missing. "
            "A dedicated Redis tier accelerates read-heavy routes."
        ),
    ),
    EnhancementRule(
        id="multi_zone",
        precondition_met=_is_multi_zone,
        apply=_add_multi_zone,
        rationale=(
            "Current topology lacked redundancy. "
            "Spreading instances across availability zones ensures fault tolerance."
        ),
    ),
    EnhancementRule(
        id="read_replica",
        precondition_met=_is_replicated,
        apply=_attach_read_replica,
        rationale=(
            "A single database instance creates a heavy I/O bottleneck. "
            "Separating read queries improves throughput."
        ),
    ),
]
