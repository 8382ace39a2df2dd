"""
Diagram Compiler - ArchitectureModel -> DiagramDocument

Lanes come from each service's category and role tags, never from its
display name. Node and edge order is insertion order, so identical models
give identical documents.
"""

from typing import List, Optional

from archforge.ir.architecture import (
    ArchitectureModel,
    ServiceCategory,
    ServiceNode,
    ServiceRole,
)
from archforge.ir.diagram import (
    DiagramDocument,
    DiagramEdge,
    DiagramLayer,
    DiagramNode,
    EdgeKind,
    LayerKind,
    NodeShape,
)
from archforge.ir.validation import ValidationResult
from archforge.pipeline.stage import PipelineStage
from archforge.renderer.mermaid_renderer import render_mermaid


# Fixed node ids
CLIENT_ID = "client"
EDGE_GUARD_ID = "waf"
LOAD_BALANCER_ID = "lb"
MONOLITH_ENTRY_ID = "api"
GATEWAY_ENTRY_ID = "gw"
REALTIME_GATEWAY_ID = "rtgw"
DATABASE_ID = "db"
CACHE_ID = "cache"

LAYER_TITLES = {
    LayerKind.CLIENT: ("Client_Layer", "📱 Client Layer"),
    LayerKind.APPLICATION: ("App_Layer", "⚡ Application Layer"),
    LayerKind.AI_ANALYTICS: ("AI_Layer", "🧠 AI & Analytics Layer"),
    LayerKind.DATA: ("Data_Layer", "💾 Data Layer"),
    LayerKind.OBSERVABILITY: ("Obs_Layer", "📊 Observability Layer"),
}


def new_layer(kind: LayerKind) -> DiagramLayer:
    layer_id, title = LAYER_TITLES[kind]
    return DiagramLayer(id=layer_id, kind=kind, title=title)


def entry_node_id(model: ArchitectureModel) -> str:
    return GATEWAY_ENTRY_ID if model.is_microservices else MONOLITH_ENTRY_ID


def _is_alerting(service: ServiceNode) -> bool:
    return service.role == ServiceRole.ALERTING


def _application_lane(model: ArchitectureModel) -> List[ServiceNode]:
    # Entry and realtime services are drawn as dedicated gateway nodes.
    return [
        s for s in model.services_with(ServiceCategory.APPLICATION)
        if s.role not in (
            ServiceRole.ENTRY,
            ServiceRole.REALTIME_GATEWAY,
            ServiceRole.EDGE_PROTECTION,
        )
    ]


def compile_diagram(model: ArchitectureModel) -> DiagramDocument:
    doc = DiagramDocument()
    edges = doc.edges

    app_services = _application_lane(model)
    ai_services = model.services_with(ServiceCategory.AI_ANALYTICS)
    obs_services = model.services_with(ServiceCategory.OBSERVABILITY)
    has_realtime = model.has_role(ServiceRole.REALTIME_GATEWAY)
    edge_guard = next(
        (s for s in model.services if s.role == ServiceRole.EDGE_PROTECTION), None
    )
    entry = entry_node_id(model)

    # -------------------------
    # 1. Client layer
    # -------------------------
    client_layer = new_layer(LayerKind.CLIENT)
    client_layer.nodes.append(DiagramNode(id=CLIENT_ID, label="Client Application"))
    doc.layers.append(client_layer)

    # -------------------------
    # 2. Application layer
    # -------------------------
    app_layer = new_layer(LayerKind.APPLICATION)
    if edge_guard is not None:
        app_layer.nodes.append(DiagramNode(id=EDGE_GUARD_ID, label=edge_guard.name))
    app_layer.nodes.append(DiagramNode(id=LOAD_BALANCER_ID, label="Load Balancer"))

    if model.is_microservices:
        app_layer.nodes.append(
            DiagramNode(id=GATEWAY_ENTRY_ID, label="API Gateway", shape=NodeShape.DECISION)
        )
        if has_realtime:
            app_layer.nodes.append(
                DiagramNode(
                    id=REALTIME_GATEWAY_ID,
                    label="Realtime Gateway",
                    shape=NodeShape.DECISION,
                )
            )
    else:
        app_layer.nodes.append(DiagramNode(id=MONOLITH_ENTRY_ID, label="Core API Module"))

    for service in app_services:
        app_layer.nodes.append(DiagramNode(id=service.id, label=service.name))

    if not model.is_microservices and has_realtime:
        app_layer.nodes.append(DiagramNode(id=REALTIME_GATEWAY_ID, label="Realtime Gateway"))

    doc.layers.append(app_layer)

    # -------------------------
    # 3. AI & analytics layer
    # -------------------------
    ai_layer = None
    if ai_services:
        ai_layer = new_layer(LayerKind.AI_ANALYTICS)
        for service in ai_services:
            ai_layer.nodes.append(DiagramNode(id=service.id, label=service.name))
        doc.layers.append(ai_layer)

    # -------------------------
    # 4. Data layer
    # -------------------------
    data_layer = new_layer(LayerKind.DATA)
    data_layer.nodes.append(
        DiagramNode(id=DATABASE_ID, label=model.database, shape=NodeShape.CYLINDER)
    )
    if model.has_cache:
        data_layer.nodes.append(
            DiagramNode(id=CACHE_ID, label=model.cache, shape=NodeShape.DECISION)
        )
    doc.layers.append(data_layer)

    # -------------------------
    # 5. Observability layer
    # -------------------------
    obs_layer = new_layer(LayerKind.OBSERVABILITY)
    for service in obs_services:
        obs_layer.nodes.append(DiagramNode(id=service.id, label=service.name))
    doc.layers.append(obs_layer)

    # -------------------------
    # 6. Synchronous flows
    # -------------------------
    if edge_guard is not None:
        edges.append(DiagramEdge(source=CLIENT_ID, target=EDGE_GUARD_ID))
        edges.append(DiagramEdge(source=EDGE_GUARD_ID, target=LOAD_BALANCER_ID))
    else:
        edges.append(DiagramEdge(source=CLIENT_ID, target=LOAD_BALANCER_ID))
    edges.append(DiagramEdge(source=LOAD_BALANCER_ID, target=entry))

    if model.is_microservices:
        _wire_microservices(model, app_services, has_realtime, edges)
    else:
        _wire_monolith(model, app_services, has_realtime, edges)

    # -------------------------
    # 7. Async & background processing
    # -------------------------
    if ai_services:
        _wire_ai_lane(ai_services, entry, edges)

    # -------------------------
    # 8. Monitoring & metrics
    # -------------------------
    if obs_services:
        target = obs_services[0].id
        edges.append(
            DiagramEdge(
                source=app_layer.id, target=target,
                kind=EdgeKind.TELEMETRY, label="Logs & Metrics",
            )
        )
        edges.append(
            DiagramEdge(
                source=data_layer.id, target=target,
                kind=EdgeKind.TELEMETRY, label="Health Checks",
            )
        )
        if ai_layer is not None:
            edges.append(
                DiagramEdge(
                    source=ai_layer.id, target=target,
                    kind=EdgeKind.TELEMETRY, label="Telemetry",
                )
            )

    return doc


def _wire_monolith(model, app_services, has_realtime, edges: List[DiagramEdge]):
    if has_realtime:
        edges.append(DiagramEdge(source=LOAD_BALANCER_ID, target=REALTIME_GATEWAY_ID))
        edges.append(
            DiagramEdge(
                source=REALTIME_GATEWAY_ID, target=MONOLITH_ENTRY_ID,
                kind=EdgeKind.ASYNC_EVENT, label="Async Events",
            )
        )
        if model.has_cache:
            edges.append(
                DiagramEdge(
                    source=REALTIME_GATEWAY_ID, target=CACHE_ID,
                    kind=EdgeKind.PUB_SUB, label="Pub/Sub",
                )
            )

    for service in app_services:
        edges.append(
            DiagramEdge(source=MONOLITH_ENTRY_ID, target=service.id, label="Internal Call")
        )
        if not _is_alerting(service):
            edges.append(DiagramEdge(source=service.id, target=DATABASE_ID))

    edges.append(DiagramEdge(source=MONOLITH_ENTRY_ID, target=DATABASE_ID))
    if model.has_cache:
        edges.append(DiagramEdge(source=MONOLITH_ENTRY_ID, target=CACHE_ID))


def _wire_microservices(model, app_services, has_realtime, edges: List[DiagramEdge]):
    if has_realtime:
        edges.append(DiagramEdge(source=LOAD_BALANCER_ID, target=REALTIME_GATEWAY_ID))

    for service in app_services:
        edges.append(DiagramEdge(source=GATEWAY_ENTRY_ID, target=service.id))
        if not _is_alerting(service):
            edges.append(DiagramEdge(source=service.id, target=DATABASE_ID))
        if model.has_cache:
            if _is_alerting(service):
                edges.append(
                    DiagramEdge(
                        source=CACHE_ID, target=service.id,
                        kind=EdgeKind.PUB_SUB, label="Pub/Sub",
                    )
                )
            else:
                edges.append(DiagramEdge(source=service.id, target=CACHE_ID))

    if has_realtime and model.has_cache:
        edges.append(
            DiagramEdge(
                source=REALTIME_GATEWAY_ID, target=CACHE_ID,
                kind=EdgeKind.PUB_SUB, label="Pub/Sub",
            )
        )


def _wire_ai_lane(ai_services: List[ServiceNode], entry: str, edges: List[DiagramEdge]):
    pipeline: Optional[ServiceNode] = next(
        (s for s in ai_services if s.role == ServiceRole.PIPELINE), None
    )

    if pipeline is not None:
        edges.append(
            DiagramEdge(
                source=entry, target=pipeline.id,
                kind=EdgeKind.ASYNC_EVENT, label="Async Streams",
            )
        )

    feeder = pipeline.id if pipeline is not None else entry
    for service in ai_services:
        if service is pipeline:
            continue
        edges.append(
            DiagramEdge(
                source=feeder, target=service.id,
                kind=EdgeKind.ASYNC_EVENT, label="Batch Process",
            )
        )
        edges.append(
            DiagramEdge(source=service.id, target=DATABASE_ID, kind=EdgeKind.ASYNC_EVENT)
        )

    if pipeline is not None:
        edges.append(
            DiagramEdge(source=pipeline.id, target=DATABASE_ID, kind=EdgeKind.ASYNC_EVENT)
        )


class DiagramStage(PipelineStage):
    name = "diagram"

    def run(self, context):
        context.diagram = compile_diagram(context.model)
        context.mermaid = render_mermaid(context.diagram)
        return ValidationResult.success()
