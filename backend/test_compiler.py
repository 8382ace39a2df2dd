"""Diagram compiler layout, wiring and Mermaid serialization."""

from itertools import product

import pytest

from archforge.ir.architecture import ArchitectureRequest, FeatureFlags, ScaleTier
from archforge.ir.diagram import EdgeKind, LayerKind, NodeShape
from archforge.ir.errors import InvalidRequestError, ValidationError
from archforge.ir.validation import ValidationResult
from archforge.pipeline.compiler import compile_diagram
from archforge.pipeline.context import PipelineContext
from archforge.pipeline.controller import PipelineController
from archforge.pipeline.stage import PipelineStage
from archforge.pipeline.synthesizer import synthesize
from archforge.renderer.mermaid_renderer import render_mermaid
from archforge.validation import validate_diagram


ALL_FLAGS = [
    FeatureFlags(realtime=r, heavy_data=h, alerts=a)
    for r, h, a in product([False, True], repeat=3)
]


def edge_pairs(doc):
    return [(e.source, e.target) for e in doc.edges]


def layer_kinds(doc):
    return [layer.kind for layer in doc.layers]


@pytest.mark.parametrize("scale", list(ScaleTier))
@pytest.mark.parametrize("flags", ALL_FLAGS)
def test_every_edge_endpoint_is_emitted(scale, flags):
    doc = compile_diagram(synthesize(scale, flags))
    known = {n.id for n in doc.nodes()} | {layer.id for layer in doc.layers}

    for edge in doc.edges:
        assert edge.source in known
        assert edge.target in known

    result = validate_diagram(doc)
    assert result.is_valid, result.to_dict()


@pytest.mark.parametrize("scale", list(ScaleTier))
@pytest.mark.parametrize("flags", ALL_FLAGS)
def test_compile_is_deterministic(scale, flags):
    first = render_mermaid(compile_diagram(synthesize(scale, flags)))
    second = render_mermaid(compile_diagram(synthesize(scale, flags)))
    assert first == second


def test_small_monolith_layout():
    doc = compile_diagram(synthesize(ScaleTier.SMALL, FeatureFlags()))

    assert layer_kinds(doc) == [
        LayerKind.CLIENT,
        LayerKind.APPLICATION,
        LayerKind.DATA,
        LayerKind.OBSERVABILITY,
    ]
    app = doc.layer(LayerKind.APPLICATION)
    assert [n.id for n in app.nodes] == ["lb", "api", "srv0"]

    data = doc.layer(LayerKind.DATA)
    assert [n.id for n in data.nodes] == ["db"]
    assert data.nodes[0].shape == NodeShape.CYLINDER

    assert edge_pairs(doc) == [
        ("client", "lb"),
        ("lb", "api"),
        ("api", "srv0"),
        ("srv0", "db"),
        ("api", "db"),
        ("App_Layer", "srv2"),
        ("Data_Layer", "srv2"),
    ]


def test_monolith_realtime_gateway_wiring():
    model = synthesize(ScaleTier.MEDIUM, FeatureFlags(realtime=True))
    doc = compile_diagram(model)

    app_ids = [n.id for n in doc.layer(LayerKind.APPLICATION).nodes]
    assert app_ids[-1] == "rtgw"

    async_edge = next(e for e in doc.edges if e.source == "rtgw" and e.target == "api")
    assert async_edge.kind == EdgeKind.ASYNC_EVENT
    pubsub = next(e for e in doc.edges if e.source == "rtgw" and e.target == "cache")
    assert pubsub.kind == EdgeKind.PUB_SUB
    assert ("api", "cache") in edge_pairs(doc)


def test_monolith_alerting_services_skip_database():
    model = synthesize(ScaleTier.MEDIUM, FeatureFlags(alerts=True))
    doc = compile_diagram(model)
    alerting = [s.id for s in model.services if "Alert" in s.name or "Notification" in s.name]

    for service_id in alerting:
        assert ("api", service_id) in edge_pairs(doc)
        assert (service_id, "db") not in edge_pairs(doc)


def test_microservices_wiring():
    model = synthesize(ScaleTier.LARGE, FeatureFlags(realtime=True, alerts=True))
    doc = compile_diagram(model)
    by_name = {s.name: s.id for s in model.services}

    app_ids = [n.id for n in doc.layer(LayerKind.APPLICATION).nodes]
    assert app_ids[:3] == ["lb", "gw", "rtgw"]
    # gateway services are not repeated as lane nodes
    assert by_name["API Gateway"] not in app_ids
    assert by_name["Realtime Gateway (WS)"] not in app_ids

    auth = by_name["Auth Service"]
    assert ("gw", auth) in edge_pairs(doc)
    assert (auth, "db") in edge_pairs(doc)
    assert (auth, "cache") in edge_pairs(doc)

    dispatcher = by_name["Notification Dispatcher"]
    feed = next(e for e in doc.edges if e.target == dispatcher and e.source == "cache")
    assert feed.kind == EdgeKind.PUB_SUB
    assert (dispatcher, "db") not in edge_pairs(doc)

    assert ("lb", "rtgw") in edge_pairs(doc)
    assert ("rtgw", "cache") in edge_pairs(doc)


def test_ai_layer_and_telemetry():
    model = synthesize(ScaleTier.LARGE, FeatureFlags(heavy_data=True))
    doc = compile_diagram(model)
    by_name = {s.name: s.id for s in model.services}
    pipeline = by_name["Data Pipeline (Kafka)"]
    analytics = by_name["Analytics Engine"]
    obs = by_name["Metrics & Logs (Prometheus/Grafana)"]

    assert doc.layer(LayerKind.AI_ANALYTICS) is not None
    streams = next(e for e in doc.edges if e.source == "gw" and e.target == pipeline)
    assert streams.label == "Async Streams"
    batch = next(e for e in doc.edges if e.source == pipeline and e.target == analytics)
    assert batch.label == "Batch Process"
    assert (analytics, "db") in edge_pairs(doc)

    telemetry = [e for e in doc.edges if e.kind == EdgeKind.TELEMETRY]
    assert [(e.source, e.target) for e in telemetry] == [
        ("App_Layer", obs),
        ("Data_Layer", obs),
        ("AI_Layer", obs),
    ]


def test_mermaid_text_shapes_and_arrows():
    model = synthesize(ScaleTier.LARGE, FeatureFlags(realtime=True))
    text = render_mermaid(compile_diagram(model))

    assert text.startswith("graph TD\n")
    assert "classDef client" in text
    assert 'subgraph App_Layer ["⚡ Application Layer"]' in text
    assert '    gw{"API Gateway"}:::app' in text
    assert '    db[("PostgreSQL (Cluster) + Document DB")]:::data' in text
    assert "  client --> lb" in text
    assert "  rtgw -.->|Pub/Sub| cache" in text
    assert "  App_Layer -.->|Logs & Metrics| srv" in text


def test_pipeline_controller_end_to_end():
    context = PipelineController().run_fields("Atlas", "small", "a simple todo app")

    assert context.model.project_name == "Atlas"
    assert context.mermaid == render_mermaid(compile_diagram(context.model))
    assert context.errors == []


class RejectingStage(PipelineStage):
    name = "rejecting"

    def __init__(self):
        self.seen = None

    def run(self, context: PipelineContext) -> ValidationResult:
        self.seen = context
        return ValidationResult.failure([ValidationError("error", "no topology", "model")])


def test_pipeline_controller_records_stage_errors_and_stops():
    controller = PipelineController()
    rejecting = RejectingStage()
    controller.stages = [rejecting] + controller.stages

    request = ArchitectureRequest(project_name="Atlas", scale=ScaleTier.SMALL, description="todo")
    with pytest.raises(InvalidRequestError):
        controller.run(request)

    assert rejecting.seen.errors == ["model: no topology"]
    assert rejecting.seen.model is None
