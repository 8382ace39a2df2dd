"""Enhancement engine: rule order, idempotence and structural diagram patches."""

from archforge.enhancement import ENHANCEMENT_SCORE_BONUS, enhance
from archforge.ir.architecture import FeatureFlags, ScaleTier, ServiceCategory, ServiceNode, ServiceRole
from archforge.ir.diagram import LayerKind
from archforge.pipeline.compiler import compile_diagram
from archforge.pipeline.synthesizer import synthesize
from archforge.renderer.mermaid_renderer import render_mermaid
from archforge.validation import validate_diagram


def synthesized(scale, **flags):
    model = synthesize(scale, FeatureFlags(**flags))
    return model, compile_diagram(model)


def edge_pairs(doc):
    return [(e.source, e.target) for e in doc.edges]


def test_small_monolith_gets_all_four_rules_in_order():
    model, diagram = synthesized(ScaleTier.SMALL)
    result = enhance(model, diagram)

    assert result.changes_made == [
        "Added Web Application Firewall (WAF) & Rate Limiting",
        "Upgraded Cache to Redis (Cache + Session Store)",
        "Enabled Multi-AZ Deployment in Scaling Strategy",
        "Attached Read Replica to Primary Database",
    ]
    assert len(result.reasoning) == 4
    assert result.model.cache == "Redis (Cache + Session Store)"
    assert result.model.database == "PostgreSQL (Primary) + Read Replica"
    assert "Multi-AZ" in result.model.scaling_strategy
    assert result.model.score == 85 + ENHANCEMENT_SCORE_BONUS


def test_waf_is_wired_between_client_and_load_balancer():
    model, diagram = synthesized(ScaleTier.SMALL)
    result = enhance(model, diagram)
    pairs = edge_pairs(result.diagram)

    assert ("client", "lb") not in pairs
    assert pairs[:3] == [("client", "waf"), ("waf", "lb"), ("lb", "api")]
    assert result.diagram.layer(LayerKind.APPLICATION).nodes[0].id == "waf"
    assert result.model.services[-1].role == ServiceRole.EDGE_PROTECTION
    assert len(result.model.services_with(ServiceCategory.OBSERVABILITY)) == 1


def test_missing_cache_adds_node_and_entry_edge():
    model, diagram = synthesized(ScaleTier.SMALL)
    result = enhance(model, diagram)

    cache = result.diagram.find_node("cache")
    assert cache is not None
    assert cache.label == "Redis (Cache + Session Store)"
    assert ("api", "cache") in edge_pairs(result.diagram)


def test_basic_cache_is_relabelled_everywhere():
    model, diagram = synthesized(ScaleTier.MEDIUM)
    result = enhance(model, diagram)
    text = render_mermaid(result.diagram)

    assert "Redis (Cache)" not in text
    assert "Redis (Cache + Session Store)" in text
    # existing cache node was relabelled, not duplicated
    assert [n.id for n in result.diagram.nodes()].count("cache") == 1


def test_database_label_rewritten_in_diagram():
    model, diagram = synthesized(ScaleTier.SMALL)
    result = enhance(model, diagram)
    assert result.diagram.find_node("db").label == "PostgreSQL (Primary) + Read Replica"
    assert "PostgreSQL (Relational)" not in render_mermaid(result.diagram)


def test_enhance_is_a_functional_update():
    model, diagram = synthesized(ScaleTier.SMALL)
    before_model = model.model_dump()
    before_text = render_mermaid(diagram)

    enhance(model, diagram)

    assert model.model_dump() == before_model
    assert render_mermaid(diagram) == before_text


def test_second_pass_applies_nothing():
    for scale in ScaleTier:
        model, diagram = synthesized(scale, realtime=True, alerts=True)
        first = enhance(model, diagram)
        second = enhance(first.model, first.diagram)

        assert second.changes == []
        assert second.model.score == first.model.score
        assert render_mermaid(second.diagram) == render_mermaid(first.diagram)


def test_existing_waf_and_replica_are_not_duplicated():
    model, diagram = synthesized(ScaleTier.MEDIUM)
    model.services.insert(
        0,
        ServiceNode(id="edge0", name="Cloud WAF", role=ServiceRole.EDGE_PROTECTION),
    )
    result = enhance(model, diagram)

    assert result.changes_made == [
        "Upgraded Cache to Redis (Cache + Session Store)",
        "Enabled Multi-AZ Deployment in Scaling Strategy",
    ]
    assert result.diagram.find_node("waf") is None


def test_large_tier_gets_cluster_cache_only_when_basic():
    model, diagram = synthesized(ScaleTier.LARGE)
    result = enhance(model, diagram)

    # "Redis Cluster" is already a rich variant
    assert "Upgraded Cache to Redis Cluster (Distributed)" not in result.changes_made
    assert result.model.cache == "Redis Cluster"


def test_microservices_without_cache_get_cluster_cache_from_gateway():
    model, diagram = synthesized(ScaleTier.LARGE)
    model.cache = "None"
    diagram = compile_diagram(model)

    result = enhance(model, diagram)

    assert result.model.cache == "Redis Cluster (Distributed)"
    assert ("gw", "cache") in edge_pairs(result.diagram)


def test_score_bonus_is_capped():
    model, diagram = synthesized(ScaleTier.MEDIUM)
    model.score = 98
    result = enhance(model, diagram)
    assert result.model.score == 100


def test_cost_is_not_recomputed():
    model, diagram = synthesized(ScaleTier.SMALL)
    result = enhance(model, diagram)
    assert result.model.cost_breakdown == model.cost_breakdown
    assert result.model.total_cost == model.total_cost


def test_enhanced_diagram_stays_valid():
    for scale in ScaleTier:
        model, diagram = synthesized(scale, heavy_data=True)
        result = enhance(model, diagram)
        assert validate_diagram(result.diagram).is_valid


def test_recompiling_enhanced_model_keeps_waf_in_front():
    model, diagram = synthesized(ScaleTier.SMALL)
    result = enhance(model, diagram)
    recompiled = compile_diagram(result.model)

    assert edge_pairs(recompiled)[:2] == [("client", "waf"), ("waf", "lb")]
