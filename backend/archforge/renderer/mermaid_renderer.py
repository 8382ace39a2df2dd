import re

from archforge.ir.diagram import DiagramDocument, EdgeKind, LayerKind, NodeShape


LEGEND = [
    "  classDef client fill:#1e293b,stroke:#3b82f6,stroke-width:2px,color:#f8fafc",
    "  classDef app fill:#1e293b,stroke:#8b5cf6,stroke-width:2px,color:#f8fafc",
    "  classDef data fill:#1e293b,stroke:#10b981,stroke-width:2px,color:#f8fafc",
    "  classDef obs fill:#1e293b,stroke:#64748b,stroke-width:2px,color:#f8fafc",
    "  classDef ai fill:#1e293b,stroke:#ec4899,stroke-width:2px,color:#f8fafc",
]

LAYER_CLASS = {
    LayerKind.CLIENT: "client",
    LayerKind.APPLICATION: "app",
    LayerKind.AI_ANALYTICS: "ai",
    LayerKind.DATA: "data",
    LayerKind.OBSERVABILITY: "obs",
}

DASHED_KINDS = {EdgeKind.ASYNC_EVENT, EdgeKind.PUB_SUB, EdgeKind.TELEMETRY}


def _escape(label: str) -> str:
    return label.replace('"', "'")


def _edge_label(label: str) -> str:
    sanitized = re.sub(r'[|"#;]', "", label)
    return re.sub(r"\s+", " ", sanitized).strip()


def _render_node(node, css_class: str) -> str:
    label = _escape(node.label)
    if node.shape == NodeShape.CYLINDER:
        body = f'[("{label}")]'
    elif node.shape == NodeShape.DECISION:
        body = f'{{"{label}"}}'
    else:
        body = f'["{label}"]'
    return f"    {node.id}{body}:::{css_class}"


def render_mermaid(document: DiagramDocument) -> str:
    """
    Converts DiagramDocument -> Mermaid flowchart.
    Layer by layer, nodes first, then every edge in document order.
    """
    lines = ["graph TD", ""]
    lines.extend(LEGEND)
    lines.append("")

    # -------------------------
    # Subgraphs by layer
    # -------------------------
    for layer in document.layers:
        css_class = LAYER_CLASS[layer.kind]
        lines.append(f'  subgraph {layer.id} ["{_escape(layer.title)}"]')
        for node in layer.nodes:
            lines.append(_render_node(node, css_class))
        lines.append("  end")
        lines.append("")

    # -------------------------
    # Edges
    # -------------------------
    for edge in document.edges:
        arrow = "-.->" if edge.kind in DASHED_KINDS else "-->"
        label = _edge_label(edge.label) if edge.label else ""
        if label:
            lines.append(f"  {edge.source} {arrow}|{label}| {edge.target}")
        else:
            lines.append(f"  {edge.source} {arrow} {edge.target}")

    return "\n".join(lines) + "\n"
