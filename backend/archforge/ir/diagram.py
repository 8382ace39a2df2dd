from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class LayerKind(str, Enum):
    CLIENT = "client"
    APPLICATION = "application"
    AI_ANALYTICS = "ai-analytics"
    DATA = "data"
    OBSERVABILITY = "observability"


class NodeShape(str, Enum):
    RECTANGLE = "rectangle"
    DECISION = "decision"        # rounded decision / rhombus
    CYLINDER = "cylinder"        # data stores


class EdgeKind(str, Enum):
    SYNC_CALL = "sync-call"
    ASYNC_EVENT = "async-event"
    PUB_SUB = "pub-sub"
    TELEMETRY = "telemetry"


class DiagramNode(BaseModel):
    id: str
    label: str
    shape: NodeShape = NodeShape.RECTANGLE


class DiagramLayer(BaseModel):
    id: str
    kind: LayerKind
    title: str
    nodes: List[DiagramNode] = Field(default_factory=list)


class DiagramEdge(BaseModel):
    source: str                  # node id, or layer id for aggregate telemetry
    target: str
    kind: EdgeKind = EdgeKind.SYNC_CALL
    label: Optional[str] = None


class DiagramDocument(BaseModel):
    """
    Structured diagram. Layers and edges keep insertion order; text output
    is a projection of this document (see renderer.mermaid_renderer).
    """
    layers: List[DiagramLayer] = Field(default_factory=list)
    edges: List[DiagramEdge] = Field(default_factory=list)

    def layer(self, kind: LayerKind) -> Optional[DiagramLayer]:
        return next((l for l in self.layers if l.kind == kind), None)

    def nodes(self) -> List[DiagramNode]:
        return [n for layer in self.layers for n in layer.nodes]

    def find_node(self, node_id: str) -> Optional[DiagramNode]:
        return next((n for n in self.nodes() if n.id == node_id), None)

    def has_edge(self, source: str, target: str) -> bool:
        return any(e.source == source and e.target == target for e in self.edges)

    def relabel(self, old_label: str, new_label: str) -> int:
        """Rewrite every node label equal to old_label. Returns how many changed."""
        changed = 0
        for node in self.nodes():
            if node.label == old_label:
                node.label = new_label
                changed += 1
        return changed
