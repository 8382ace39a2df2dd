"""
Diagram Validator - Checks structural integrity of compiled diagrams.

Catches issues like:
- Duplicate node IDs
- Empty labels
- Edges referencing nodes that were never emitted
- Self loops and duplicate edges
- A missing observability sink
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum
from collections import defaultdict

from archforge.ir.diagram import DiagramDocument, LayerKind


class ValidationSeverity(Enum):
    ERROR = "error"      # Diagram will not render correctly
    WARNING = "warning"  # Diagram renders but has issues
    INFO = "info"        # Suggestions for improvement


@dataclass
class ValidationIssue:
    """A single validation issue found in the diagram"""
    severity: ValidationSeverity
    code: str           # Machine-readable issue code
    message: str        # Human-readable description
    node_id: Optional[str] = None
    edge_info: Optional[str] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "edge_info": self.edge_info,
            "suggestion": self.suggestion,
        }


@dataclass
class DiagramValidationResult:
    """Result of diagram validation"""
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }

    def get_summary(self) -> str:
        """Get human-readable summary"""
        status = "✅ Valid" if self.is_valid else "❌ Invalid"
        return f"{status} | Errors: {self.error_count}, Warnings: {self.warning_count}"


class DiagramValidator:
    """
    Validates DiagramDocuments before they are rendered.

    Usage:
        validator = DiagramValidator()
        result = validator.validate(document)

        if not result.is_valid:
            for issue in result.issues:
                print(f"[{issue.severity.value}] {issue.message}")
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def validate(self, diagram: DiagramDocument) -> DiagramValidationResult:
        issues: List[ValidationIssue] = []

        if diagram is None or not diagram.nodes():
            issues.append(ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="EMPTY_DIAGRAM",
                message="Diagram has no nodes",
                suggestion="Compile the diagram from a synthesized architecture model",
            ))
            return DiagramValidationResult(
                is_valid=False,
                issues=issues,
                stats={"layers": 0, "nodes": 0, "edges": 0},
            )

        node_ids = {node.id for node in diagram.nodes()}
        layer_ids = {layer.id for layer in diagram.layers}

        issues.extend(self._check_duplicate_node_ids(diagram, layer_ids))
        issues.extend(self._check_empty_labels(diagram))
        issues.extend(self._check_missing_edge_references(diagram, node_ids | layer_ids))
        issues.extend(self._check_self_loops(diagram))
        issues.extend(self._check_duplicate_edges(diagram))
        issues.extend(self._check_observability(diagram))

        has_errors = any(i.severity == ValidationSeverity.ERROR for i in issues)
        has_warnings = any(i.severity == ValidationSeverity.WARNING for i in issues)

        is_valid = not has_errors
        if self.strict_mode:
            is_valid = not has_errors and not has_warnings

        return DiagramValidationResult(
            is_valid=is_valid,
            issues=issues,
            stats={
                "layers": len(diagram.layers),
                "nodes": len(diagram.nodes()),
                "edges": len(diagram.edges),
            },
        )

    def _check_duplicate_node_ids(self, diagram, layer_ids) -> List[ValidationIssue]:
        issues = []
        seen_ids: Dict[str, int] = defaultdict(int)
        for node in diagram.nodes():
            seen_ids[node.id] += 1
        for node_id, count in seen_ids.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DUPLICATE_NODE_ID",
                    message=f"Duplicate node ID '{node_id}' appears {count} times",
                    node_id=node_id,
                    suggestion="Ensure each node has a unique ID",
                ))
            if node_id in layer_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="NODE_SHADOWS_LAYER",
                    message=f"Node ID '{node_id}' is also a layer ID",
                    node_id=node_id,
                ))
        return issues

    def _check_empty_labels(self, diagram) -> List[ValidationIssue]:
        issues = []
        for node in diagram.nodes():
            if not node.label or not node.label.strip():
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="EMPTY_LABEL",
                    message=f"Node '{node.id}' has an empty label",
                    node_id=node.id,
                ))
        return issues

    def _check_missing_edge_references(self, diagram, known_ids) -> List[ValidationIssue]:
        issues = []
        for edge in diagram.edges:
            for end in (edge.source, edge.target):
                if end not in known_ids:
                    issues.append(ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="MISSING_NODE_REFERENCE",
                        message=f"Edge references unknown node '{end}'",
                        node_id=end,
                        edge_info=f"{edge.source} -> {edge.target}",
                        suggestion="Emit the node in a layer before wiring it",
                    ))
        return issues

    def _check_self_loops(self, diagram) -> List[ValidationIssue]:
        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="SELF_LOOP",
                message=f"Node '{edge.source}' has an edge to itself",
                node_id=edge.source,
            )
            for edge in diagram.edges
            if edge.source == edge.target
        ]

    def _check_duplicate_edges(self, diagram) -> List[ValidationIssue]:
        issues = []
        seen = set()
        for edge in diagram.edges:
            key = (edge.source, edge.target, edge.kind, edge.label)
            if key in seen:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="DUPLICATE_EDGE",
                    message=f"Duplicate edge {edge.source} -> {edge.target}",
                    edge_info=f"{edge.source} -> {edge.target}",
                ))
            seen.add(key)
        return issues

    def _check_observability(self, diagram) -> List[ValidationIssue]:
        layer = diagram.layer(LayerKind.OBSERVABILITY)
        if layer is None or not layer.nodes:
            return [ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="NO_OBSERVABILITY",
                message="Diagram has no observability sink",
            )]
        return []


def validate_diagram(diagram: DiagramDocument, strict: bool = False) -> DiagramValidationResult:
    """Convenience function to validate a diagram."""
    return DiagramValidator(strict_mode=strict).validate(diagram)
