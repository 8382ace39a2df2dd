"""
Validation module for compiled diagrams.
"""

from archforge.validation.diagram_validator import (
    DiagramValidator,
    DiagramValidationResult,
    ValidationIssue,
    ValidationSeverity,
    validate_diagram,
)

__all__ = [
    "DiagramValidator",
    "DiagramValidationResult",
    "ValidationIssue",
    "ValidationSeverity",
    "validate_diagram",
]
