from dataclasses import dataclass, field
from typing import Optional

from archforge.ir.architecture import ArchitectureModel, ArchitectureRequest, FeatureFlags
from archforge.ir.diagram import DiagramDocument


@dataclass
class PipelineContext:
    # Raw input (authoritative)
    request: ArchitectureRequest

    # Stage outputs
    flags: Optional[FeatureFlags] = None
    model: Optional[ArchitectureModel] = None
    diagram: Optional[DiagramDocument] = None
    mermaid: str = ""

    errors: list[str] = field(default_factory=list)

    def add_error(self, message: str):
        self.errors.append(message)
