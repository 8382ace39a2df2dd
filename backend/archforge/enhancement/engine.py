"""
Enhancement Engine - (model, diagram) -> (model', diagram', changes)

Works on deep copies so callers keep the pre-enhancement pair. Rules run in
catalog order and are skipped when their precondition already holds, which
makes a second pass over the output a no-op.
"""

from dataclasses import dataclass, field
from typing import List

from archforge.ir.architecture import ArchitectureModel
from archforge.ir.diagram import DiagramDocument
from archforge.enhancement.rules import ENHANCEMENT_RULES, EnhancementRule


ENHANCEMENT_SCORE_BONUS = 5
MAX_SCORE = 100


@dataclass
class Enhancement:
    description: str
    rationale: str

    def to_dict(self) -> dict:
        return {"description": self.description, "rationale": self.rationale}


@dataclass
class EnhancementResult:
    model: ArchitectureModel
    diagram: DiagramDocument
    changes: List[Enhancement] = field(default_factory=list)

    @property
    def changes_made(self) -> List[str]:
        return [c.description for c in self.changes]

    @property
    def reasoning(self) -> List[str]:
        return [c.rationale for c in self.changes]


def enhance(
    model: ArchitectureModel,
    diagram: DiagramDocument,
    rules: List[EnhancementRule] = None,
) -> EnhancementResult:
    updated_model = model.model_copy(deep=True)
    updated_diagram = diagram.model_copy(deep=True)
    changes: List[Enhancement] = []

    for rule in rules if rules is not None else ENHANCEMENT_RULES:
        if rule.precondition_met(updated_model, updated_diagram):
            continue

        description = rule.apply(updated_model, updated_diagram)
        changes.append(Enhancement(description=description, rationale=rule.rationale))
        print(f"[Enhancer] Applied {rule.id}: {description}")

    # Flat bonus; cost fields are left as synthesized
    if changes:
        updated_model.score = min(MAX_SCORE, updated_model.score + ENHANCEMENT_SCORE_BONUS)

    return EnhancementResult(model=updated_model, diagram=updated_diagram, changes=changes)
