from typing import Optional

from archforge.ir.architecture import ArchitectureRequest
from archforge.ir.errors import InvalidRequestError
from archforge.ir.request import build_request
from archforge.pipeline.context import PipelineContext
from archforge.pipeline.classifier import ClassificationStage
from archforge.pipeline.synthesizer import SynthesisStage
from archforge.pipeline.compiler import DiagramStage


class PipelineController:
    """
    Runs classification -> synthesis -> diagram for one request.
    Every stage is deterministic, so there is no retry loop.
    """

    def __init__(self):
        self.stages = [
            ClassificationStage(),
            SynthesisStage(),
            DiagramStage(),
        ]

    def run_fields(
        self,
        project_name: Optional[str],
        scale: Optional[str],
        description: Optional[str],
    ) -> PipelineContext:
        # Raises InvalidRequestError before any stage runs
        request = build_request(project_name, scale, description)
        return self.run(request)

    def run(self, request: ArchitectureRequest) -> PipelineContext:
        context = PipelineContext(request=request)

        for stage in self.stages:
            result = stage.run(context)

            # -------------------------------------------------
            # Hard stop on failure
            # -------------------------------------------------
            if not result.is_valid:
                for message in result.messages():
                    context.add_error(message)
                print(f"[Pipeline] Stage '{stage.name}' failed: {context.errors}")
                raise InvalidRequestError(f"stage {stage.name} failed", result.errors)

        print(
            f"[Pipeline] {request.project_name}: {context.model.style.value}, "
            f"{len(context.model.services)} services, "
            f"{len(context.diagram.edges)} edges"
        )
        return context
