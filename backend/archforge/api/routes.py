import asyncio
import traceback
from typing import Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError as PydanticValidationError

from archforge import config
from archforge.enhancement import enhance
from archforge.inference.base import LLMClient
from archforge.inference.config import get_llm_client
from archforge.inference.ideation import generate_concept, stream_concept
from archforge.ir.diagram import DiagramDocument
from archforge.ir.errors import GenerationFailedError, InvalidRequestError
from archforge.ir.request import parse_enhancement_input
from archforge.pipeline.compiler import compile_diagram
from archforge.pipeline.controller import PipelineController
from archforge.renderer.mermaid_renderer import render_mermaid
from archforge.schemas import (
    ArchitectRequest,
    ArchitectResponse,
    EnhanceRequest,
    EnhanceResponse,
    IdeateRequest,
    IdeateResponse,
)
from archforge.validation import validate_diagram

router = APIRouter()


def _bad_request(error: str, e: InvalidRequestError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": error,
            "details": [f"{err.object_id}: {err.message}" for err in e.errors],
        },
    )


def _server_error() -> JSONResponse:
    traceback.print_exc()
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


# ============================================================
# ARCHITECT ENDPOINT - Synthesis + Diagram
# ============================================================

@router.post("/architect")
async def architect(request: ArchitectRequest):
    try:
        controller = PipelineController()
        context = controller.run_fields(
            request.project_name,
            request.scale,
            request.description,
        )
    except InvalidRequestError as e:
        print(f"[Routes] Rejected architect request: {e.errors}")
        return _bad_request("Missing required fields", e)
    except Exception:
        return _server_error()

    validation = validate_diagram(context.diagram)
    if not validation.is_valid:
        print(f"[Routes] Diagram validation: {validation.get_summary()}")

    await asyncio.sleep(config.ARCHITECT_DELAY_SECONDS)

    return ArchitectResponse(
        project_name=context.request.project_name,
        architecture=context.model.model_dump(mode="json"),
        flags=context.flags.model_dump(),
        diagram=context.diagram.model_dump(mode="json"),
        mermaid=context.mermaid,
        validation=validation.to_dict(),
    )


# ============================================================
# ENHANCE ENDPOINT - Idempotent structural improvements
# ============================================================

@router.post("/enhance")
async def enhance_architecture(request: EnhanceRequest):
    try:
        model = parse_enhancement_input(request.architecture)
        if request.diagram:
            diagram = DiagramDocument.model_validate(request.diagram)
        else:
            diagram = compile_diagram(model)
    except InvalidRequestError as e:
        print(f"[Routes] Rejected enhance request: {e.errors}")
        return _bad_request("Missing architecture data", e)
    except PydanticValidationError as e:
        print(f"[Routes] Rejected enhance diagram: {e}")
        return JSONResponse(
            status_code=400,
            content={"error": "Missing architecture data", "details": [str(e)]},
        )

    try:
        result = enhance(model, diagram)
    except Exception:
        return _server_error()

    await asyncio.sleep(config.ENHANCE_DELAY_SECONDS)

    updated = result.model
    return EnhanceResponse(
        changes_made=result.changes_made,
        reasoning=result.reasoning,
        updated_services=[s.name for s in updated.services],
        updated_scaling_strategy=updated.scaling_strategy,
        updated_infrastructure=[updated.database, updated.cache],
        architecture=updated.model_dump(mode="json"),
        diagram=result.diagram.model_dump(mode="json"),
        mermaid=render_mermaid(result.diagram),
    )


# ============================================================
# IDEATE ENDPOINTS - External text generation
# ============================================================

@router.post("/ideate")
def ideate(request: IdeateRequest, client: LLMClient = Depends(get_llm_client)):
    try:
        text = generate_concept(request.prompt, client)
    except GenerationFailedError as e:
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to generate concept", "details": str(e)},
        )
    return IdeateResponse(text=text)


@router.post("/ideate/stream")
def ideate_stream(request: IdeateRequest, client: LLMClient = Depends(get_llm_client)):
    chunks = stream_concept(request.prompt, client)

    # Pull the first chunk eagerly so an upstream failure still maps to 502
    try:
        first = next(chunks, "")
    except GenerationFailedError as e:
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to generate concept", "details": str(e)},
        )

    def body() -> Iterator[str]:
        if first:
            yield first
        try:
            yield from chunks
        except GenerationFailedError as e:
            # Headers are already sent; the client sees a truncated body
            print(f"[Routes] Stream aborted: {e}")

    return StreamingResponse(body(), media_type="text/plain; charset=utf-8")
