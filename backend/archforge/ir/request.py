from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from .architecture import ArchitectureModel, ArchitectureRequest, ScaleTier
from .errors import InvalidRequestError, ValidationError
from .validation import ValidationResult


SCALE_VALUES = {tier.value for tier in ScaleTier}


def validate_request_fields(
    project_name: Optional[str],
    scale: Optional[str],
    description: Optional[str],
) -> ValidationResult:
    """
    Checks the raw fields of an architecture request.
    Minimum description length is the caller's concern, only presence is checked here.
    """
    errors = []

    if not project_name or not project_name.strip():
        errors.append(
            ValidationError(
                level="request",
                message="project name must not be empty",
                object_id="project_name",
            )
        )

    if not scale:
        errors.append(
            ValidationError(
                level="request",
                message="scale is required",
                object_id="scale",
            )
        )
    elif scale not in SCALE_VALUES:
        errors.append(
            ValidationError(
                level="request",
                message=f"scale must be one of {sorted(SCALE_VALUES)}",
                object_id="scale",
            )
        )

    if not description or not description.strip():
        errors.append(
            ValidationError(
                level="request",
                message="description must not be empty",
                object_id="description",
            )
        )

    if errors:
        return ValidationResult.failure(errors)

    return ValidationResult.success()


def build_request(
    project_name: Optional[str],
    scale: Optional[str],
    description: Optional[str],
) -> ArchitectureRequest:
    result = validate_request_fields(project_name, scale, description)
    if not result.is_valid:
        raise InvalidRequestError("Missing required fields", result.errors)

    return ArchitectureRequest(
        project_name=project_name.strip(),
        scale=ScaleTier(scale),
        description=description,
    )


def parse_enhancement_input(payload: Optional[Dict[str, Any]]) -> ArchitectureModel:
    """
    Turns a raw architecture payload into a model, rejecting it before any
    enhancement rule runs when the style or services are missing.
    """
    if not payload or not payload.get("style") or not payload.get("services"):
        raise InvalidRequestError(
            "Missing architecture data",
            [
                ValidationError(
                    level="enhancement",
                    message="architecture style and services are required",
                    object_id="architecture",
                )
            ],
        )

    try:
        return ArchitectureModel.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidRequestError(
            "Missing architecture data",
            [
                ValidationError(
                    level="enhancement",
                    message=err["msg"],
                    object_id=".".join(str(p) for p in err["loc"]),
                )
                for err in e.errors()
            ],
        ) from e
