from dataclasses import dataclass, field
from typing import List


@dataclass
class ValidationError:
    level: str
    message: str
    object_id: str


class InvalidRequestError(ValueError):
    """Raised before any synthesis or enhancement work when input is unusable."""

    def __init__(self, message: str, errors: List[ValidationError] = None):
        super().__init__(message)
        self.errors = errors or []


class GenerationFailedError(RuntimeError):
    """The external text-generation service did not produce a usable concept."""
