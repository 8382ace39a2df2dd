"""
Concept ideation through the external text-generation service.

The returned text is only ever a candidate description for a later
/architect call; failures surface as GenerationFailedError.
"""

from typing import Iterator

import requests

from archforge.inference.base import LLMClient
from archforge.inference.prompt import build_messages
from archforge.ir.errors import GenerationFailedError


# Transport errors plus anything a malformed upstream body can raise while parsing
UPSTREAM_ERRORS = (
    requests.RequestException,
    KeyError,
    IndexError,
    TypeError,
    AttributeError,
    ValueError,
)

EMPTY_RESPONSE = "empty response from text generation service"


def generate_concept(prompt: str, client: LLMClient) -> str:
    try:
        text = client.generate(build_messages(prompt))
    except UPSTREAM_ERRORS as e:
        print(f"[Ideation] Generation failed: {e}")
        raise GenerationFailedError(str(e)) from e

    text = (text or "").strip()
    if not text:
        raise GenerationFailedError(EMPTY_RESPONSE)
    return text


def stream_concept(prompt: str, client: LLMClient) -> Iterator[str]:
    produced = False
    try:
        for chunk in client.stream(build_messages(prompt)):
            produced = True
            yield chunk
    except UPSTREAM_ERRORS as e:
        print(f"[Ideation] Stream failed: {e}")
        raise GenerationFailedError(str(e)) from e

    if not produced:
        raise GenerationFailedError(EMPTY_RESPONSE)
