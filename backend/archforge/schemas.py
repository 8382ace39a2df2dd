from pydantic import BaseModel
from typing import Optional, Dict, Any, List


class ArchitectRequest(BaseModel):
    # Optional here so missing fields reach our own validation (400, not 422)
    project_name: Optional[str] = None
    scale: Optional[str] = None
    description: Optional[str] = None


class EnhanceRequest(BaseModel):
    """An architecture previously returned by /architect, optionally with its diagram"""
    architecture: Optional[Dict[str, Any]] = None
    diagram: Optional[Dict[str, Any]] = None


class IdeateRequest(BaseModel):
    prompt: Optional[str] = None


class ArchitectResponse(BaseModel):
    project_name: str
    architecture: Dict[str, Any]
    flags: Dict[str, bool]
    diagram: Dict[str, Any]
    mermaid: str
    validation: Dict[str, Any]


class EnhanceResponse(BaseModel):
    changes_made: List[str] = []
    reasoning: List[str] = []
    updated_services: List[str] = []
    updated_scaling_strategy: str
    updated_infrastructure: List[str] = []  # [database, cache]
    architecture: Dict[str, Any]
    diagram: Dict[str, Any]
    mermaid: str


class IdeateResponse(BaseModel):
    text: str
