from archforge.pipeline.classifier import classify
from archforge.pipeline.synthesizer import synthesize
from archforge.pipeline.compiler import compile_diagram

__all__ = ["classify", "synthesize", "compile_diagram"]
