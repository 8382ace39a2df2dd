"""
Architecture Enhancement

Idempotent, rule-driven improvements applied to an already synthesized
architecture model and its diagram document.
"""

from archforge.enhancement.engine import (
    ENHANCEMENT_SCORE_BONUS,
    Enhancement,
    EnhancementResult,
    enhance,
)
from archforge.enhancement.rules import ENHANCEMENT_RULES, EnhancementRule

__all__ = [
    "ENHANCEMENT_RULES",
    "ENHANCEMENT_SCORE_BONUS",
    "Enhancement",
    "EnhancementResult",
    "EnhancementRule",
    "enhance",
]
