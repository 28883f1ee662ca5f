"""Specialists Bounded Context.

Per-violation-family fix planners with deterministic confidence scoring,
dispatched by an explicitly registered, priority-ordered router.
"""
from .value_objects import (
    ConfidenceAdjustment, ConfidencePolicy, ConfidenceResult, ConfidenceTier,
    FixClassification,
)
from .base import BaseSpecialist, SpecialistAgent
from .alt_text import AltTextSpecialist
from .focus import FocusSpecialist
from .navigation import NavigationSpecialist
from .contrast import (
    RGB, ContrastSpecialist, adjust_color_for_contrast, contrast_ratio,
    parse_color, relative_luminance, rgb_to_hex,
)
from .interaction import DraggingAlternative, InteractionSpecialist
from .generic import GenericAriaHandler
from .router import SpecialistRouter

__all__ = [
    "ConfidenceAdjustment", "ConfidencePolicy", "ConfidenceResult", "ConfidenceTier",
    "FixClassification",
    "BaseSpecialist", "SpecialistAgent",
    "AltTextSpecialist", "FocusSpecialist", "NavigationSpecialist",
    "RGB", "ContrastSpecialist", "adjust_color_for_contrast", "contrast_ratio",
    "parse_color", "relative_luminance", "rgb_to_hex",
    "DraggingAlternative", "InteractionSpecialist",
    "GenericAriaHandler",
    "SpecialistRouter",
]
