"""Specialist Domain Value Objects.

Confidence is a static lookup keyed by a coarse fix classification, not a
learned score. Identical violations always yield identical results.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from a11yfixer.config import DEFAULT_CONFIG, RecoveryConfig


class ConfidenceTier(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FixClassification(str, enum.Enum):
    """Coarse kind of change a fix makes to the page.

    CSS_ONLY: presentation only, no behaviour change.
    ARIA_ATTRIBUTE: semantic attribute with a fixed, known value.
    GENERATED_TEXT: text written on the page's behalf (alt, labels).
    BEHAVIORAL: needs new interactive behaviour (e.g. drag alternatives).
    """
    CSS_ONLY = "css_only"
    ARIA_ATTRIBUTE = "aria_attribute"
    GENERATED_TEXT = "generated_text"
    BEHAVIORAL = "behavioral"


@dataclass(frozen=True)
class ConfidenceResult:
    tier: ConfidenceTier
    value: int
    factors: Tuple[str, ...]
    requires_human_review: bool

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 100:
            raise ValueError(f"Confidence value must be within [0, 100], got {self.value}")
        object.__setattr__(self, "factors", tuple(self.factors))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier.value,
            "value": self.value,
            "factors": list(self.factors),
            "requires_human_review": self.requires_human_review,
        }


@dataclass(frozen=True)
class ConfidenceAdjustment:
    """A deterministic penalty applied on top of the base lookup."""
    penalty: int
    factor: str


_BASE_FACTORS: Dict[FixClassification, Tuple[str, ...]] = {
    FixClassification.CSS_ONLY: ("CSS-only fix", "No functionality changes"),
    FixClassification.ARIA_ATTRIBUTE: ("ARIA attribute change", "No visual changes"),
    FixClassification.GENERATED_TEXT: (
        "Generated text content",
        "Text accuracy should be reviewed",
    ),
    FixClassification.BEHAVIORAL: (
        "Requires JavaScript implementation",
        "Alternative interface must be created",
        "Functional testing required",
    ),
}


@dataclass(frozen=True)
class ConfidencePolicy:
    """Lookup table from fix classification to confidence.

    Values come from RecoveryConfig:
        css_only        85  medium
        aria_attribute  80  medium
        generated_text  70  low, human review
        behavioral      30  low, human review

    Tier is ``high`` at or above ``high_tier_min`` (95), ``medium`` at or
    above ``medium_tier_min`` (80), else ``low``. Low tiers always require
    human review.
    """
    config: RecoveryConfig = DEFAULT_CONFIG

    def base_value(self, classification: FixClassification) -> int:
        return {
            FixClassification.CSS_ONLY: self.config.css_only_confidence,
            FixClassification.ARIA_ATTRIBUTE: self.config.aria_attribute_confidence,
            FixClassification.GENERATED_TEXT: self.config.generated_text_confidence,
            FixClassification.BEHAVIORAL: self.config.behavioral_confidence,
        }[classification]

    def tier_for(self, value: int) -> ConfidenceTier:
        if value >= self.config.high_tier_min:
            return ConfidenceTier.HIGH
        if value >= self.config.medium_tier_min:
            return ConfidenceTier.MEDIUM
        return ConfidenceTier.LOW

    def evaluate(
        self,
        classification: FixClassification,
        adjustments: Iterable[ConfidenceAdjustment] = (),
    ) -> ConfidenceResult:
        value = self.base_value(classification)
        factors = list(_BASE_FACTORS[classification])
        for adjustment in adjustments:
            value -= adjustment.penalty
            factors.append(adjustment.factor)
        value = max(0, min(100, value))
        tier = self.tier_for(value)
        return ConfidenceResult(
            tier=tier,
            value=value,
            factors=tuple(factors),
            requires_human_review=tier is ConfidenceTier.LOW,
        )


def policy_for(config: Optional[RecoveryConfig]) -> ConfidencePolicy:
    return ConfidencePolicy(config or DEFAULT_CONFIG)
