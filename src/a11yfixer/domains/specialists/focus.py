"""Focus specialist for focus-obscured and focus-appearance rules (WCAG 2.4.11-2.4.13)."""
from __future__ import annotations

from typing import Dict, List, Tuple

from a11yfixer.domains.shared.kernel import (
    FixInstruction,
    FixType,
    PageContext,
    StyleFixParams,
    Violation,
)

from .base import BaseSpecialist
from .value_objects import ConfidenceAdjustment, FixClassification

CUSTOM_COMPONENT_PENALTY = 15
STACKING_PENALTY = 10


class FocusSpecialist(BaseSpecialist):
    """Keeps focused elements visible with CSS-only changes."""

    name = "FocusSpecialist"
    rule_patterns = (
        r"focus-not-obscured", r"focus-obscured", r"focus-visible", r"focus-appearance",
        r"2\.4\.11", r"2\.4\.12", r"2\.4\.13",
    )

    async def plan_fix(self, violation: Violation, context: PageContext) -> FixInstruction:
        css_class, styles, description = self._strategy(violation)
        reasoning = (
            f"WCAG 2.2 Focus Fix: {description}. "
            f'This addresses violation "{violation.rule_id}" on element "{violation.selector}".'
        )
        return self._instruction(
            violation,
            FixType.STYLE,
            StyleFixParams(styles=styles, css_class=css_class),
            reasoning,
        )

    def classify_fix(self, violation: Violation) -> FixClassification:
        return FixClassification.CSS_ONLY

    def confidence_adjustments(self, violation: Violation) -> List[ConfidenceAdjustment]:
        adjustments = []
        selector = violation.selector.lower()
        if "[class*=custom" in selector.replace('"', "").replace("'", "") or "[data-" in selector:
            adjustments.append(
                ConfidenceAdjustment(CUSTOM_COMPONENT_PENALTY, "Custom component detected")
            )
        description = violation.description.lower()
        if "z-index" in description or "stacking" in description:
            adjustments.append(
                ConfidenceAdjustment(STACKING_PENALTY, "Z-index modification may affect layout")
            )
        return adjustments

    @staticmethod
    def _strategy(violation: Violation) -> Tuple[str, Dict[str, str], str]:
        rule_id = violation.rule_id.lower()
        if "obscured" in rule_id or "2.4.11" in rule_id or "2.4.12" in rule_id:
            return (
                "a11y-focus-visible",
                {
                    "scroll-margin-top": "80px",
                    "scroll-margin-bottom": "80px",
                    "position": "relative",
                    "z-index": "1",
                },
                "Add scroll-margin to prevent focus being obscured by sticky elements",
            )
        if "appearance" in rule_id or "2.4.13" in rule_id:
            return (
                "a11y-focus-indicator",
                {"outline": "2px solid #005fcc", "outline-offset": "2px", "border-radius": "2px"},
                "Add visible focus indicator",
            )
        return (
            "a11y-focus-default",
            {"scroll-margin-top": "80px", "outline": "2px solid currentColor", "outline-offset": "2px"},
            "Add default focus visibility improvements",
        )
