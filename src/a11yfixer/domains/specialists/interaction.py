"""Interaction specialist: dragging movements (2.5.7) and target size (2.5.8).

Target-size fixes are CSS only and can be applied automatically. Dragging
fixes need a single-pointer alternative written in JavaScript, so the
planned instruction only marks the element and the violation is meant to
be handed off.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from a11yfixer.domains.shared.kernel import (
    AttributeFixParams,
    FixInstruction,
    FixType,
    HandoffItem,
    PageContext,
    StyleFixParams,
    Violation,
)

from .base import BaseSpecialist
from .value_objects import FixClassification

MIN_TARGET_SIZE = "24px"
NEEDS_ALTERNATIVE_ATTRIBUTE = "data-a11y-needs-alternative"


@dataclass(frozen=True)
class DraggingAlternative:
    """Suggested single-pointer replacement for a drag interaction."""
    kind: str
    description: str
    code_example: str


SLIDER_ALTERNATIVE = DraggingAlternative(
    kind="input",
    description="Add a number input for precise value entry",
    code_example='<input type="number" id="slider-value" value="50" min="0" max="100">',
)
SORTABLE_ALTERNATIVE = DraggingAlternative(
    kind="button",
    description='Add "Move Up" and "Move Down" buttons for each item',
    code_example=(
        '<button aria-label="Move item up">Up</button>\n'
        '<button aria-label="Move item down">Down</button>'
    ),
)
MAP_ALTERNATIVE = DraggingAlternative(
    kind="button",
    description="Add pan controls (north, south, west, east) and a search input",
    code_example=(
        '<button aria-label="Pan north">N</button>\n'
        '<button aria-label="Pan south">S</button>\n'
        '<input type="text" placeholder="Search location...">'
    ),
)
GENERIC_ALTERNATIVE = DraggingAlternative(
    kind="button",
    description="Provide click-based alternatives to the drag operation",
    code_example='<button aria-label="Move to position">Move</button>',
)

_SLIDER_RE = re.compile(r"\b(?:slider|range)s?\b")
_SORTABLE_RE = re.compile(r"\b(?:sortable|kanban|draggable)\b")
_MAP_RE = re.compile(r"\bmaps?\b")


class InteractionSpecialist(BaseSpecialist):
    name = "InteractionSpecialist"
    rule_patterns = (r"dragging", r"drag-movements", r"target-size", r"pointer", r"2\.5\.7", r"2\.5\.8")

    @staticmethod
    def is_target_size(violation: Violation) -> bool:
        rule_id = violation.rule_id.lower()
        return "target-size" in rule_id or "2.5.8" in rule_id

    async def plan_fix(self, violation: Violation, context: PageContext) -> FixInstruction:
        if self.is_target_size(violation):
            return self._instruction(
                violation,
                FixType.STYLE,
                StyleFixParams(
                    styles={
                        "min-width": MIN_TARGET_SIZE,
                        "min-height": MIN_TARGET_SIZE,
                        "padding": "4px",
                        "touch-action": "manipulation",
                    },
                    css_class="a11y-target-size",
                ),
                f'WCAG 2.2 Target Size Fix (2.5.8): Element "{violation.selector}" is below '
                "the 24x24 CSS pixel minimum; applying minimum dimensions.",
            )

        alternative = self.suggest_alternative(violation)
        return self._instruction(
            violation,
            FixType.ATTRIBUTE,
            AttributeFixParams(attribute=NEEDS_ALTERNATIVE_ATTRIBUTE, value="true"),
            f'WCAG 2.2 Dragging Movements (2.5.7): Element "{violation.selector}" relies on '
            "dragging without a single-pointer alternative. REQUIRES HUMAN REVIEW: implement "
            f"a {alternative.kind}-based alternative. Suggested: {alternative.description}",
        )

    def classify_fix(self, violation: Violation) -> FixClassification:
        if self.is_target_size(violation):
            return FixClassification.CSS_ONLY
        return FixClassification.BEHAVIORAL

    @staticmethod
    def suggest_alternative(violation: Violation) -> DraggingAlternative:
        """Pick an alternative by whole-word keyword in the markup, rule id or selector."""
        haystack = " ".join((violation.html, violation.rule_id, violation.selector)).lower()
        if _SLIDER_RE.search(haystack):
            return SLIDER_ALTERNATIVE
        if _SORTABLE_RE.search(haystack):
            return SORTABLE_ALTERNATIVE
        if _MAP_RE.search(haystack):
            return MAP_ALTERNATIVE
        return GENERIC_ALTERNATIVE

    def create_human_handoff(self, violation: Violation) -> HandoffItem:
        alternative = self.suggest_alternative(violation)
        return HandoffItem(
            violation_id=violation.id,
            rule_id=violation.rule_id,
            selector=violation.selector,
            reason=(
                "Dragging functionality requires JavaScript implementation "
                "of a single-pointer alternative"
            ),
            suggested_action=(
                f"Implement {alternative.kind}-based alternative: {alternative.description}"
            ),
        )
