"""Navigation specialist: keyboard access, tab order and accessible names."""
from __future__ import annotations

import re
from typing import Tuple

from a11yfixer.domains.shared.kernel import (
    AttributeFixParams,
    FixInstruction,
    FixType,
    PageContext,
    Violation,
)

from .base import BaseSpecialist, extract_text_content, matches_any
from .value_objects import FixClassification

_INTERACTIVE_MARKUP = [
    r"<button", r"<a\s", r"<input", r"<select", r"<textarea", r"onclick",
    r"role\s*=\s*[\"'](?:button|link|tab|menuitem)[\"']",
]

_ICON_LABELS = (
    ("search", "Search"), ("menu", "Menu"), ("close", "Close"), ("nav", "Navigation"),
    ("submit", "Submit"), ("cancel", "Cancel"), ("edit", "Edit"), ("delete", "Delete"),
    ("add", "Add"), ("remove", "Remove"),
)


class NavigationSpecialist(BaseSpecialist):
    name = "NavigationSpecialist"
    rule_patterns = (
        r"focus", r"keyboard", r"tabindex", r"focusable", r"skip-link",
        r"bypass", r"link-name", r"button-name",
    )

    async def plan_fix(self, violation: Violation, context: PageContext) -> FixInstruction:
        attribute, value = self.determine_fix(violation)
        return self._instruction(
            violation,
            FixType.ATTRIBUTE,
            AttributeFixParams(attribute=attribute, value=value),
            self._reasoning(violation, attribute, value),
        )

    def classify_fix(self, violation: Violation) -> FixClassification:
        attribute, _ = self.determine_fix(violation)
        if attribute == "aria-label":
            return FixClassification.GENERATED_TEXT
        return FixClassification.ARIA_ATTRIBUTE

    def determine_fix(self, violation: Violation) -> Tuple[str, str]:
        rule_id = violation.rule_id.lower()
        html = violation.html.lower()

        if "tabindex" in rule_id:
            return "tabindex", "0"
        if "focus" in rule_id:
            if "scrollable" in rule_id or matches_any(_INTERACTIVE_MARKUP, html):
                return "tabindex", "0"
            return "tabindex", "-1"
        if "keyboard" in rule_id:
            if "click" in html and "<button" not in html and "<a " not in html:
                return "role", "button"
            return "tabindex", "0"
        if "link-name" in rule_id or "button-name" in rule_id:
            return "aria-label", extract_label(violation.html)
        if "skip" in rule_id or "bypass" in rule_id:
            return "aria-label", "Skip to main content"
        return "tabindex", "0"

    @staticmethod
    def _reasoning(violation: Violation, attribute: str, value: str) -> str:
        if attribute == "tabindex" and value == "0":
            detail = "to include element in keyboard navigation order"
        elif attribute == "tabindex":
            detail = "to allow programmatic focus without adding to tab order"
        elif attribute == "role":
            detail = "to expose the element's purpose to assistive technologies"
        else:
            detail = "to provide an accessible name for the element"
        return f'Adding {attribute}="{value}" {detail}. Rule: {violation.rule_id}'


def extract_label(html: str) -> str:
    """Best-effort accessible name from an element's markup."""
    for attribute in ("aria-label", "title"):
        match = re.search(rf"{attribute}\s*=\s*[\"']([^\"']+)[\"']", html, re.IGNORECASE)
        if match and match.group(1).strip():
            return match.group(1).strip()

    text = extract_text_content(html)
    if text:
        return text

    lowered = html.lower()
    for keyword, label in _ICON_LABELS:
        if keyword in lowered:
            return label
    return "Interactive element"
