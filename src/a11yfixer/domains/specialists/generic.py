"""Fallback handler for violations no registered specialist claims."""
from __future__ import annotations

from typing import Tuple

from a11yfixer.domains.shared.kernel import (
    AttributeFixParams,
    FixInstruction,
    FixType,
    PageContext,
    Violation,
)

from .base import BaseSpecialist, extract_text_content
from .value_objects import FixClassification

_ELEMENT_LABELS = (
    ("<button", "Button"), ("<a ", "Link"), ("<input", "Input field"),
    ("<select", "Selection"), ("<nav", "Navigation"), ("<main", "Main content"),
    ("<aside", "Sidebar"), ("<footer", "Footer"), ("<header", "Header"),
)

_ROLE_HINTS = (
    (("<nav", "navigation"), "navigation"), (("<main",), "main"),
    (("<aside",), "complementary"), (("<footer",), "contentinfo"),
    (("<header",), "banner"), (("<form",), "form"), (("<search",), "search"),
    (("onclick", "click"), "button"), (("menu",), "menu"), (("tab",), "tab"),
    (("dialog", "modal"), "dialog"), (("alert",), "alert"), (("list",), "list"),
    (("table",), "table"), (("img", "image"), "img"),
)

_STATE_ATTRIBUTES = ("pressed", "checked", "selected", "expanded", "disabled")


class GenericAriaHandler(BaseSpecialist):
    """Applies a generic ARIA attribute fix. Accepts every violation."""

    name = "GenericAriaHandler"
    rule_patterns = (r".*",)

    def can_handle(self, violation: Violation) -> bool:
        return True

    async def plan_fix(self, violation: Violation, context: PageContext) -> FixInstruction:
        attribute, value = self.determine_fix(violation)
        return self._instruction(
            violation,
            FixType.ATTRIBUTE,
            AttributeFixParams(attribute=attribute, value=value),
            f'Applying generic ARIA fix: {attribute}="{value}". Rule: {violation.rule_id}',
        )

    def classify_fix(self, violation: Violation) -> FixClassification:
        attribute, _ = self.determine_fix(violation)
        if attribute == "aria-label":
            return FixClassification.GENERATED_TEXT
        return FixClassification.ARIA_ATTRIBUTE

    def determine_fix(self, violation: Violation) -> Tuple[str, str]:
        rule_id = violation.rule_id.lower()
        if "label" in rule_id or "name" in rule_id:
            return "aria-label", self.extract_label(violation)
        if "role" in rule_id or "landmark" in rule_id:
            return "role", self.infer_role(violation)
        if "aria-" in rule_id and "state" in rule_id:
            for state in _STATE_ATTRIBUTES:
                if state in rule_id:
                    return f"aria-{state}", "false"
            return "aria-label", self.extract_label(violation)
        if "hidden" in rule_id or "visible" in rule_id:
            return "aria-hidden", "false"
        if "required" in rule_id:
            return "aria-required", "true"
        if "invalid" in rule_id or "error" in rule_id:
            return "aria-invalid", "true"
        if "expand" in rule_id:
            return "aria-expanded", "false"
        return "aria-label", self.extract_label(violation)

    @staticmethod
    def extract_label(violation: Violation) -> str:
        if violation.help:
            label = violation.help.strip()
            if label.lower().startswith("ensure "):
                label = label[len("ensure "):].strip()
            if label and len(label) <= 50:
                return label
        text = extract_text_content(violation.html)
        if text:
            return text
        html = violation.html.lower()
        for marker, label in _ELEMENT_LABELS:
            if marker in html:
                return label
        return "Interactive element"

    @staticmethod
    def infer_role(violation: Violation) -> str:
        html = violation.html.lower()
        for markers, role in _ROLE_HINTS:
            if any(marker in html for marker in markers):
                return role
        return "region"
