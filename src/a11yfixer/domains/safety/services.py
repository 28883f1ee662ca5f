"""Safety checks run on fix instructions before they reach the executor.

A fix is destructive when it targets an interactive element (button,
link, form control or form) and empties a critical attribute or clears
the element's text. Destructive fixes are never applied; they become a
DESTRUCTIVE_CHANGE error, which recovery hands off to a human.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from pydantic import ValidationError

from a11yfixer.domains.shared.kernel import (
    AttributeFixParams,
    ContentFixParams,
    FixInstruction,
    InjectorError,
    InjectorErrorCode,
)
from a11yfixer.domains.shared.schemas import FixInstructionPayload

logger = logging.getLogger(__name__)

INTERACTIVE_TAGS: Tuple[str, ...] = ("button", "a", "input", "select", "textarea", "form")
CRITICAL_ATTRIBUTES = frozenset({"href", "type", "name", "action", "method"})

_INTERACTIVE_RE = re.compile(
    r"(?:^|[\s>+~,])(?:" + "|".join(INTERACTIVE_TAGS) + r")(?=$|[.#\[\s:>+~,])",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


class SafetyValidator:
    """Stateless checks shared by the orchestrator and the executor adapter."""

    def is_interactive_selector(self, selector: str) -> bool:
        return bool(_INTERACTIVE_RE.search(selector.strip()))

    def is_destructive(self, instruction: FixInstruction) -> bool:
        if not self.is_interactive_selector(instruction.selector):
            return False
        params = instruction.params
        if isinstance(params, AttributeFixParams):
            return params.attribute.lower() in CRITICAL_ATTRIBUTES and params.value == ""
        if isinstance(params, ContentFixParams):
            return params.inner_text.strip() == ""
        return False

    def validate_payload(
        self, payload: Union[FixInstruction, Mapping[str, Any]]
    ) -> ValidationResult:
        """Schema and safety validation. Problems are reported, never raised."""
        if isinstance(payload, FixInstruction):
            instruction = payload
        else:
            try:
                instruction = FixInstructionPayload.model_validate(payload).to_domain()
            except ValidationError as e:
                return ValidationResult(valid=False, errors=tuple(_format_errors(e)))

        errors: List[str] = []
        warnings: List[str] = []
        if self.is_destructive(instruction):
            errors.append(
                "Destructive change detected: fix would modify interactive element "
                f'"{instruction.selector}" in a way that could break functionality'
            )
        if self.is_interactive_selector(instruction.selector):
            warnings.append(
                f'Modifying interactive element "{instruction.selector}" - '
                "verify functionality after fix"
            )
        if errors:
            logger.warning("Rejected fix for %s: %s", instruction.selector, "; ".join(errors))
        return ValidationResult(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))

    @staticmethod
    def create_destructive_change_error(instruction: FixInstruction) -> InjectorError:
        return InjectorError(
            code=InjectorErrorCode.DESTRUCTIVE_CHANGE,
            message=f"Fix would delete or break interactive element: {instruction.selector}",
            selector=instruction.selector,
            details={"fix_type": instruction.type.value, "violation_id": instruction.violation_id},
        )

    @staticmethod
    def create_validation_failed_error(selector: str, errors: Sequence[str]) -> InjectorError:
        return InjectorError(
            code=InjectorErrorCode.VALIDATION_FAILED,
            message=f"Fix instruction validation failed: {'; '.join(errors)}",
            selector=selector,
            details={"validation_errors": list(errors)},
        )


def _format_errors(error: ValidationError) -> List[str]:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "instruction"
        messages.append(f"{location}: {item.get('msg', 'invalid value')}")
    return messages
