"""Specialist agent contract.

A specialist handles one family of violations. It decides whether it can
handle a violation from the rule id alone, plans a fix from the violation
plus page context, and scores its own confidence with a static lookup.
"""
from __future__ import annotations

import itertools
import logging
import re
import time
from abc import ABC, abstractmethod
from typing import ClassVar, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from a11yfixer.config import RecoveryConfig
from a11yfixer.domains.shared.kernel import (
    FixInstruction,
    FixParams,
    FixType,
    HandoffItem,
    PageContext,
    Violation,
)

from .value_objects import (
    ConfidenceAdjustment,
    ConfidencePolicy,
    ConfidenceResult,
    FixClassification,
    policy_for,
)

logger = logging.getLogger(__name__)

_fix_sequence = itertools.count(1)


@runtime_checkable
class SpecialistAgent(Protocol):
    """Interface shared by every registered specialist."""

    name: str

    def can_handle(self, violation: Violation) -> bool: ...

    async def plan_fix(self, violation: Violation, context: PageContext) -> FixInstruction: ...

    def calculate_confidence(self, violation: Violation) -> ConfidenceResult: ...

    def create_human_handoff(self, violation: Violation) -> HandoffItem: ...


class BaseSpecialist(ABC):
    """Common behaviour for specialists.

    Subclasses set ``name`` and ``rule_patterns`` (regexes searched
    case-insensitively in the rule id) and implement ``plan_fix`` and
    ``classify_fix``.
    """

    name: ClassVar[str] = "BaseSpecialist"
    rule_patterns: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, config: Optional[RecoveryConfig] = None) -> None:
        self._policy: ConfidencePolicy = policy_for(config)
        self._patterns = tuple(re.compile(p, re.IGNORECASE) for p in self.rule_patterns)

    @property
    def policy(self) -> ConfidencePolicy:
        return self._policy

    def can_handle(self, violation: Violation) -> bool:
        rule_id = getattr(violation, "rule_id", None)
        if not isinstance(rule_id, str):
            return False
        return any(pattern.search(rule_id) for pattern in self._patterns)

    @abstractmethod
    async def plan_fix(self, violation: Violation, context: PageContext) -> FixInstruction:
        """Return the fix instruction for ``violation``."""

    @abstractmethod
    def classify_fix(self, violation: Violation) -> FixClassification:
        """Coarse classification of the fix ``plan_fix`` would produce."""

    def confidence_adjustments(self, violation: Violation) -> Iterable[ConfidenceAdjustment]:
        return ()

    def calculate_confidence(self, violation: Violation) -> ConfidenceResult:
        return self._policy.evaluate(
            self.classify_fix(violation), self.confidence_adjustments(violation)
        )

    def create_human_handoff(self, violation: Violation) -> HandoffItem:
        return HandoffItem(
            violation_id=violation.id,
            rule_id=violation.rule_id,
            selector=violation.selector,
            reason=f"{self.name} cannot safely auto-fix {violation.rule_id}",
            suggested_action="Review the element and apply the fix manually",
        )

    def _generate_fix_id(self, violation: Violation) -> str:
        # the sequence keeps ids unique within one millisecond
        return f"fix-{violation.id}-{int(time.time() * 1000)}-{next(_fix_sequence)}"

    def _instruction(
        self,
        violation: Violation,
        fix_type: FixType,
        params: FixParams,
        reasoning: str,
    ) -> FixInstruction:
        instruction = FixInstruction(
            type=fix_type,
            selector=violation.selector,
            violation_id=violation.id,
            reasoning=reasoning,
            params=params,
            fix_id=self._generate_fix_id(violation),
            rule_id=violation.rule_id,
        )
        logger.debug("%s planned %s fix for %s", self.name, fix_type.value, violation.id)
        return instruction


def extract_text_content(html: str, max_length: int = 50) -> Optional[str]:
    """First text node of an HTML fragment, if short enough to use as a label."""
    match = re.search(r">([^<]+)<", html)
    if match:
        text = match.group(1).strip()
        if text and len(text) <= max_length:
            return text
    return None


def matches_any(patterns: List[str], text: str) -> bool:
    return any(re.search(p, text, re.IGNORECASE) for p in patterns)
