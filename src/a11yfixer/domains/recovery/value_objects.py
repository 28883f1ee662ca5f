"""Recovery Domain Value Objects.

Immutable types that carry no identity. Equality is structural.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from a11yfixer.domains.shared.kernel import ElementSummary, FixInstruction, HandoffItem


class RecoveryAction(str, enum.Enum):
    """Terminal action chosen for a single failure.

    Retrying across attempts belongs to the caller; each recovery call
    returns exactly one of these.
    """
    SELECTOR_CORRECTED = "selector_corrected"
    TEXT_IMPROVED = "text_improved"
    ROLLED_BACK = "rolled_back"
    RETRY = "retry"
    HANDOFF = "handoff"


class VerificationFailureType(str, enum.Enum):
    VAGUE_TEXT = "vague_text"
    REDUNDANT_TEXT = "redundant_text"
    NEW_VIOLATION = "new_violation"
    OTHER = "other"


class SuggestedAction(str, enum.Enum):
    IMPROVE_TEXT = "improve_text"
    ROLLBACK = "rollback"
    RETRY = "retry"


SUGGESTED_ACTIONS: Dict[VerificationFailureType, SuggestedAction] = {
    VerificationFailureType.VAGUE_TEXT: SuggestedAction.IMPROVE_TEXT,
    VerificationFailureType.REDUNDANT_TEXT: SuggestedAction.IMPROVE_TEXT,
    VerificationFailureType.NEW_VIOLATION: SuggestedAction.ROLLBACK,
    VerificationFailureType.OTHER: SuggestedAction.RETRY,
}


@dataclass(frozen=True)
class FailurePattern:
    """Maps a verifier message regex to a VerificationFailureType.

    Attributes:
        failure_type: The category this pattern detects.
        pattern: Compiled regex (case-insensitive matching).
        priority: Higher values are matched first.
        reason: Human-readable explanation reported with the match.
    """
    failure_type: VerificationFailureType
    pattern: re.Pattern  # type: ignore[type-arg]
    priority: int = 0
    reason: str = ""

    @classmethod
    def from_string(
        cls,
        failure_type: VerificationFailureType,
        pattern_str: str,
        priority: int = 0,
        reason: str = "",
    ) -> FailurePattern:
        return cls(
            failure_type=failure_type,
            pattern=re.compile(pattern_str, re.IGNORECASE),
            priority=priority,
            reason=reason,
        )

    def matches(self, message: str) -> bool:
        return bool(self.pattern.search(message))


DEFAULT_FAILURE_PATTERNS: Tuple[FailurePattern, ...] = (
    FailurePattern.from_string(
        VerificationFailureType.VAGUE_TEXT,
        r"vague|non-descriptive|generic|unclear",
        priority=30,
        reason="Text is too vague or non-descriptive",
    ),
    FailurePattern.from_string(
        VerificationFailureType.REDUNDANT_TEXT,
        r"redundant|duplicate|repetitive",
        priority=20,
        reason="Text is redundant with surrounding content",
    ),
    FailurePattern.from_string(
        VerificationFailureType.NEW_VIOLATION,
        r"new violation|introduced",
        priority=10,
        reason="Fix introduced a new violation",
    ),
)


@dataclass(frozen=True)
class RecoveryResult:
    """Outcome of fuzzy-matching a stale selector against a page structure.

    ``corrected_selector`` and ``matched_element`` are reported even when
    the score is below the acceptance threshold; callers must check
    ``success`` before applying a correction.
    """
    success: bool
    original_selector: str
    confidence: float = 0.0
    corrected_selector: Optional[str] = None
    matched_element: Optional[ElementSummary] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "success": self.success,
            "original_selector": self.original_selector,
            "confidence": round(self.confidence, 4),
        }
        if self.corrected_selector is not None:
            d["corrected_selector"] = self.corrected_selector
        if self.matched_element is not None:
            d["matched_element"] = self.matched_element.to_dict()
        if self.reason:
            d["reason"] = self.reason
        return d


@dataclass(frozen=True)
class VerificationFailureAnalysis:
    failure_type: VerificationFailureType
    reason: str
    suggested_action: SuggestedAction
    improved_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "failure_type": self.failure_type.value,
            "reason": self.reason,
            "suggested_action": self.suggested_action.value,
        }
        if self.improved_text is not None:
            d["improved_text"] = self.improved_text
        return d


@dataclass(frozen=True)
class RecoveryDecision:
    """The single terminal action returned for one failure.

    Attributes:
        success: True when the failure was recovered without a human.
        action: What the caller should do next.
        details: Human-readable reason for the decision.
        corrected_instruction: Instruction to re-apply, when any.
        handoff: Present on every ``handoff`` decision.
        selector_recovery: Fuzzy-match result, when one was attempted.
    """
    success: bool
    action: RecoveryAction
    details: str
    corrected_instruction: Optional[FixInstruction] = None
    handoff: Optional[HandoffItem] = None
    selector_recovery: Optional[RecoveryResult] = None

    @property
    def is_handoff(self) -> bool:
        return self.action is RecoveryAction.HANDOFF

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "success": self.success,
            "action": self.action.value,
            "details": self.details,
        }
        if self.corrected_instruction is not None:
            d["corrected_instruction"] = self.corrected_instruction.to_dict()
        if self.handoff is not None:
            d["handoff"] = self.handoff.to_dict()
        if self.selector_recovery is not None:
            d["selector_recovery"] = self.selector_recovery.to_dict()
        return d
