"""Recovery Domain Services.

ErrorRecoveryService decides what to do with one failed fix:

- ``recover_from_selector_error``: fuzzy-match a stale selector against
  the cached page structure.
- ``analyze_verification_failure``: classify free-text verifier feedback.
- ``recover_from_injector_error``: single-step dispatch over the closed
  InjectorError taxonomy.

Every call returns a typed result. Nothing here raises for a business
outcome, and anything that cannot be recovered ends in a HandoffItem.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from a11yfixer.config import DEFAULT_CONFIG, RecoveryConfig
from a11yfixer.domains.shared.events import EventPublisher
from a11yfixer.domains.shared.kernel import (
    AttributeFixParams,
    ContentFixParams,
    FixInstruction,
    HandoffItem,
    InjectorError,
    InjectorErrorCode,
    PageStructure,
)
from a11yfixer.domains.snapshot.services import LivePage, RollbackManager

from .entities import PageStructureCache
from .events import (
    HandoffCreated,
    SelectorRecovered,
    SelectorRecoveryFailed,
    VerificationFailureClassified,
)
from .matching import SelectorMatcher
from .text import TextImprover
from .value_objects import (
    DEFAULT_FAILURE_PATTERNS,
    SUGGESTED_ACTIONS,
    FailurePattern,
    RecoveryAction,
    RecoveryDecision,
    RecoveryResult,
    SuggestedAction,
    VerificationFailureAnalysis,
    VerificationFailureType,
)

logger = logging.getLogger(__name__)

TEXT_ATTRIBUTES = frozenset({"alt", "aria-label", "title"})

_HANDOFF_ACTIONS = {
    InjectorErrorCode.SELECTOR_NOT_FOUND: (
        "Locate the element manually and update the fix selector"
    ),
    InjectorErrorCode.CONTENT_CHANGED: "Re-run the audit on the current page and regenerate the fix",
    InjectorErrorCode.DESTRUCTIVE_CHANGE: (
        "Review the fix manually; it would remove or alter interactive functionality"
    ),
}
_DEFAULT_HANDOFF_ACTION = "Review the failure and apply the fix manually"


@dataclass
class ErrorRecoveryService:
    """Central decision engine for failed fix attempts.

    Each instance owns its own page-structure cache unless one is handed
    in, so orchestrator sessions never share recovery state.
    """
    rollback_manager: RollbackManager = field(default_factory=RollbackManager)
    structure_cache: PageStructureCache = field(default_factory=PageStructureCache)
    config: RecoveryConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    event_publisher: Optional[EventPublisher] = None
    matcher: Optional[SelectorMatcher] = None
    text_improver: TextImprover = field(default_factory=TextImprover)
    failure_patterns: Sequence[FailurePattern] = DEFAULT_FAILURE_PATTERNS

    def __post_init__(self) -> None:
        if self.matcher is None:
            self.matcher = SelectorMatcher(config=self.config)
        self._patterns: List[FailurePattern] = sorted(
            self.failure_patterns, key=lambda p: p.priority, reverse=True
        )

    # ------------------------------------------------------------------
    # Page structure cache
    # ------------------------------------------------------------------

    def set_page_structure(self, structure: PageStructure) -> None:
        self.structure_cache.set(structure)

    def get_page_structure(self) -> Optional[PageStructure]:
        return self.structure_cache.get()

    def clear_page_structure(self) -> None:
        self.structure_cache.clear()

    # ------------------------------------------------------------------
    # Selector recovery
    # ------------------------------------------------------------------

    def recover_from_selector_error(
        self, original_selector: str, page_structure: PageStructure
    ) -> RecoveryResult:
        """Fuzzy-match ``original_selector`` against the page structure."""
        assert self.matcher is not None
        result = self.matcher.match(original_selector, page_structure)
        if result.success and result.corrected_selector is not None:
            self._publish(
                SelectorRecovered(
                    original_selector=original_selector,
                    corrected_selector=result.corrected_selector,
                    confidence=result.confidence,
                )
            )
        else:
            self._publish(
                SelectorRecoveryFailed(
                    original_selector=original_selector,
                    confidence=result.confidence,
                    reason=result.reason or "",
                )
            )
        return result

    @staticmethod
    def create_corrected_instruction(
        instruction: FixInstruction, corrected_selector: str
    ) -> FixInstruction:
        return instruction.with_selector(corrected_selector)

    # ------------------------------------------------------------------
    # Verification failures
    # ------------------------------------------------------------------

    def analyze_verification_failure(
        self,
        message: str,
        original_text: Optional[str] = None,
        context: Optional[str] = None,
    ) -> VerificationFailureAnalysis:
        """Classify verifier feedback into a closed failure type.

        Patterns are tested in priority order; the first match wins and
        unmatched messages are ``other``.
        """
        failure_type = VerificationFailureType.OTHER
        reason = message
        for pattern in self._patterns:
            if pattern.matches(message):
                failure_type = pattern.failure_type
                break

        suggested = SUGGESTED_ACTIONS[failure_type]
        improved_text = None
        if suggested is SuggestedAction.IMPROVE_TEXT:
            improved_text = self.text_improver.improve(original_text, failure_type, context)

        logger.debug("Verification failure classified as %s: %s", failure_type.value, message)
        self._publish(
            VerificationFailureClassified(
                message=message,
                failure_type=failure_type.value,
                suggested_action=suggested.value,
            )
        )
        return VerificationFailureAnalysis(
            failure_type=failure_type,
            reason=reason,
            suggested_action=suggested,
            improved_text=improved_text,
        )

    @staticmethod
    def create_improved_text_instruction(
        original: FixInstruction, improved_text: str
    ) -> FixInstruction:
        """Rewrite only the text-bearing parameter of ``original``.

        Content fixes get a new ``inner_text``; attribute fixes get a new
        value only for ``alt``, ``aria-label`` and ``title``. Anything else
        is returned unchanged.
        """
        params = original.params
        if isinstance(params, ContentFixParams):
            return original.with_params(
                ContentFixParams(
                    inner_text=improved_text,
                    original_text_hash=params.original_text_hash,
                )
            )
        if isinstance(params, AttributeFixParams) and params.attribute.lower() in TEXT_ATTRIBUTES:
            return original.with_params(
                AttributeFixParams(attribute=params.attribute, value=improved_text)
            )
        return original

    @staticmethod
    def extract_text(instruction: FixInstruction) -> Optional[str]:
        params = instruction.params
        if isinstance(params, ContentFixParams):
            return params.inner_text
        if isinstance(params, AttributeFixParams) and params.attribute.lower() in TEXT_ATTRIBUTES:
            return params.value
        return None

    async def trigger_rollback(self, page: LivePage, snapshot_id: str) -> bool:
        """Undo a fix that introduced a new violation. Never raises."""
        return await self.rollback_manager.rollback(page, snapshot_id)

    async def recover_from_verification_failure(
        self,
        page: LivePage,
        message: str,
        instruction: FixInstruction,
        snapshot_id: Optional[str] = None,
        context: Optional[str] = None,
    ) -> RecoveryDecision:
        analysis = self.analyze_verification_failure(
            message, self.extract_text(instruction), context
        )

        if analysis.suggested_action is SuggestedAction.IMPROVE_TEXT and analysis.improved_text:
            improved = self.create_improved_text_instruction(instruction, analysis.improved_text)
            if improved is not instruction:
                logger.info(
                    "Improved text for %s (%s)", instruction.selector, analysis.failure_type.value
                )
                return RecoveryDecision(
                    success=True,
                    action=RecoveryAction.TEXT_IMPROVED,
                    details=f"Text improved for {analysis.failure_type.value} issue",
                    corrected_instruction=improved,
                )

        elif analysis.suggested_action is SuggestedAction.ROLLBACK:
            if snapshot_id and await self.trigger_rollback(page, snapshot_id):
                return RecoveryDecision(
                    success=True,
                    action=RecoveryAction.ROLLED_BACK,
                    details=f"Rolled back fix that caused: {analysis.reason}",
                )

        elif analysis.suggested_action is SuggestedAction.RETRY:
            return RecoveryDecision(
                success=True,
                action=RecoveryAction.RETRY,
                details="Retrying with original instruction",
                corrected_instruction=instruction,
            )

        return self._handoff(
            instruction,
            details=f"Could not recover from verification failure: {analysis.reason}",
            suggested_action="Review the verifier feedback and fix the element manually",
        )

    # ------------------------------------------------------------------
    # Executor failures
    # ------------------------------------------------------------------

    def recover_from_injector_error(
        self,
        error: InjectorError,
        instruction: FixInstruction,
        page_structure: Optional[PageStructure] = None,
    ) -> RecoveryDecision:
        """Return the one terminal action warranted by an executor failure.

        ``page_structure`` falls back to the cache. Only SELECTOR_NOT_FOUND
        can be recovered automatically; every other code is handed off.
        """
        code = error.code
        structure = page_structure if page_structure is not None else self.structure_cache.get()

        if code is InjectorErrorCode.SELECTOR_NOT_FOUND:
            if structure is None:
                return self._handoff(
                    instruction,
                    details=(
                        "SELECTOR_NOT_FOUND error but no page structure available "
                        "for fuzzy matching"
                    ),
                    suggested_action=_HANDOFF_ACTIONS[code],
                )

            recovery = self.recover_from_selector_error(instruction.selector, structure)
            if recovery.success and recovery.corrected_selector:
                corrected = self.create_corrected_instruction(
                    instruction, recovery.corrected_selector
                )
                logger.info(
                    "Selector corrected from %s to %s (confidence %.2f)",
                    instruction.selector, recovery.corrected_selector, recovery.confidence,
                )
                return RecoveryDecision(
                    success=True,
                    action=RecoveryAction.SELECTOR_CORRECTED,
                    details=(
                        f'Selector corrected from "{instruction.selector}" to '
                        f'"{recovery.corrected_selector}" '
                        f"(confidence: {recovery.confidence * 100:.0f}%)"
                    ),
                    corrected_instruction=corrected,
                    selector_recovery=recovery,
                )
            return self._handoff(
                instruction,
                details=f"Could not find matching element: {recovery.reason}",
                suggested_action=_HANDOFF_ACTIONS[code],
                selector_recovery=recovery,
            )

        if code is InjectorErrorCode.CONTENT_CHANGED:
            return self._handoff(
                instruction,
                details="Content changed since audit - re-audit required",
                suggested_action=_HANDOFF_ACTIONS[code],
            )

        if code is InjectorErrorCode.DESTRUCTIVE_CHANGE:
            return self._handoff(
                instruction,
                details="Fix would cause destructive change - human review required",
                suggested_action=_HANDOFF_ACTIONS[code],
            )

        return self._handoff(
            instruction,
            details=f"Unrecoverable error: {code.value} - {error.message}",
            suggested_action=_DEFAULT_HANDOFF_ACTION,
        )

    def _handoff(
        self,
        instruction: FixInstruction,
        details: str,
        suggested_action: str,
        selector_recovery: Optional[RecoveryResult] = None,
    ) -> RecoveryDecision:
        handoff = HandoffItem(
            violation_id=instruction.violation_id,
            rule_id=instruction.rule_id or "unknown",
            selector=instruction.selector,
            reason=details,
            suggested_action=suggested_action,
        )
        logger.info("Handing off %s: %s", instruction.violation_id, details)
        self._publish(
            HandoffCreated(
                violation_id=handoff.violation_id,
                rule_id=handoff.rule_id,
                selector=handoff.selector,
                reason=details,
            )
        )
        return RecoveryDecision(
            success=False,
            action=RecoveryAction.HANDOFF,
            details=details,
            handoff=handoff,
            selector_recovery=selector_recovery,
        )

    def _publish(self, event: object) -> None:
        if self.event_publisher:
            self.event_publisher.publish(event)
