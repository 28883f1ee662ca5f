"""Recovery Bounded Context.

Decides the single terminal action for a failed fix: a corrected
selector, an improved text, a rollback, a retry, or a human handoff.
Fuzzy matching runs against a caller-owned PageStructureCache and never
queries the live DOM.
"""
from .value_objects import (
    DEFAULT_FAILURE_PATTERNS, FailurePattern, RecoveryAction, RecoveryDecision,
    RecoveryResult, SuggestedAction, VerificationFailureAnalysis,
    VerificationFailureType,
)
from .entities import PageStructureCache, PageStructureUnavailableError
from .matching import NO_ELEMENTS_REASON, PARTIAL_MATCH_CEILING, CandidateScore, SelectorMatcher
from .text import FALLBACK_TEXT, FILLER_PHRASES, TextImprover
from .services import TEXT_ATTRIBUTES, ErrorRecoveryService
from .events import (
    HandoffCreated, SelectorRecovered, SelectorRecoveryFailed,
    VerificationFailureClassified,
)

__all__ = [
    "DEFAULT_FAILURE_PATTERNS", "FailurePattern", "RecoveryAction", "RecoveryDecision",
    "RecoveryResult", "SuggestedAction", "VerificationFailureAnalysis",
    "VerificationFailureType",
    "PageStructureCache", "PageStructureUnavailableError",
    "NO_ELEMENTS_REASON", "PARTIAL_MATCH_CEILING", "CandidateScore", "SelectorMatcher",
    "FALLBACK_TEXT", "FILLER_PHRASES", "TextImprover",
    "TEXT_ATTRIBUTES", "ErrorRecoveryService",
    "HandoffCreated", "SelectorRecovered", "SelectorRecoveryFailed",
    "VerificationFailureClassified",
]
