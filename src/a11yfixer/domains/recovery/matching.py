"""Fuzzy selector matching against a cached PageStructure.

Matching never queries the live DOM. Each candidate element is scored
against the decomposed original selector with a weighted composite:

    tag equality        0.35
    id similarity       0.35
    class overlap       0.15
    attribute overlap   0.10
    text similarity     0.05

Only components present in the original selector count, and the score
is normalised by their combined weight so it stays in [0, 1]. Only a
candidate whose selector equals the original reaches 1.0; partial matches
are capped just below it. A candidate carrying one of the original's
attribute filters with a clearly different value is a different element
and scores 0.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from a11yfixer.config import DEFAULT_CONFIG, RecoveryConfig
from a11yfixer.domains.shared.kernel import ElementSummary, PageStructure
from a11yfixer.utils.selectors import SelectorFeatures, parse_selector
from a11yfixer.utils.similarity import overlap_ratio, string_similarity

from .value_objects import RecoveryResult

logger = logging.getLogger(__name__)

NO_ELEMENTS_REASON = "No elements found in page structure"

PARTIAL_MATCH_CEILING = 0.99
# attribute values less similar than this contradict the filter
ATTRIBUTE_CONFLICT_SIMILARITY = 0.5

# Attribute filters whose value is the element's accessible text
TEXT_HINT_ATTRIBUTES = ("aria-label", "title", "alt", "value", "name")


@dataclass(frozen=True)
class CandidateScore:
    element: ElementSummary
    score: float
    components: Tuple[str, ...] = ()


@dataclass
class SelectorMatcher:
    """Scores page-structure candidates against a stale selector."""

    config: RecoveryConfig = field(default_factory=lambda: DEFAULT_CONFIG)

    def match(self, original_selector: str, page_structure: PageStructure) -> RecoveryResult:
        candidates = page_structure.all_elements()
        if not candidates:
            return RecoveryResult(
                success=False,
                original_selector=original_selector,
                confidence=0.0,
                reason=NO_ELEMENTS_REASON,
            )

        features = parse_selector(original_selector)
        best: Optional[CandidateScore] = None
        for candidate in candidates:
            scored = self.score(original_selector, features, candidate)
            if scored.score >= 1.0:
                best = scored
                break
            # strict comparison keeps the first candidate on ties
            if best is None or scored.score > best.score:
                best = scored

        assert best is not None
        threshold = self.config.selector_match_threshold
        success = best.score >= threshold
        logger.debug(
            "Best match for %s: %s (score %.3f, threshold %.2f)",
            original_selector, best.element.selector, best.score, threshold,
        )
        return RecoveryResult(
            success=success,
            original_selector=original_selector,
            confidence=best.score,
            corrected_selector=best.element.selector,
            matched_element=best.element,
            reason=self._describe(best, success, threshold),
        )

    def score(
        self,
        original_selector: str,
        features: SelectorFeatures,
        candidate: ElementSummary,
    ) -> CandidateScore:
        """Weighted composite score of one candidate, in [0, 1]."""
        if candidate.selector.strip() == original_selector.strip():
            return CandidateScore(candidate, 1.0, ("exact selector",))

        cfg = self.config
        candidate_features = parse_selector(candidate.selector)
        candidate_tag = (candidate.tag_name or candidate_features.tag or "").lower()
        candidate_attributes = dict(candidate_features.attributes)
        if candidate.role:
            candidate_attributes.setdefault("role", candidate.role)

        conflict = _conflicting_attribute(features.attributes, candidate_attributes)
        if conflict:
            return CandidateScore(candidate, 0.0, (f"conflicting {conflict}",))

        total = 0.0
        weight = 0.0
        components: List[str] = []

        if features.tag:
            weight += cfg.tag_weight
            if features.tag == candidate_tag:
                total += cfg.tag_weight
                components.append("tag")

        if features.id:
            weight += cfg.id_weight
            id_score = string_similarity(features.id, candidate_features.id or "")
            total += cfg.id_weight * id_score
            if id_score > 0:
                components.append(f"id {id_score:.2f}")

        if features.classes:
            weight += cfg.class_weight
            class_score = overlap_ratio(features.classes, candidate_features.classes)
            total += cfg.class_weight * class_score
            if class_score > 0:
                components.append(f"classes {class_score:.2f}")

        if features.attributes:
            weight += cfg.attribute_weight
            attr_score = _attribute_overlap(features.attributes, candidate_attributes)
            total += cfg.attribute_weight * attr_score
            if attr_score > 0:
                components.append(f"attributes {attr_score:.2f}")

        text_hint = _text_hint(features.attributes)
        if text_hint:
            weight += cfg.text_weight
            text_score = string_similarity(text_hint, candidate.text or "")
            total += cfg.text_weight * text_score
            if text_score > 0:
                components.append(f"text {text_score:.2f}")

        if weight == 0:
            return CandidateScore(candidate, 0.0)
        return CandidateScore(
            candidate, min(PARTIAL_MATCH_CEILING, total / weight), tuple(components)
        )

    @staticmethod
    def _describe(best: CandidateScore, success: bool, threshold: float) -> str:
        matched = ", ".join(best.components) if best.components else "no components"
        if success:
            return f"Matched {best.element.selector} on {matched} (score {best.score:.2f})"
        return (
            f"Best candidate {best.element.selector} scored {best.score:.2f}, "
            f"below threshold {threshold:.2f} ({matched})"
        )


def _attribute_overlap(original: Dict[str, str], candidate: Dict[str, str]) -> float:
    """Fraction of original attribute filters the candidate satisfies.

    A key with an equal value (or a bare ``[attr]`` filter) counts fully;
    a differing value counts by its similarity to the filter's value.
    """
    if not original:
        return 0.0
    points = 0.0
    for key, value in original.items():
        if key not in candidate:
            continue
        if not value:
            points += 1.0
        else:
            points += string_similarity(value, candidate[key])
    return points / len(original)


def _conflicting_attribute(original: Dict[str, str], candidate: Dict[str, str]) -> Optional[str]:
    for key, value in original.items():
        if not value or key not in candidate:
            continue
        if string_similarity(value, candidate[key]) < ATTRIBUTE_CONFLICT_SIMILARITY:
            return f"{key}={candidate[key]}"
    return None


def _text_hint(attributes: Dict[str, str]) -> Optional[str]:
    for name in TEXT_HINT_ATTRIBUTES:
        value = attributes.get(name)
        if value:
            return value
    return None
