"""Heuristic rewrites for text the verifier rejected as vague or redundant."""
from __future__ import annotations

import re
from typing import Optional, Tuple

from .value_objects import VerificationFailureType

FALLBACK_TEXT = "Descriptive text for this element"

FILLER_PHRASES: Tuple[str, ...] = (
    "click here", "read more", "learn more", "more", "here", "link", "button",
)

_WORD_BOUNDARY = r"\b{}\b"


class TextImprover:
    """Produces replacement text for vague or redundant labels."""

    def __init__(self, filler_phrases: Tuple[str, ...] = FILLER_PHRASES) -> None:
        self._filler_patterns = tuple(
            re.compile(_WORD_BOUNDARY.format(re.escape(phrase)), re.IGNORECASE)
            for phrase in filler_phrases
        )

    def is_filler(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self._filler_patterns)

    def improve(
        self,
        original_text: Optional[str],
        failure_type: VerificationFailureType,
        context: Optional[str] = None,
    ) -> str:
        text = (original_text or "").strip()
        if not text:
            return FALLBACK_TEXT

        context = (context or "").strip()
        if failure_type is VerificationFailureType.REDUNDANT_TEXT:
            return f"{text} - {context}" if context else f"{text} - unique identifier"

        if self.is_filler(text):
            if context:
                return f"{text} about {context}"
            return f"{text} - provides additional context and functionality"
        return f"{text} (detailed description)"
