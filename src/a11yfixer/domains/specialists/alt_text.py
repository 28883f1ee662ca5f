"""Alt text specialist: fills in missing image alternatives."""
from __future__ import annotations

import re
from typing import List, Optional

from a11yfixer.domains.shared.kernel import (
    AttributeFixParams,
    FixInstruction,
    FixType,
    PageContext,
    Violation,
)

from .base import BaseSpecialist, matches_any
from .value_objects import FixClassification

MAX_ALT_LENGTH = 125

_GENERIC_FILENAMES = [
    r"^img\d*$", r"^image\d*$", r"^photo\d*$", r"^picture\d*$",
    r"^untitled", r"^dsc\d+$", r"^screenshot", r"^\d+$",
]
_DECORATIVE_MARKUP = [
    r"role\s*=\s*[\"']presentation[\"']",
    r"aria-hidden\s*=\s*[\"']true[\"']",
    r"class\s*=\s*[\"'][^\"']*(?:icon|decoration|spacer|divider)[^\"']*[\"']",
]
_DECORATIVE_FILENAMES = [r"spacer", r"divider", r"decoration", r"border", r"bullet", r"arrow", r"icon"]


class AltTextSpecialist(BaseSpecialist):
    """Generates ``alt`` text from filename, surrounding text or markup hints.

    Priority: readable filename, surrounding text, decorative detection
    (empty alt), then a generic description based on the markup.
    """

    name = "AltTextSpecialist"
    rule_patterns = (
        r"image-alt", r"img-alt", r"input-image-alt",
        r"area-alt", r"object-alt", r"svg-img-alt",
    )

    async def plan_fix(self, violation: Violation, context: PageContext) -> FixInstruction:
        alt_text = self.generate_alt_text(violation, context)
        return self._instruction(
            violation,
            FixType.ATTRIBUTE,
            AttributeFixParams(attribute="alt", value=alt_text),
            self._reasoning(violation, context, alt_text),
        )

    def classify_fix(self, violation: Violation) -> FixClassification:
        return FixClassification.GENERATED_TEXT

    def generate_alt_text(self, violation: Violation, context: PageContext) -> str:
        if context.image_filename:
            from_filename = alt_from_filename(context.image_filename)
            if from_filename:
                return from_filename

        surrounding = (context.surrounding_text or "").strip()
        if surrounding:
            if len(surrounding) <= MAX_ALT_LENGTH:
                return f"Image related to: {surrounding}"
            return f"Image related to: {surrounding[:MAX_ALT_LENGTH - 3]}..."

        if self.is_decorative(violation, context):
            return ""
        return self._generic_alt(violation, context)

    @staticmethod
    def is_decorative(violation: Violation, context: PageContext) -> bool:
        if matches_any(_DECORATIVE_MARKUP, violation.html):
            return True
        return bool(context.image_filename) and matches_any(
            _DECORATIVE_FILENAMES, context.image_filename or ""
        )

    @staticmethod
    def _generic_alt(violation: Violation, context: PageContext) -> str:
        html = violation.html.lower()
        if "logo" in html:
            return f"{context.title} logo" if context.title else "Company logo"
        if "avatar" in html or "profile" in html:
            return "User profile image"
        if "banner" in html or "hero" in html:
            return "Banner image"
        if "thumbnail" in html:
            return "Thumbnail image"
        return "Image"

    @staticmethod
    def _reasoning(violation: Violation, context: PageContext, alt_text: str) -> str:
        if alt_text == "":
            return (
                "Setting empty alt attribute to mark image as decorative. "
                f"Rule: {violation.rule_id}"
            )
        sources: List[str] = []
        if context.image_filename:
            sources.append("filename analysis")
        if context.surrounding_text:
            sources.append("surrounding text context")
        if not sources:
            sources.append("HTML structure analysis")
        return (
            f'Generated alt text "{alt_text}" based on {" and ".join(sources)}. '
            f"Rule: {violation.rule_id}"
        )


def alt_from_filename(filename: str) -> Optional[str]:
    """Readable text from an image filename, or None for generic names."""
    stem = re.sub(r"\.[^/.]+$", "", filename.rsplit("/", 1)[-1])
    if matches_any(_GENERIC_FILENAMES, stem):
        return None
    readable = re.sub(r"([a-z])([A-Z])", r"\1 \2", re.sub(r"[-_]", " ", stem))
    readable = " ".join(readable.lower().split())
    if 0 < len(readable) <= 100:
        return readable[0].upper() + readable[1:]
    return None
