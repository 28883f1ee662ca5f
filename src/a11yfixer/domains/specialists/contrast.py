"""Contrast specialist and WCAG colour utilities.

Text is adjusted to meet WCAG AA: 4.5:1 for normal text, 3:1 for large
text, each with a 0.1 buffer.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from a11yfixer.domains.shared.kernel import (
    FixInstruction,
    FixType,
    PageContext,
    StyleFixParams,
    Violation,
)

from .base import BaseSpecialist
from .value_objects import FixClassification

NORMAL_TEXT_RATIO = 4.5
LARGE_TEXT_RATIO = 3.0
RATIO_BUFFER = 0.1
ADJUST_STEP = 5
MAX_ADJUST_ITERATIONS = 100

_HEX_RE = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$")
_RGB_RE = re.compile(r"rgba?\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)")
_COLOR_TOKEN = r"(#[0-9a-f]{3,6}\b|rgba?\([^)]*\))"
# matches axe wording such as "foreground color: #777, background color: #fff"
_DESCRIPTION_COLORS_RE = re.compile(
    rf"foreground(?:\s+color)?[:\s]+{_COLOR_TOKEN}.*?background(?:\s+color)?[:\s]+{_COLOR_TOKEN}",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class RGB:
    r: int
    g: int
    b: int


BLACK = RGB(0, 0, 0)
WHITE = RGB(255, 255, 255)
DEFAULT_COLORS = (RGB(150, 150, 150), WHITE)


def parse_color(color: str) -> Optional[RGB]:
    """Parse ``#rgb``, ``#rrggbb``, ``rgb()`` or ``rgba()``; None otherwise."""
    text = color.strip().lower()
    match = _HEX_RE.match(text)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return RGB(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
    match = _RGB_RE.search(text)
    if match:
        r, g, b = (min(255, int(v)) for v in match.groups())
        return RGB(r, g, b)
    return None


def rgb_to_hex(rgb: RGB) -> str:
    def channel(value: float) -> str:
        return f"{max(0, min(255, round(value))):02x}"

    return f"#{channel(rgb.r)}{channel(rgb.g)}{channel(rgb.b)}"


def relative_luminance(rgb: RGB) -> float:
    def linearize(channel: int) -> float:
        c = channel / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    return 0.2126 * linearize(rgb.r) + 0.7152 * linearize(rgb.g) + 0.0722 * linearize(rgb.b)


def contrast_ratio(first: RGB, second: RGB) -> float:
    l1 = relative_luminance(first)
    l2 = relative_luminance(second)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def adjust_color_for_contrast(foreground: RGB, background: RGB, target_ratio: float) -> RGB:
    """Step the foreground away from the background until ``target_ratio`` is met.

    Falls back to black or white, whichever contrasts more, when stepping
    cannot reach the target.
    """
    # move away from the background: darker text on light backgrounds, lighter on dark
    darken = relative_luminance(foreground) <= relative_luminance(background)
    adjusted = foreground
    for _ in range(MAX_ADJUST_ITERATIONS):
        if contrast_ratio(adjusted, background) >= target_ratio:
            break
        if darken:
            adjusted = RGB(*(max(0, c - ADJUST_STEP) for c in (adjusted.r, adjusted.g, adjusted.b)))
        else:
            adjusted = RGB(*(min(255, c + ADJUST_STEP) for c in (adjusted.r, adjusted.g, adjusted.b)))

    if contrast_ratio(adjusted, background) < target_ratio:
        if contrast_ratio(BLACK, background) > contrast_ratio(WHITE, background):
            return BLACK
        return WHITE
    return adjusted


class ContrastSpecialist(BaseSpecialist):
    name = "ContrastSpecialist"
    rule_patterns = (r"contrast", r"color-contrast", r"link-in-text-block")

    async def plan_fix(self, violation: Violation, context: PageContext) -> FixInstruction:
        foreground, background = self.extract_colors(violation, context)
        target = self.target_ratio(violation)
        if contrast_ratio(foreground, background) >= target:
            adjusted = foreground
        else:
            adjusted = adjust_color_for_contrast(foreground, background, target)
        adjusted_hex = rgb_to_hex(adjusted)

        ratio_type = "normal text (4.5:1)" if target > 4 else "large text (3:1)"
        reasoning = (
            f"Adjusting text color from {rgb_to_hex(foreground)} to {adjusted_hex} to meet "
            f"WCAG AA {ratio_type} contrast requirement. Original contrast ratio was "
            f"{contrast_ratio(foreground, background):.2f}:1 against background "
            f"{rgb_to_hex(background)}. Rule: {violation.rule_id}"
        )
        return self._instruction(
            violation,
            FixType.STYLE,
            StyleFixParams(styles={"color": adjusted_hex}, css_class="a11y-contrast-fix"),
            reasoning,
        )

    def classify_fix(self, violation: Violation) -> FixClassification:
        return FixClassification.CSS_ONLY

    @staticmethod
    def extract_colors(violation: Violation, context: PageContext) -> Tuple[RGB, RGB]:
        if context.current_colors:
            fg = parse_color(context.current_colors.foreground)
            bg = parse_color(context.current_colors.background)
            if fg and bg:
                return fg, bg
        match = _DESCRIPTION_COLORS_RE.search(violation.description)
        if match:
            fg = parse_color(match.group(1))
            bg = parse_color(match.group(2))
            if fg and bg:
                return fg, bg
        return DEFAULT_COLORS

    @staticmethod
    def target_ratio(violation: Violation) -> float:
        description = violation.description.lower()
        html = violation.html.lower()
        large = (
            "large text" in description
            or "font-size: 18" in html
            or "font-size: 24" in html
            or any(tag in html for tag in ("<h1", "<h2", "<h3"))
        )
        return (LARGE_TEXT_RATIO if large else NORMAL_TEXT_RATIO) + RATIO_BUFFER
