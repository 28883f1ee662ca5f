"""Shared kernel: record types exchanged with external collaborators."""

from .events import EventCollector, EventPublisher
from .kernel import (
    A11yFixerError,
    AttributeFixParams,
    ColorPair,
    ContentFixParams,
    ElementSummary,
    FixInstruction,
    FixParams,
    FixType,
    HandoffItem,
    ImpactLevel,
    InjectorError,
    InjectorErrorCode,
    PageContext,
    PageStructure,
    StyleFixParams,
    Violation,
    content_hash,
)
from .schemas import (
    parse_fix_instruction,
    parse_injector_error,
    parse_page_context,
    parse_page_structure,
    parse_violation,
)

__all__ = [
    "EventCollector",
    "EventPublisher",
    "A11yFixerError",
    "AttributeFixParams",
    "ColorPair",
    "ContentFixParams",
    "ElementSummary",
    "FixInstruction",
    "FixParams",
    "FixType",
    "HandoffItem",
    "ImpactLevel",
    "InjectorError",
    "InjectorErrorCode",
    "PageContext",
    "PageStructure",
    "StyleFixParams",
    "Violation",
    "content_hash",
    "parse_fix_instruction",
    "parse_injector_error",
    "parse_page_context",
    "parse_page_structure",
    "parse_violation",
]
