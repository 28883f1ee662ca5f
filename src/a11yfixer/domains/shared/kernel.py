"""Shared Kernel - Core domain types shared across bounded contexts.

These types describe the records that cross the boundary between the
recovery core and its external collaborators:
- Scanner (produces Violation)
- AI agent / specialists (produce FixInstruction)
- Fix executor (produces InjectorError)
- Structural scan (produces PageStructure)

All types are immutable. Equality is structural.
"""

from __future__ import annotations

import enum
import hashlib
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple, Union


class ImpactLevel(str, enum.Enum):
    """Severity reported by the scanner."""

    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"


@dataclass(frozen=True)
class Violation:
    """A detected accessibility issue, tagged with rule id and severity."""

    id: str
    rule_id: str
    impact: ImpactLevel
    selector: str
    html: str = ""
    description: str = ""
    help: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Violation id cannot be empty")
        if not isinstance(self.impact, ImpactLevel):
            object.__setattr__(self, "impact", ImpactLevel(str(self.impact).lower()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "rule_id": self.rule_id,
            "impact": self.impact.value,
            "selector": self.selector,
            "html": self.html,
            "description": self.description,
            "help": self.help,
        }


# ============================================================
# Fix instructions
# ============================================================


class FixType(str, enum.Enum):
    ATTRIBUTE = "attribute"
    CONTENT = "content"
    STYLE = "style"


def content_hash(text: str) -> str:
    """SHA-256 hex digest used to detect content drift before a content fix."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class AttributeFixParams:
    attribute: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"attribute": self.attribute, "value": self.value}


@dataclass(frozen=True)
class ContentFixParams:
    inner_text: str
    original_text_hash: str

    @classmethod
    def for_text(cls, inner_text: str, original_text: str) -> "ContentFixParams":
        return cls(inner_text=inner_text, original_text_hash=content_hash(original_text))

    def to_dict(self) -> Dict[str, Any]:
        return {"inner_text": self.inner_text, "original_text_hash": self.original_text_hash}


@dataclass(frozen=True)
class StyleFixParams:
    styles: Dict[str, str]
    css_class: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"styles": dict(self.styles)}
        if self.css_class:
            d["css_class"] = self.css_class
        return d


FixParams = Union[AttributeFixParams, ContentFixParams, StyleFixParams]

_PARAMS_BY_TYPE = {
    FixType.ATTRIBUTE: AttributeFixParams,
    FixType.CONTENT: ContentFixParams,
    FixType.STYLE: StyleFixParams,
}


@dataclass(frozen=True)
class FixInstruction:
    """A typed description of an intended DOM mutation.

    ``params`` must be the variant matching ``type``; a mismatch is a
    programmer error and raises ``ValueError``.
    """

    type: FixType
    selector: str
    violation_id: str
    reasoning: str
    params: FixParams
    fix_id: Optional[str] = None
    rule_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, FixType):
            object.__setattr__(self, "type", FixType(self.type))
        expected = _PARAMS_BY_TYPE[self.type]
        if not isinstance(self.params, expected):
            raise ValueError(
                f"{self.type.value} fix requires {expected.__name__}, "
                f"got {type(self.params).__name__}"
            )

    def with_selector(self, selector: str) -> "FixInstruction":
        return replace(self, selector=selector)

    def with_params(self, params: FixParams) -> "FixInstruction":
        return replace(self, params=params)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.type.value,
            "selector": self.selector,
            "violation_id": self.violation_id,
            "reasoning": self.reasoning,
            "params": self.params.to_dict(),
        }
        if self.fix_id:
            d["fix_id"] = self.fix_id
        if self.rule_id:
            d["rule_id"] = self.rule_id
        return d


# ============================================================
# Executor failures
# ============================================================


class InjectorErrorCode(str, enum.Enum):
    """Closed failure taxonomy reported by the fix executor.

    Codes the core does not recognise collapse into OTHER.
    """

    SELECTOR_NOT_FOUND = "SELECTOR_NOT_FOUND"
    CONTENT_CHANGED = "CONTENT_CHANGED"
    DESTRUCTIVE_CHANGE = "DESTRUCTIVE_CHANGE"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    STYLE_CONFLICT = "STYLE_CONFLICT"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Any) -> "InjectorErrorCode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class InjectorError:
    code: InjectorErrorCode
    message: str
    selector: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", InjectorErrorCode.parse(self.code))

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "selector": self.selector,
        }
        if self.details:
            d["details"] = dict(self.details)
        return d


# ============================================================
# Page structure
# ============================================================


@dataclass(frozen=True)
class ElementSummary:
    selector: str
    tag_name: str
    role: Optional[str] = None
    text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"selector": self.selector, "tag_name": self.tag_name}
        if self.role:
            d["role"] = self.role
        if self.text:
            d["text"] = self.text
        return d


@dataclass(frozen=True)
class PageStructure:
    """Lightweight structural snapshot captured once per navigation."""

    interactive_elements: Tuple[ElementSummary, ...] = ()
    landmarks: Tuple[ElementSummary, ...] = ()
    headings: Tuple[ElementSummary, ...] = ()

    def __post_init__(self) -> None:
        for name in ("interactive_elements", "landmarks", "headings"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def all_elements(self) -> List[ElementSummary]:
        """Flatten interactive elements, landmarks and headings, in that order."""
        return [*self.interactive_elements, *self.landmarks, *self.headings]

    @property
    def is_empty(self) -> bool:
        return not (self.interactive_elements or self.landmarks or self.headings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interactive_elements": [e.to_dict() for e in self.interactive_elements],
            "landmarks": [e.to_dict() for e in self.landmarks],
            "headings": [e.to_dict() for e in self.headings],
        }


# ============================================================
# Specialist inputs and terminal records
# ============================================================


@dataclass(frozen=True)
class ColorPair:
    foreground: str
    background: str


@dataclass(frozen=True)
class PageContext:
    """Extra page context handed to specialists when planning a fix."""

    url: str = ""
    title: Optional[str] = None
    surrounding_text: Optional[str] = None
    parent_element: Optional[str] = None
    sibling_elements: Tuple[str, ...] = ()
    image_src: Optional[str] = None
    image_filename: Optional[str] = None
    current_colors: Optional[ColorPair] = None


@dataclass(frozen=True)
class HandoffItem:
    """Terminal record for a violation that cannot be auto-fixed."""

    violation_id: str
    rule_id: str
    selector: str
    reason: str
    suggested_action: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "violation_id": self.violation_id,
            "rule_id": self.rule_id,
            "selector": self.selector,
            "reason": self.reason,
            "suggested_action": self.suggested_action,
        }


class A11yFixerError(Exception):
    """Base class for programmer-error conditions raised by the core."""
