"""CSS selector feature extraction.

Supports the subset of selector syntax that scanner and agent output
actually uses: a leading tag name, ``#id``, ``.class`` chains and
``[attr]`` / ``[attr=value]`` filters. For compound selectors with
combinators only the last compound (the element the selector resolves to)
is decomposed. This is deliberately not a CSS parser.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

_TAG_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9-]*)")
_ID_RE = re.compile(r"#([a-zA-Z_][a-zA-Z0-9_-]*)")
_CLASS_RE = re.compile(r"\.([a-zA-Z_][a-zA-Z0-9_-]*)")
_ATTR_RE = re.compile(
    r"""\[\s*([a-zA-Z_][a-zA-Z0-9_:-]*)\s*"""
    r"""(?:[~|^$*]?=\s*(?:"([^"]*)"|'([^']*)'|([^\]\s]*))\s*(?:[iIsS]\s*)?)?\]"""
)
_BRACKET_RE = re.compile(r"\[[^\]]*\]")
_PSEUDO_RE = re.compile(r"::?[a-zA-Z-]+(?:\([^)]*\))?")

_COMBINATORS = frozenset(" >+~")


@dataclass(frozen=True)
class SelectorFeatures:
    """Decomposed view of the subject compound of a selector."""

    tag: Optional[str] = None
    id: Optional[str] = None
    classes: Tuple[str, ...] = ()
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.tag or self.id or self.classes or self.attributes)


def subject_compound(selector: str) -> str:
    """Return the last compound of a selector, ignoring combinators in brackets, quotes and parens."""
    text = selector.strip()
    depth_bracket = 0
    depth_paren = 0
    quote: Optional[str] = None
    start = 0
    for index, char in enumerate(text):
        if quote:
            if char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char == "[":
            depth_bracket += 1
        elif char == "]":
            depth_bracket = max(0, depth_bracket - 1)
        elif char == "(":
            depth_paren += 1
        elif char == ")":
            depth_paren = max(0, depth_paren - 1)
        elif char in _COMBINATORS and depth_bracket == 0 and depth_paren == 0:
            start = index + 1
    return text[start:].strip()


def _strip_filters(compound: str) -> str:
    return _PSEUDO_RE.sub("", _BRACKET_RE.sub("", compound))


def extract_tag(selector: str) -> Optional[str]:
    """Lower-cased tag name at the start of the subject compound, if any."""
    match = _TAG_RE.match(subject_compound(selector))
    return match.group(1).lower() if match else None


def extract_id(selector: str) -> Optional[str]:
    match = _ID_RE.search(_strip_filters(subject_compound(selector)))
    return match.group(1) if match else None


def extract_classes(selector: str) -> List[str]:
    return _CLASS_RE.findall(_strip_filters(subject_compound(selector)))


def extract_attributes(selector: str) -> Dict[str, str]:
    """Attribute filters of the subject compound; bare ``[attr]`` maps to ``""``."""
    attributes: Dict[str, str] = {}
    for match in _ATTR_RE.finditer(subject_compound(selector)):
        name, double_quoted, single_quoted, bare = match.groups()
        value = next((v for v in (double_quoted, single_quoted, bare) if v is not None), "")
        attributes[name.lower()] = value
    return attributes


def parse_selector(selector: str) -> SelectorFeatures:
    return SelectorFeatures(
        tag=extract_tag(selector),
        id=extract_id(selector),
        classes=tuple(extract_classes(selector)),
        attributes=extract_attributes(selector),
    )
