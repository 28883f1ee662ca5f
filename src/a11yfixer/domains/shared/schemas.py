"""Inbound payload validation.

Records arrive from the scanner, the AI agent and the fix executor as
JSON-like dictionaries, usually with camelCase keys. The pydantic models
below validate those payloads and convert them into the immutable kernel
types. Malformed payloads raise ``pydantic.ValidationError``.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from .kernel import (
    AttributeFixParams,
    ColorPair,
    ContentFixParams,
    ElementSummary,
    FixInstruction,
    FixType,
    ImpactLevel,
    InjectorError,
    InjectorErrorCode,
    PageContext,
    PageStructure,
    StyleFixParams,
    Violation,
)


def _normalize_str(v: Any) -> Any:
    """Normalize string input: strip whitespace, lowercase."""
    return v.strip().lower() if isinstance(v, str) else v


ImpactLiteral = Annotated[
    Literal["critical", "serious", "moderate", "minor"],
    BeforeValidator(_normalize_str),
]

FixTypeLiteral = Annotated[
    Literal["attribute", "content", "style"],
    BeforeValidator(_normalize_str),
]


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=False,
    )


class ViolationPayload(_Payload):
    id: str = Field(min_length=1)
    rule_id: str = Field(min_length=1)
    impact: ImpactLiteral
    selector: str = Field(min_length=1)
    html: str = ""
    description: str = ""
    help: str = ""

    def to_domain(self) -> Violation:
        return Violation(
            id=self.id,
            rule_id=self.rule_id,
            impact=ImpactLevel(self.impact),
            selector=self.selector,
            html=self.html,
            description=self.description,
            help=self.help,
        )


class AttributeParamsPayload(_Payload):
    attribute: str
    value: str

    @field_validator("attribute")
    @classmethod
    def _attribute_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("cannot be empty")
        return v

    def to_domain(self) -> AttributeFixParams:
        return AttributeFixParams(attribute=self.attribute, value=self.value)


class ContentParamsPayload(_Payload):
    inner_text: str
    original_text_hash: str

    def to_domain(self) -> ContentFixParams:
        return ContentFixParams(
            inner_text=self.inner_text, original_text_hash=self.original_text_hash
        )


class StyleParamsPayload(_Payload):
    styles: Dict[str, str]
    css_class: str = ""

    def to_domain(self) -> StyleFixParams:
        return StyleFixParams(styles=dict(self.styles), css_class=self.css_class)


ParamsPayload = Union[AttributeParamsPayload, ContentParamsPayload, StyleParamsPayload]

_PARAMS_PAYLOADS = {
    "attribute": AttributeParamsPayload,
    "content": ContentParamsPayload,
    "style": StyleParamsPayload,
}


def _params_problem(fix_type: str, error: ValidationError) -> str:
    item = error.errors()[0]
    field = ".".join(str(part) for part in item["loc"]) or "params"
    if item["type"] == "missing":
        return f"{fix_type} fix params missing '{field}'"
    return f"{fix_type} fix params '{field}': {item['msg']}"


class FixInstructionPayload(_Payload):
    type: FixTypeLiteral
    selector: str = Field(min_length=1)
    violation_id: str = Field(min_length=1)
    reasoning: str = Field(min_length=1)
    params: ParamsPayload
    fix_id: Optional[str] = None
    rule_id: Optional[str] = None

    @field_validator("params", mode="before")
    @classmethod
    def _params_for_type(cls, v: Any, info: ValidationInfo) -> Any:
        """Validate ``params`` against the variant named by ``type``."""
        fix_type = info.data.get("type")
        if fix_type not in _PARAMS_PAYLOADS:
            return v
        try:
            return _PARAMS_PAYLOADS[fix_type].model_validate(v)
        except ValidationError as e:
            raise ValueError(_params_problem(fix_type, e)) from e

    def to_domain(self) -> FixInstruction:
        return FixInstruction(
            type=FixType(self.type),
            selector=self.selector,
            violation_id=self.violation_id,
            reasoning=self.reasoning,
            params=self.params.to_domain(),
            fix_id=self.fix_id,
            rule_id=self.rule_id,
        )


class InjectorErrorPayload(_Payload):
    code: str
    message: str = Field(min_length=1)
    selector: str
    details: Dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> InjectorError:
        return InjectorError(
            code=InjectorErrorCode.parse(self.code),
            message=self.message,
            selector=self.selector,
            details=dict(self.details),
        )


class ElementSummaryPayload(_Payload):
    selector: str
    tag_name: str
    role: Optional[str] = None
    text: Optional[str] = None

    def to_domain(self) -> ElementSummary:
        return ElementSummary(
            selector=self.selector, tag_name=self.tag_name, role=self.role, text=self.text
        )


class PageStructurePayload(_Payload):
    interactive_elements: List[ElementSummaryPayload] = Field(default_factory=list)
    landmarks: List[ElementSummaryPayload] = Field(default_factory=list)
    headings: List[ElementSummaryPayload] = Field(default_factory=list)

    def to_domain(self) -> PageStructure:
        return PageStructure(
            interactive_elements=tuple(e.to_domain() for e in self.interactive_elements),
            landmarks=tuple(e.to_domain() for e in self.landmarks),
            headings=tuple(e.to_domain() for e in self.headings),
        )


class ColorPairPayload(_Payload):
    foreground: str
    background: str


class PageContextPayload(_Payload):
    url: str = ""
    title: Optional[str] = None
    surrounding_text: Optional[str] = None
    parent_element: Optional[str] = None
    sibling_elements: List[str] = Field(default_factory=list)
    image_src: Optional[str] = None
    image_filename: Optional[str] = None
    current_colors: Optional[ColorPairPayload] = None

    def to_domain(self) -> PageContext:
        colors = None
        if self.current_colors is not None:
            colors = ColorPair(
                foreground=self.current_colors.foreground,
                background=self.current_colors.background,
            )
        return PageContext(
            url=self.url,
            title=self.title,
            surrounding_text=self.surrounding_text,
            parent_element=self.parent_element,
            sibling_elements=tuple(self.sibling_elements),
            image_src=self.image_src,
            image_filename=self.image_filename,
            current_colors=colors,
        )


def parse_violation(data: Mapping[str, Any]) -> Violation:
    return ViolationPayload.model_validate(data).to_domain()


def parse_fix_instruction(data: Mapping[str, Any]) -> FixInstruction:
    return FixInstructionPayload.model_validate(data).to_domain()


def parse_injector_error(data: Mapping[str, Any]) -> InjectorError:
    return InjectorErrorPayload.model_validate(data).to_domain()


def parse_page_structure(data: Mapping[str, Any]) -> PageStructure:
    return PageStructurePayload.model_validate(data).to_domain()


def parse_page_context(data: Mapping[str, Any]) -> PageContext:
    return PageContextPayload.model_validate(data).to_domain()
