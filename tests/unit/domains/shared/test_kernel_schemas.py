"""Tests for shared kernel records and inbound payload parsing."""
import pytest
from pydantic import ValidationError

from a11yfixer.domains.shared import (
    AttributeFixParams,
    ContentFixParams,
    EventCollector,
    FixInstruction,
    FixType,
    ImpactLevel,
    InjectorError,
    InjectorErrorCode,
    StyleFixParams,
    Violation,
    content_hash,
    parse_fix_instruction,
    parse_injector_error,
    parse_page_context,
    parse_page_structure,
    parse_violation,
)


class TestViolation:
    def test_impact_is_coerced(self):
        v = Violation(id="v", rule_id="image-alt", impact="Serious", selector="img")
        assert v.impact is ImpactLevel.SERIOUS

    def test_empty_id_rejected(self):
        with pytest.raises(ValueError):
            Violation(id="", rule_id="image-alt", impact=ImpactLevel.MINOR, selector="img")

    def test_is_immutable(self):
        v = Violation(id="v", rule_id="r", impact=ImpactLevel.MINOR, selector="img")
        with pytest.raises(AttributeError):
            v.selector = "div"


class TestFixInstruction:
    def test_params_must_match_type(self):
        with pytest.raises(ValueError, match="StyleFixParams"):
            FixInstruction(
                type=FixType.STYLE,
                selector=".btn",
                violation_id="v",
                reasoning="r",
                params=AttributeFixParams("alt", "x"),
            )

    def test_with_selector_returns_copy(self, make_instruction):
        original = make_instruction()
        moved = original.with_selector("#submit-btn")
        assert moved.selector == "#submit-btn"
        assert original.selector == "#submit-button"
        assert moved.params == original.params

    def test_content_params_hash_original_text(self):
        params = ContentFixParams.for_text("Read the pricing guide", "More")
        assert params.original_text_hash == content_hash("More")
        assert len(params.original_text_hash) == 64

    def test_to_dict(self):
        instruction = FixInstruction(
            type="style",
            selector=".btn",
            violation_id="v",
            reasoning="r",
            params=StyleFixParams({"min-width": "24px"}, css_class="a11y"),
            fix_id="fix-v-1",
        )
        assert instruction.to_dict() == {
            "type": "style",
            "selector": ".btn",
            "violation_id": "v",
            "reasoning": "r",
            "params": {"styles": {"min-width": "24px"}, "css_class": "a11y"},
            "fix_id": "fix-v-1",
        }


class TestInjectorErrorCode:
    @pytest.mark.parametrize("raw,expected", [
        ("SELECTOR_NOT_FOUND", InjectorErrorCode.SELECTOR_NOT_FOUND),
        ("content_changed", InjectorErrorCode.CONTENT_CHANGED),
        (" DESTRUCTIVE_CHANGE ", InjectorErrorCode.DESTRUCTIVE_CHANGE),
        ("TIMEOUT", InjectorErrorCode.OTHER),
        (None, InjectorErrorCode.OTHER),
    ])
    def test_parse(self, raw, expected):
        assert InjectorErrorCode.parse(raw) is expected

    def test_error_normalizes_code(self):
        error = InjectorError(code="weird", message="boom", selector="#x")
        assert error.code is InjectorErrorCode.OTHER


class TestParsing:
    def test_parse_violation_camel_case(self):
        v = parse_violation({
            "id": "v-9", "ruleId": "color-contrast", "impact": "MODERATE",
            "selector": "p.note", "html": "<p class='note'>", "unknownKey": 1,
        })
        assert v.rule_id == "color-contrast"
        assert v.impact is ImpactLevel.MODERATE

    def test_parse_violation_bad_impact(self):
        with pytest.raises(ValidationError):
            parse_violation({"id": "v", "ruleId": "r", "impact": "huge", "selector": "p"})

    def test_parse_fix_instruction(self, instruction_payload):
        instruction = parse_fix_instruction(instruction_payload)
        assert instruction.type is FixType.ATTRIBUTE
        assert instruction.params == AttributeFixParams("alt", "Team photo")
        assert instruction.rule_id == "image-alt"

    def test_parse_content_instruction_snake_case(self):
        instruction = parse_fix_instruction({
            "type": "content", "selector": "a.more", "violation_id": "v",
            "reasoning": "r", "params": {"inner_text": "Pricing", "original_text_hash": "abc"},
        })
        assert instruction.params == ContentFixParams("Pricing", "abc")

    def test_parse_fix_instruction_missing_params(self, instruction_payload):
        instruction_payload["params"] = {"attribute": "alt"}
        with pytest.raises(ValidationError):
            parse_fix_instruction(instruction_payload)

    @pytest.mark.parametrize(
        "fix_type, params",
        [
            ("attribute", {"attribute": "alt", "value": None}),
            ("attribute", {"attribute": "  ", "value": "x"}),
            ("content", {"innerText": None, "originalTextHash": "abc"}),
            ("content", {"innerText": "Pricing", "originalTextHash": None}),
            ("style", {"styles": {"color": None}}),
            ("style", {"styles": "color: red"}),
        ],
    )
    def test_parse_fix_instruction_rejects_invalid_param_values(
        self, instruction_payload, fix_type, params
    ):
        instruction_payload.update(type=fix_type, params=params)
        with pytest.raises(ValidationError):
            parse_fix_instruction(instruction_payload)

    def test_parse_style_instruction_camel_case(self, instruction_payload):
        instruction_payload.update(
            type="style", params={"styles": {"color": "#000"}, "cssClass": "a11y"}
        )
        instruction = parse_fix_instruction(instruction_payload)
        assert instruction.params == StyleFixParams({"color": "#000"}, css_class="a11y")

    def test_parse_injector_error_unknown_code(self):
        error = parse_injector_error({"code": "NETWORK", "message": "offline", "selector": "#a"})
        assert error.code is InjectorErrorCode.OTHER

    def test_parse_page_structure(self):
        structure = parse_page_structure({
            "interactiveElements": [{"selector": "#a", "tagName": "button"}],
            "headings": [{"selector": "h1", "tagName": "h1", "text": "Title"}],
        })
        assert [e.selector for e in structure.all_elements()] == ["#a", "h1"]
        assert not structure.is_empty

    def test_parse_page_context_colors(self):
        context = parse_page_context({
            "url": "https://example.com",
            "currentColors": {"foreground": "#777", "background": "#fff"},
            "siblingElements": ["li"],
        })
        assert context.current_colors.foreground == "#777"
        assert context.sibling_elements == ("li",)


class TestEventCollector:
    def test_bounded(self):
        collector = EventCollector(max_events=2)
        for i in range(3):
            collector.publish(i)
        assert collector.events == [1, 2]

    def test_of_type(self):
        collector = EventCollector()
        collector.publish("a")
        collector.publish(1)
        assert collector.of_type(str) == ["a"]

    def test_from_config(self):
        from a11yfixer.config import RecoveryConfig

        assert EventCollector.from_config(RecoveryConfig(max_events=5)).max_events == 5
