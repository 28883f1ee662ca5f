"""Tests for the pre-execution safety validator."""
import pytest

from a11yfixer.domains.recovery import ErrorRecoveryService, RecoveryAction
from a11yfixer.domains.safety import SafetyValidator
from a11yfixer.domains.shared.kernel import FixType, InjectorErrorCode


@pytest.fixture
def validator():
    return SafetyValidator()


class TestInteractiveSelector:
    @pytest.mark.parametrize(
        "selector",
        ["button", "button.primary", "nav a", "a.nav-link", "input[name=email]", "form#checkout", "ul > li > a"],
    )
    def test_interactive(self, validator, selector):
        assert validator.is_interactive_selector(selector) is True

    @pytest.mark.parametrize("selector", ["#submit-button", "img.hero", "article", "div.btn", ".badge"])
    def test_not_interactive(self, validator, selector):
        assert validator.is_interactive_selector(selector) is False


class TestIsDestructive:
    def test_emptying_href_on_link(self, validator, make_instruction):
        assert validator.is_destructive(make_instruction(selector="a.nav-link", attribute="href", value=""))

    def test_setting_href_is_fine(self, validator, make_instruction):
        instruction = make_instruction(selector="a.nav-link", attribute="href", value="/home")
        assert validator.is_destructive(instruction) is False

    def test_empty_aria_label_is_not_critical(self, validator, make_instruction):
        assert validator.is_destructive(make_instruction(selector="button", value="")) is False

    def test_clearing_button_text(self, validator, make_instruction):
        instruction = make_instruction(FixType.CONTENT, selector="button.buy", inner_text="  ")
        assert validator.is_destructive(instruction) is True

    def test_non_interactive_target(self, validator, make_instruction):
        instruction = make_instruction(selector="img.hero", attribute="href", value="")
        assert validator.is_destructive(instruction) is False

    def test_style_fix(self, validator, make_instruction):
        assert validator.is_destructive(make_instruction(FixType.STYLE, selector="button")) is False


class TestValidatePayload:
    def test_valid_camel_case_payload(self, validator, instruction_payload):
        result = validator.validate_payload(instruction_payload)
        assert result.valid is True
        assert result.errors == ()
        assert result.warnings == ()

    def test_interactive_target_warns(self, validator, instruction_payload):
        result = validator.validate_payload({**instruction_payload, "selector": "a.more"})
        assert result.valid is True
        assert len(result.warnings) == 1
        assert "a.more" in result.warnings[0]

    def test_destructive_payload_rejected(self, validator, instruction_payload):
        payload = {
            **instruction_payload,
            "selector": "a.nav-link",
            "params": {"attribute": "href", "value": ""},
        }
        result = validator.validate_payload(payload)
        assert result.valid is False
        assert result.errors[0].startswith("Destructive change detected")

    def test_missing_param_reported(self, validator, instruction_payload):
        result = validator.validate_payload({**instruction_payload, "params": {"attribute": "alt"}})
        assert result.valid is False
        assert "missing 'value'" in result.errors[0]

    def test_null_attribute_value_rejected(self, validator, instruction_payload):
        payload = {
            **instruction_payload,
            "selector": "a.nav",
            "params": {"attribute": "href", "value": None},
        }
        result = validator.validate_payload(payload)
        assert result.valid is False
        assert "'value'" in result.errors[0]

    def test_null_inner_text_rejected(self, validator, instruction_payload):
        payload = {
            **instruction_payload,
            "type": "content",
            "selector": "button.buy",
            "params": {"innerText": None, "originalTextHash": "abc"},
        }
        result = validator.validate_payload(payload)
        assert result.valid is False
        assert "'innerText'" in result.errors[0]

    def test_unknown_type_reported(self, validator, instruction_payload):
        result = validator.validate_payload({**instruction_payload, "type": "script"})
        assert result.valid is False
        assert any(error.startswith("type:") for error in result.errors)

    def test_accepts_domain_instruction(self, validator, make_instruction):
        assert validator.validate_payload(make_instruction(selector="img.hero")).valid is True

    def test_result_serializes(self, validator, instruction_payload):
        assert validator.validate_payload(instruction_payload).to_dict() == {
            "valid": True,
            "errors": [],
            "warnings": [],
        }


class TestErrors:
    def test_destructive_change_error_is_handed_off(self, validator, make_instruction):
        instruction = make_instruction(selector="a.nav-link", attribute="href", value="")
        error = validator.create_destructive_change_error(instruction)
        assert error.code is InjectorErrorCode.DESTRUCTIVE_CHANGE
        assert error.details == {"fix_type": "attribute", "violation_id": "v-1"}

        decision = ErrorRecoveryService().recover_from_injector_error(error, instruction)
        assert decision.action is RecoveryAction.HANDOFF

    def test_validation_failed_error(self, validator):
        error = validator.create_validation_failed_error("#x", ["type: bad", "params: missing"])
        assert error.code is InjectorErrorCode.VALIDATION_FAILED
        assert error.message == "Fix instruction validation failed: type: bad; params: missing"
        assert error.details["validation_errors"] == ["type: bad", "params: missing"]
