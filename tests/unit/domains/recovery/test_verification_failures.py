"""Tests for classifying verifier feedback and recovering from it."""
import pytest

from a11yfixer.domains.recovery import (
    FALLBACK_TEXT,
    ErrorRecoveryService,
    FailurePattern,
    RecoveryAction,
    SuggestedAction,
    TextImprover,
    VerificationFailureClassified,
    VerificationFailureType,
)
from a11yfixer.domains.shared.kernel import FixType
from a11yfixer.domains.snapshot import RollbackManager


# ── Classification ───────────────────────────────────────────────────


class TestAnalyzeVerificationFailure:
    @pytest.mark.parametrize(
        "message, failure_type, action",
        [
            ("Alt text is too vague", VerificationFailureType.VAGUE_TEXT, SuggestedAction.IMPROVE_TEXT),
            ("Label is NON-DESCRIPTIVE", VerificationFailureType.VAGUE_TEXT, SuggestedAction.IMPROVE_TEXT),
            ("Text repeats the heading", VerificationFailureType.OTHER, SuggestedAction.RETRY),
            ("Duplicate link text", VerificationFailureType.REDUNDANT_TEXT, SuggestedAction.IMPROVE_TEXT),
            ("Fix introduced color-contrast", VerificationFailureType.NEW_VIOLATION, SuggestedAction.ROLLBACK),
            ("Found a new violation", VerificationFailureType.NEW_VIOLATION, SuggestedAction.ROLLBACK),
            ("Timed out", VerificationFailureType.OTHER, SuggestedAction.RETRY),
        ],
    )
    def test_classification(self, message, failure_type, action):
        analysis = ErrorRecoveryService().analyze_verification_failure(message, "Image")
        assert analysis.failure_type is failure_type
        assert analysis.suggested_action is action
        assert analysis.reason == message

    def test_higher_priority_pattern_wins(self):
        analysis = ErrorRecoveryService().analyze_verification_failure(
            "redundant and vague label introduced"
        )
        assert analysis.failure_type is VerificationFailureType.VAGUE_TEXT

    def test_custom_patterns_sorted_by_priority(self):
        service = ErrorRecoveryService(
            failure_patterns=[
                FailurePattern.from_string(VerificationFailureType.REDUNDANT_TEXT, r"label", priority=1),
                FailurePattern.from_string(VerificationFailureType.NEW_VIOLATION, r"label", priority=5),
            ]
        )
        analysis = service.analyze_verification_failure("bad label")
        assert analysis.failure_type is VerificationFailureType.NEW_VIOLATION

    def test_improved_text_only_for_text_failures(self):
        service = ErrorRecoveryService()
        assert service.analyze_verification_failure("vague", "Image").improved_text == (
            "Image (detailed description)"
        )
        assert service.analyze_verification_failure("introduced", "Image").improved_text is None

    def test_publishes_event(self, event_collector):
        ErrorRecoveryService(event_publisher=event_collector).analyze_verification_failure("vague")
        event = event_collector.of_type(VerificationFailureClassified)[0]
        assert event.failure_type == "vague_text"
        assert event.suggested_action == "improve_text"


class TestTextImprover:
    def test_empty_text_gets_fallback(self):
        improver = TextImprover()
        assert improver.improve("", VerificationFailureType.VAGUE_TEXT) == FALLBACK_TEXT
        assert improver.improve(None, VerificationFailureType.REDUNDANT_TEXT) == FALLBACK_TEXT

    def test_redundant(self):
        improver = TextImprover()
        assert improver.improve("Submit", VerificationFailureType.REDUNDANT_TEXT) == (
            "Submit - unique identifier"
        )
        assert improver.improve("Submit", VerificationFailureType.REDUNDANT_TEXT, "order form") == (
            "Submit - order form"
        )

    def test_filler_phrase(self):
        improver = TextImprover()
        assert improver.improve("Click here", VerificationFailureType.VAGUE_TEXT, "pricing") == (
            "Click here about pricing"
        )
        assert improver.improve("Read more", VerificationFailureType.VAGUE_TEXT) == (
            "Read more - provides additional context and functionality"
        )

    def test_filler_matches_whole_words_only(self):
        improver = TextImprover()
        assert improver.is_filler("Moreover") is False
        assert improver.is_filler("Learn more") is True
        assert improver.improve("Moreover", VerificationFailureType.VAGUE_TEXT) == (
            "Moreover (detailed description)"
        )


# ── Instruction rewriting ────────────────────────────────────────────


class TestImprovedTextInstruction:
    def test_rewrites_text_attribute(self, make_instruction):
        original = make_instruction(attribute="alt", value="Image")
        improved = ErrorRecoveryService.create_improved_text_instruction(original, "Team photo")
        assert improved.params.value == "Team photo"
        assert improved.params.attribute == "alt"
        assert improved.selector == original.selector
        assert improved.violation_id == original.violation_id

    def test_rewrites_content_and_keeps_hash(self, make_instruction):
        original = make_instruction(FixType.CONTENT, inner_text="More", original_text="More")
        improved = ErrorRecoveryService.create_improved_text_instruction(original, "More about pricing")
        assert improved.params.inner_text == "More about pricing"
        assert improved.params.original_text_hash == original.params.original_text_hash

    def test_non_text_attribute_unchanged(self, make_instruction):
        original = make_instruction(attribute="role", value="button")
        assert ErrorRecoveryService.create_improved_text_instruction(original, "x") is original

    def test_style_unchanged(self, make_instruction):
        original = make_instruction(FixType.STYLE)
        assert ErrorRecoveryService.create_improved_text_instruction(original, "x") is original

    def test_extract_text(self, make_instruction):
        assert ErrorRecoveryService.extract_text(make_instruction(attribute="title", value="Hi")) == "Hi"
        assert ErrorRecoveryService.extract_text(make_instruction(attribute="tabindex", value="0")) is None


# ── Recovery flow ────────────────────────────────────────────────────


class TestRecoverFromVerificationFailure:
    @pytest.mark.asyncio
    async def test_vague_alt_text_is_improved(self, live_page, make_instruction):
        instruction = make_instruction(attribute="alt", value="Image")
        decision = await ErrorRecoveryService().recover_from_verification_failure(
            live_page, "Alt text is vague", instruction
        )
        assert decision.action is RecoveryAction.TEXT_IMPROVED
        assert decision.success is True
        assert decision.corrected_instruction.params.value == "Image (detailed description)"
        live_page.query_selector.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_vague_non_text_fix_is_handed_off(self, live_page, make_instruction):
        instruction = make_instruction(attribute="role", value="button")
        decision = await ErrorRecoveryService().recover_from_verification_failure(
            live_page, "Role is unclear", instruction
        )
        assert decision.is_handoff
        assert decision.handoff.selector == instruction.selector

    @pytest.mark.asyncio
    async def test_new_violation_rolls_back(self, live_page, make_instruction):
        manager = RollbackManager()
        snapshot_id = manager.save_snapshot("s1", "#submit-button", "<button>Pay</button>")
        service = ErrorRecoveryService(rollback_manager=manager)

        decision = await service.recover_from_verification_failure(
            live_page, "Fix introduced a new violation", make_instruction(), snapshot_id
        )

        assert decision.action is RecoveryAction.ROLLED_BACK
        assert decision.corrected_instruction is None
        element = live_page.query_selector.return_value
        element.evaluate.assert_awaited_once()
        assert manager.get_snapshot(snapshot_id) is None

    @pytest.mark.asyncio
    async def test_new_violation_without_snapshot_is_handed_off(self, live_page, make_instruction):
        decision = await ErrorRecoveryService().recover_from_verification_failure(
            live_page, "new violation", make_instruction()
        )
        assert decision.is_handoff
        assert decision.handoff.rule_id == "button-name"
        live_page.query_selector.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_rollback_is_handed_off(self, make_page, make_instruction):
        manager = RollbackManager()
        snapshot_id = manager.save_snapshot("s1", "#submit-button", "<button></button>")
        decision = await ErrorRecoveryService(rollback_manager=manager).recover_from_verification_failure(
            make_page(None), "new violation", make_instruction(), snapshot_id
        )
        assert decision.is_handoff
        assert decision.success is False

    @pytest.mark.asyncio
    async def test_other_feedback_retries_unchanged(self, live_page, make_instruction):
        instruction = make_instruction()
        decision = await ErrorRecoveryService().recover_from_verification_failure(
            live_page, "Verifier timed out", instruction
        )
        assert decision.action is RecoveryAction.RETRY
        assert decision.corrected_instruction is instruction
