"""Tests for fuzzy selector matching against a cached page structure."""
import pytest

from a11yfixer.config import RecoveryConfig
from a11yfixer.domains.recovery import (
    NO_ELEMENTS_REASON,
    PARTIAL_MATCH_CEILING,
    PageStructureCache,
    PageStructureUnavailableError,
    SelectorMatcher,
)
from a11yfixer.domains.shared.kernel import ElementSummary, PageStructure


class TestSelectorMatcher:
    def test_renamed_id_is_matched(self, page_structure):
        result = SelectorMatcher().match("#submit-button", page_structure)
        assert result.success is True
        assert result.corrected_selector == "#submit-btn"
        # 1 - 3/13
        assert result.confidence == pytest.approx(10 / 13)
        assert result.matched_element.tag_name == "button"
        assert result.reason.startswith("Matched #submit-btn")

    def test_exact_selector_scores_one(self):
        structure = PageStructure(
            interactive_elements=(ElementSummary(selector="#submit-button", tag_name="button"),)
        )
        result = SelectorMatcher().match("  #submit-button ", structure)
        assert result.confidence == 1.0
        assert result.success is True

    @pytest.mark.parametrize(
        "original, partial",
        [
            ("#submit-button", "button#submit-button.primary"),
            ("button", "button.cancel"),
        ],
    )
    def test_exact_selector_beats_earlier_partial_match(self, original, partial):
        structure = PageStructure(
            interactive_elements=(
                ElementSummary(selector=partial, tag_name="button"),
                ElementSummary(selector=original, tag_name="button"),
                ElementSummary(selector="#other", tag_name="button"),
            )
        )
        result = SelectorMatcher().match(original, structure)
        assert result.corrected_selector == original
        assert result.confidence == 1.0

    def test_partial_match_never_scores_one(self):
        structure = PageStructure(
            interactive_elements=(ElementSummary(selector="button.cancel", tag_name="button"),)
        )
        result = SelectorMatcher().match("button", structure)
        assert result.success is True
        assert result.confidence == pytest.approx(PARTIAL_MATCH_CEILING)

    def test_conflicting_attribute_value_is_not_matched(self):
        structure = PageStructure(
            interactive_elements=(
                ElementSummary(selector="input[name='password']", tag_name="input"),
            )
        )
        result = SelectorMatcher().match("input[name='email']", structure)
        assert result.success is False
        assert result.confidence == 0.0
        assert "conflicting name=password" in result.reason

    def test_matching_attribute_value_wins_over_conflicting_one(self):
        structure = PageStructure(
            interactive_elements=(
                ElementSummary(selector="input[name='password']", tag_name="input"),
                ElementSummary(selector="input[name=email]", tag_name="input"),
            )
        )
        result = SelectorMatcher().match("input[name='email']", structure)
        assert result.success is True
        assert result.corrected_selector == "input[name=email]"
        assert result.confidence == pytest.approx(0.9)

    def test_empty_structure(self):
        result = SelectorMatcher().match("#anything", PageStructure())
        assert result.success is False
        assert result.confidence == 0.0
        assert result.corrected_selector is None
        assert result.reason == NO_ELEMENTS_REASON

    def test_below_threshold_still_reports_best_candidate(self, page_structure):
        result = SelectorMatcher().match("#zzzzzzzz", page_structure)
        assert result.success is False
        assert result.corrected_selector == "#submit-btn"
        assert "below threshold" in result.reason

    def test_threshold_is_configurable(self, page_structure):
        strict = SelectorMatcher(RecoveryConfig(selector_match_threshold=0.9))
        result = strict.match("#submit-button", page_structure)
        assert result.success is False
        assert result.confidence == pytest.approx(10 / 13)

    def test_tag_outweighs_class(self):
        structure = PageStructure(
            interactive_elements=(
                ElementSummary(selector="button.btn-primary", tag_name="button"),
                ElementSummary(selector="a.primary", tag_name="a"),
            )
        )
        result = SelectorMatcher().match("button.primary", structure)
        assert result.corrected_selector == "button.btn-primary"
        assert result.confidence == pytest.approx(0.7)

    def test_role_counts_as_attribute(self, page_structure):
        result = SelectorMatcher().match("[role=navigation]", page_structure)
        assert result.corrected_selector == "nav.main-nav"
        assert result.confidence == pytest.approx(PARTIAL_MATCH_CEILING)

    def test_first_candidate_wins_ties(self):
        structure = PageStructure(
            interactive_elements=(
                ElementSummary(selector="#save-a", tag_name="button"),
                ElementSummary(selector="#save-b", tag_name="button"),
            )
        )
        result = SelectorMatcher().match("#save-c", structure)
        assert result.corrected_selector == "#save-a"

    def test_text_hint_from_aria_label(self, page_structure):
        result = SelectorMatcher().match('button[aria-label="Submit"]', page_structure)
        assert result.success is True
        assert result.corrected_selector == "#submit-btn"

    def test_score_is_bounded(self, page_structure):
        for selector in ("#submit-button", "button.x#y[name=email]", "h1", "*"):
            result = SelectorMatcher().match(selector, page_structure)
            assert 0.0 <= result.confidence <= 1.0


class TestPageStructureCache:
    def test_starts_empty(self):
        cache = PageStructureCache()
        assert cache.get() is None
        assert cache.is_set is False
        assert cache.captured_at is None

    def test_require_raises_when_unset(self):
        with pytest.raises(PageStructureUnavailableError):
            PageStructureCache().require()

    def test_set_and_clear(self, page_structure):
        cache = PageStructureCache()
        cache.set(page_structure)
        assert cache.require() is page_structure
        assert cache.captured_at is not None
        cache.clear()
        assert cache.is_set is False
