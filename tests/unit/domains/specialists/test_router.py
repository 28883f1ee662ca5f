"""Tests for explicit, priority-ordered specialist routing."""
import pytest

from a11yfixer.domains.shared.kernel import FixType, StyleFixParams, Violation
from a11yfixer.domains.specialists import (
    AltTextSpecialist,
    BaseSpecialist,
    FixClassification,
    GenericAriaHandler,
    SpecialistRouter,
)


# ── Helpers ──────────────────────────────────────────────────────────


class CatchAllSpecialist(BaseSpecialist):
    name = "CatchAllSpecialist"
    rule_patterns = (r".*",)

    async def plan_fix(self, violation, context):
        return self._instruction(
            violation,
            FixType.STYLE,
            StyleFixParams(styles={"outline": "none"}),
            "catch-all",
        )

    def classify_fix(self, violation):
        return FixClassification.CSS_ONLY


class TestDefaultRoster:
    @pytest.mark.parametrize(
        "rule_id, expected",
        [
            ("image-alt", "AltTextSpecialist"),
            ("svg-img-alt", "AltTextSpecialist"),
            ("focus-not-obscured-minimum", "FocusSpecialist"),
            ("focus-appearance", "FocusSpecialist"),
            ("focus-order-semantics", "NavigationSpecialist"),
            ("button-name", "NavigationSpecialist"),
            ("color-contrast", "ContrastSpecialist"),
            ("link-in-text-block", "ContrastSpecialist"),
            ("target-size-minimum", "InteractionSpecialist"),
            ("dragging-movements", "InteractionSpecialist"),
            ("aria-required-children", "GenericAriaHandler"),
        ],
    )
    def test_routing(self, make_violation, rule_id, expected):
        router = SpecialistRouter.with_defaults()
        assert router.get_specialist_name(make_violation(rule_id)) == expected

    def test_roster_order(self):
        names = [s.name for s in SpecialistRouter.with_defaults().specialists]
        assert names == [
            "AltTextSpecialist",
            "FocusSpecialist",
            "NavigationSpecialist",
            "ContrastSpecialist",
            "InteractionSpecialist",
            "GenericAriaHandler",
        ]

    @pytest.mark.asyncio
    async def test_plan_fix_delegates(self, make_violation):
        router = SpecialistRouter.with_defaults()
        instruction = await router.plan_fix(make_violation("target-size-minimum", ".btn"))
        assert instruction.type is FixType.STYLE
        assert instruction.params.styles["min-width"] == "24px"

    def test_confidence_delegates(self, make_violation):
        result = SpecialistRouter.with_defaults().calculate_confidence(
            make_violation("dragging-movements", ".sortable-item")
        )
        assert result.value == 30
        assert result.requires_human_review is True

    def test_non_string_rule_id_falls_back(self):
        violation = Violation.__new__(Violation)
        object.__setattr__(violation, "id", "v-9")
        object.__setattr__(violation, "rule_id", None)
        router = SpecialistRouter.with_defaults()
        assert isinstance(router.route(violation), GenericAriaHandler)


class TestRegistration:
    def test_empty_router_uses_fallback(self, make_violation):
        assert isinstance(SpecialistRouter().route(make_violation()), GenericAriaHandler)

    def test_priority_insert(self, make_violation):
        router = SpecialistRouter.with_defaults()
        router.register(CatchAllSpecialist(), priority=0)
        assert router.get_specialist_name(make_violation("image-alt")) == "CatchAllSpecialist"

    def test_appended_specialist_only_sees_unclaimed(self, make_violation):
        router = SpecialistRouter.with_defaults()
        router.register(CatchAllSpecialist())
        assert router.get_specialist_name(make_violation("image-alt")) == "AltTextSpecialist"
        assert router.get_specialist_name(make_violation("aria-hidden-body")) == "CatchAllSpecialist"

    def test_duplicate_name_rejected(self):
        router = SpecialistRouter()
        router.register(AltTextSpecialist())
        with pytest.raises(ValueError):
            router.register(AltTextSpecialist())

    def test_non_specialist_rejected(self):
        with pytest.raises(TypeError):
            SpecialistRouter().register(object())
