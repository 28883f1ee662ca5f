"""Pytest fixtures for domain tests.

These fixtures support testing the remediation bounded contexts:
- Snapshot Context (rollback against a mocked live page)
- Recovery Context (page structures, fix instructions)
- Specialists Context (violations and page context)
- Report Context
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from a11yfixer.domains.shared.events import EventCollector
from a11yfixer.domains.shared.kernel import (
    AttributeFixParams,
    ContentFixParams,
    ElementSummary,
    FixInstruction,
    FixType,
    ImpactLevel,
    PageContext,
    PageStructure,
    StyleFixParams,
    Violation,
)


# =============================================================================
# Shared kernel factories
# =============================================================================


def build_violation(
    rule_id: str = "image-alt",
    selector: str = "img.hero",
    violation_id: str = "v-1",
    html: str = "",
    description: str = "",
    help: str = "",
    impact: ImpactLevel = ImpactLevel.SERIOUS,
) -> Violation:
    return Violation(
        id=violation_id,
        rule_id=rule_id,
        impact=impact,
        selector=selector,
        html=html,
        description=description,
        help=help,
    )


def build_instruction(
    fix_type: FixType = FixType.ATTRIBUTE,
    selector: str = "#submit-button",
    violation_id: str = "v-1",
    rule_id: Optional[str] = "button-name",
    **params: Any,
) -> FixInstruction:
    if fix_type is FixType.ATTRIBUTE:
        fix_params = AttributeFixParams(
            attribute=params.get("attribute", "aria-label"),
            value=params.get("value", "Submit"),
        )
    elif fix_type is FixType.CONTENT:
        fix_params = ContentFixParams.for_text(
            params.get("inner_text", "Read more"), params.get("original_text", "More")
        )
    else:
        fix_params = StyleFixParams(styles=params.get("styles", {"color": "#000000"}))
    return FixInstruction(
        type=fix_type,
        selector=selector,
        violation_id=violation_id,
        reasoning="test fix",
        params=fix_params,
        rule_id=rule_id,
    )


@pytest.fixture
def make_violation():
    return build_violation


@pytest.fixture
def make_instruction():
    return build_instruction


@pytest.fixture
def page_context() -> PageContext:
    return PageContext(url="https://example.com", title="Example Shop")


@pytest.fixture
def page_structure() -> PageStructure:
    """Structure captured after the submit button's id changed."""
    return PageStructure(
        interactive_elements=(
            ElementSummary(selector="#submit-btn", tag_name="button", text="Submit"),
            ElementSummary(selector="a.nav-link", tag_name="a", role="link", text="Home"),
            ElementSummary(selector="input[name=email]", tag_name="input", role="textbox"),
        ),
        landmarks=(ElementSummary(selector="nav.main-nav", tag_name="nav", role="navigation"),),
        headings=(ElementSummary(selector="h1.page-title", tag_name="h1", text="Checkout"),),
    )


@pytest.fixture
def event_collector() -> EventCollector:
    return EventCollector()


# =============================================================================
# Live page doubles
# =============================================================================


def build_page(element: Any = "default") -> MagicMock:
    """Mock page whose ``query_selector`` resolves to ``element``.

    Pass ``None`` to simulate a selector that no longer resolves.
    """
    page = MagicMock()
    if element == "default":
        element = MagicMock()
        element.evaluate = AsyncMock(return_value=None)
    page.query_selector = AsyncMock(return_value=element)
    return page


@pytest.fixture
def make_page():
    return build_page


@pytest.fixture
def live_page() -> MagicMock:
    return build_page()


@pytest.fixture
def instruction_payload() -> Dict[str, Any]:
    return {
        "type": "attribute",
        "selector": "img.hero",
        "violationId": "v-1",
        "reasoning": "Add alt text",
        "params": {"attribute": "alt", "value": "Team photo"},
        "ruleId": "image-alt",
    }
