"""Pytest configuration for the a11y-fixer test suite."""

from __future__ import annotations

import logging

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: tests that exercise timing-sensitive async behaviour",
    )


@pytest.fixture(autouse=True)
def _debug_logging():
    """Run every test with package logging at DEBUG so log calls are formatted."""
    logger = logging.getLogger("a11yfixer")
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    yield
    logger.setLevel(previous)
