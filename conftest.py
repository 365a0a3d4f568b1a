"""Global test configuration and shared fixtures."""

from __future__ import annotations

import pytest

from stepdeck import StepDeck

pytest_plugins = ("stepdeck.pytest_plugin", "pytester")


@pytest.fixture
def deck() -> StepDeck:
    """Return a deck without host capabilities for isolated unit tests."""
    return StepDeck(host_capabilities=False)


def pytest_configure(config: pytest.Config) -> None:
    """Register markers used as scenario tags in the test suite."""
    config.addinivalue_line("markers", "smoke: quick checks, also a scenario tag")
