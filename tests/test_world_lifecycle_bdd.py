"""Behavioural tests for world construction using pytest-bdd."""

from __future__ import annotations

from pathlib import Path

from pytest_bdd import scenario

from tests.steps import *  # noqa: F403

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"
FEATURE = str(FEATURES_DIR / "world_lifecycle.feature")


@scenario(FEATURE, "factories chain before hooks run")
def test_factories_then_hooks() -> None:
    """Factories chain, then hooks run in order."""


@scenario(FEATURE, "a failing setup hook fails the scenario setup")
def test_failing_hook() -> None:
    """Hook failures are setup failures."""
