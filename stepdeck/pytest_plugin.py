"""Pytest plugin providing the ``step_deck`` and ``step_world`` fixtures."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .deck import DEFAULT_ADVERBS, StepDeck
from .errors import PendingStepError, WorldSetupError
from .world import Scenario

logger = logging.getLogger(__name__)

# Built-in markers describe how pytest runs a test, not what it covers.
_NON_TAG_MARKERS: t.Final[frozenset[str]] = frozenset(
    {"stepdeck", "parametrize", "usefixtures", "filterwarnings", "skip", "skipif", "xfail"}
)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("stepdeck")
    group.addoption(
        "--stepdeck-adverb",
        action="append",
        dest="stepdeck_adverbs",
        default=None,
        metavar="NAME",
        help=(
            "Install NAME as an extra step adverb on every step_deck fixture. "
            "May be repeated; adds to the pytest.ini list."
        ),
    )
    group.addoption(
        "--stepdeck-freeze-registry",
        action="store_true",
        dest="stepdeck_freeze_registry",
        default=None,
        help=(
            "Freeze the step registry when the first world is built. "
            "Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-stepdeck-freeze-registry",
        action="store_false",
        dest="stepdeck_freeze_registry",
        default=None,
        help="Keep the step registry open after worlds are built.",
    )
    parser.addini(
        "stepdeck_adverbs",
        "Extra step adverbs (one per line), e.g. localised Given/When/Then.",
        type="linelist",
        default=[],
    )
    parser.addini(
        "stepdeck_freeze_registry",
        "Freeze the step registry when the first world is built.",
        type="bool",
        default=False,
    )
    parser.addini(
        "stepdeck_pending_as_skip",
        "Report tests that raise PendingStepError as skipped instead of failed.",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "stepdeck(name: str | None = None, tags: tuple[str, ...] = (), "
            "freeze_registry: bool | None = None): configure the scenario and "
            "registry lifecycle for the step_world fixture."
        ),
    )


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[t.Any]
) -> t.Generator[None, None, None]:
    """Report pending steps as skipped when ``stepdeck_pending_as_skip`` is set."""
    outcome = yield
    rep = outcome.get_result()
    if rep.when != "call" or call.excinfo is None:
        return
    if not call.excinfo.errisinstance(PendingStepError):
        return
    if not item.config.getini("stepdeck_pending_as_skip"):
        return
    path, lineno, _ = item.location
    rep.outcome = "skipped"
    rep.longrepr = (path, lineno, f"Pending: {call.excinfo.value.message}")


def _configured_adverbs(config: pytest.Config) -> list[str]:
    """Return ini adverbs followed by any given on the command line."""
    adverbs = list(config.getini("stepdeck_adverbs"))
    cli_adverbs = config.getoption("stepdeck_adverbs")
    if cli_adverbs:
        adverbs.extend(cli_adverbs)
    return adverbs


def _freeze_registry_enabled(request: pytest.FixtureRequest) -> bool:
    """Return whether the deck should freeze when the first world is built."""
    # Priority order: marker > CLI option > INI setting

    marker = request.node.get_closest_marker("stepdeck")
    if marker is not None and marker.kwargs.get("freeze_registry") is not None:
        return bool(marker.kwargs["freeze_registry"])

    config = request.config
    cli_value = config.getoption("stepdeck_freeze_registry")
    if cli_value is not None:
        return bool(cli_value)

    return bool(config.getini("stepdeck_freeze_registry"))


def _marker_tags(value: object) -> tuple[str, ...]:
    """Normalise the ``tags`` marker argument."""
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple, set, frozenset)) and all(
        isinstance(tag, str) for tag in value
    ):
        return tuple(value)
    msg = (
        "stepdeck marker tags must be a string or a sequence of strings, "
        f"got {type(value).__name__}"
    )
    raise TypeError(msg)


def _scenario_for(request: pytest.FixtureRequest) -> Scenario:
    """Build the :class:`Scenario` describing the requesting test."""
    node = request.node
    marker = node.get_closest_marker("stepdeck")
    kwargs = marker.kwargs if marker is not None else {}
    name = kwargs.get("name") or node.name
    if "tags" in kwargs:
        tags = _marker_tags(kwargs["tags"])
    else:
        tags = tuple(
            dict.fromkeys(
                m.name for m in node.iter_markers() if m.name not in _NON_TAG_MARKERS
            )
        )
    return Scenario(name=str(name), tags=tags)


@pytest.fixture
def step_deck(request: pytest.FixtureRequest) -> StepDeck:
    """Provide a fresh :class:`StepDeck` configured from the pytest options.

    Override this fixture (or extend it) to register step definitions before
    ``step_world`` builds the world.
    """
    return StepDeck(
        adverbs=(*DEFAULT_ADVERBS, *_configured_adverbs(request.config)),
        freeze_on_first_world=_freeze_registry_enabled(request),
    )


@pytest.fixture
def stepdeck_scenario(request: pytest.FixtureRequest) -> Scenario:
    """Describe the current test as a :class:`Scenario`."""
    return _scenario_for(request)


@pytest.fixture
def step_world(step_deck: StepDeck, stepdeck_scenario: Scenario) -> t.Any:
    """Provide a world built by ``step_deck`` for the current test."""
    try:
        return step_deck.build_world(stepdeck_scenario)
    except WorldSetupError:
        logger.exception(
            "Error during stepdeck world setup for %r", stepdeck_scenario.name
        )
        raise
