"""Unit tests for :mod:`stepdeck.invocation`."""

from __future__ import annotations

import pytest

from stepdeck.errors import PendingStepError, pending
from stepdeck.invocation import Invocation
from stepdeck.multiline import Table
from stepdeck.step_definition import StepDefinition
from stepdeck.world import World


def _have_cukes(world: World, count: str, table: Table | None = None) -> str:
    world.cukes = int(count)
    world.table = table
    return count


def _invocation(text: str = "I have 7 cukes") -> Invocation:
    definition = StepDefinition.create(r"^I have (\d+) cukes$", _have_cukes)
    return Invocation(World(), definition, text)


def test_execute_runs_body_against_world() -> None:
    """The bound world receives the captured argument."""
    invocation = _invocation()
    assert invocation.execute() == "7"
    assert invocation.world.cukes == 7


def test_execute_forwards_table() -> None:
    """A table argument is passed after the captured groups."""
    table = Table.from_rows([["name"], ["gherkin"]])
    invocation = _invocation()
    invocation.execute(table)
    assert invocation.world.table is table


def test_execute_propagates_body_errors() -> None:
    """Body failures are neither caught nor wrapped."""

    def body(world: object) -> None:
        raise LookupError("no cukes")

    invocation = Invocation(World(), StepDefinition.create("^x$", body), "x")
    with pytest.raises(LookupError, match="no cukes"):
        invocation.execute()


def test_module_level_pending() -> None:
    """Bodies can call :func:`stepdeck.pending` directly."""

    def body(world: object) -> None:
        pending()

    invocation = Invocation(World(), StepDefinition.create("^x$", body), "x")
    with pytest.raises(PendingStepError, match="TODO - implement me"):
        invocation.execute()


def test_format_args_template_and_callable() -> None:
    """Both formatter styles highlight matched arguments."""
    invocation = _invocation()
    assert (
        invocation.format_args('<span class="param">{}</span>')
        == 'I have <span class="param">7</span> cukes'
    )
    assert invocation.format_args(lambda arg: f"[{arg}]") == "I have [7] cukes"


def test_source_location_matches_definition() -> None:
    """Locations come from the step definition."""
    invocation = _invocation()
    assert invocation.source_location() == (
        __file__,
        _have_cukes.__code__.co_firstlineno,
    )
    assert invocation.file_colon_line.endswith(
        f":{_have_cukes.__code__.co_firstlineno}"
    )
