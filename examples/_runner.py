"""A tiny scenario runner used by the examples."""

from __future__ import annotations

import dataclasses as dc
import typing as t

from stepdeck import (
    AmbiguousStepError,
    PendingStepError,
    Scenario,
    StepDeck,
    UndefinedStepError,
)


@dc.dataclass(slots=True)
class StepResult:
    """Outcome of one step line."""

    text: str
    status: str
    rendered: str = ""
    location: str = ""


def run_scenario(
    deck: StepDeck,
    scenario: Scenario,
    lines: t.Sequence[str | tuple[str, object]],
) -> list[StepResult]:
    """Run *lines* against one world, stopping at the first non-passing step."""
    world = deck.build_world(scenario)
    results: list[StepResult] = []
    for line in lines:
        text, extra = (line, ()) if isinstance(line, str) else (line[0], (line[1],))
        try:
            invocation = deck.dispatch(text, world)
        except UndefinedStepError:
            results.append(StepResult(text, "undefined"))
            break
        except AmbiguousStepError:
            results.append(StepResult(text, "ambiguous"))
            break
        rendered = invocation.format_args("*{}*")
        try:
            invocation.execute(*extra)
        except PendingStepError:
            results.append(
                StepResult(text, "pending", rendered, invocation.file_colon_line)
            )
            break
        results.append(StepResult(text, "passed", rendered, invocation.file_colon_line))
    return results
