"""Exception hierarchy raised by :mod:`stepdeck`."""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .step_definition import StepDefinition
    from .world import Scenario


def _describe_definition(definition: StepDefinition) -> str:
    return f"{definition.file_colon_line} {definition.pattern.source!r}"


def _numbered(entries: t.Sequence[str], *, start: int = 1) -> str:
    if not entries:
        return "(none)"
    return "\n".join(
        f"{index}. {entry}" for index, entry in enumerate(entries, start=start)
    )


class StepDeckError(Exception):
    """Base class for all stepdeck errors."""


class LifecycleError(StepDeckError):
    """Raised when the deck is used in the wrong phase."""


class DuplicateStepError(StepDeckError):
    """Raised when a step definition repeats an already registered pattern."""

    def __init__(self, existing: StepDefinition, new: StepDefinition) -> None:
        self.existing = existing
        self.new = new
        msg = (
            f"Duplicate step definition for {new.pattern.source!r}:\n"
            + _numbered([_describe_definition(existing), _describe_definition(new)])
        )
        super().__init__(msg)


class UndefinedStepError(StepDeckError):
    """Raised when no step definition matches a step line."""

    def __init__(self, step_text: str) -> None:
        self.step_text = step_text
        super().__init__(f"Undefined step: {step_text!r}")


class AmbiguousStepError(StepDeckError):
    """Raised when more than one step definition matches a step line.

    ``candidates`` holds every matching definition in registration order so
    that runners can report where the collision comes from.
    """

    def __init__(
        self, step_text: str, candidates: t.Sequence[StepDefinition]
    ) -> None:
        self.step_text = step_text
        self.candidates = tuple(candidates)
        msg = (
            f"Ambiguous match of {step_text!r}:\n"
            + _numbered([_describe_definition(c) for c in self.candidates])
        )
        super().__init__(msg)


class PendingStepError(StepDeckError):
    """Raised by a step body to mark it as not yet implemented."""

    DEFAULT_MESSAGE = "TODO - implement me"

    def __init__(self, message: str = DEFAULT_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


class ArityMismatchError(StepDeckError):
    """Raised when a step body cannot accept the arguments of its match."""

    def __init__(self, step_definition: StepDefinition, arg_count: int) -> None:
        self.step_definition = step_definition
        self.arg_count = arg_count
        msg = (
            f"Step body for {step_definition.pattern.source!r} cannot accept "
            f"{arg_count} argument(s) ({step_definition.file_colon_line})"
        )
        super().__init__(msg)


class WorldSetupError(StepDeckError):
    """Raised when a world factory, capability or setup hook fails.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, scenario: Scenario, stage: str, cause: BaseException) -> None:
        self.scenario = scenario
        self.stage = stage
        super().__init__(
            f"World setup failed in {stage} for scenario {scenario.name!r}: "
            f"{type(cause).__name__}: {cause}"
        )


def pending(message: str = PendingStepError.DEFAULT_MESSAGE) -> t.NoReturn:
    """Mark the calling step as pending."""
    raise PendingStepError(message)


__all__ = [
    "AmbiguousStepError",
    "ArityMismatchError",
    "DuplicateStepError",
    "LifecycleError",
    "PendingStepError",
    "StepDeckError",
    "UndefinedStepError",
    "WorldSetupError",
    "pending",
]
