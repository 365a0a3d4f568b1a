"""Resolved step invocations."""

from __future__ import annotations

import dataclasses as dc
import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .patterns import ArgFormatter
    from .step_definition import StepDefinition


@dc.dataclass(frozen=True, slots=True)
class Invocation:
    """A step definition bound to a world and the literal step text."""

    world: object
    step_definition: StepDefinition
    step_name: str

    def execute(self, *multiline_args: object) -> t.Any:
        """Run the step definition against the bound world.

        Any number of *multiline_args* may be passed, although a step line
        carries at most one table or doc string in practice. Exceptions raised
        by the body propagate unchanged.
        """
        return self.step_definition.execute(self.world, self.step_name, *multiline_args)

    def format_args(self, formatter: ArgFormatter) -> str:
        """Format the matched arguments of the step text for display.

        *formatter* is either a template string with one ``{}`` slot, such as
        ``'<span class="param">{}</span>'``, or a callable that takes one
        argument and returns its replacement, such as ``lambda a: f"[{a}]"``.
        """
        return self.step_definition.format_args(self.step_name, formatter)

    def source_location(self) -> tuple[str, int]:
        """Return where the step definition's body was written."""
        return self.step_definition.source_location()

    @property
    def file_colon_line(self) -> str:
        """Return the source location as ``"file:line"``."""
        return self.step_definition.file_colon_line


__all__ = ["Invocation"]
