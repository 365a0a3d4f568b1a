"""Step definitions: a pattern bound to an executable body."""

from __future__ import annotations

import dataclasses as dc
import functools
import inspect
import re
import typing as t

from .errors import ArityMismatchError
from .patterns import ArgFormatter, StepPattern, as_pattern

StepBody: t.TypeAlias = t.Callable[..., t.Any]

_UNKNOWN_LOCATION: t.Final[tuple[str, int]] = ("<unknown>", 0)


@dc.dataclass(frozen=True, slots=True, eq=False)
class StepDefinition:
    """A registered ``(pattern, body)`` pair.

    The body is called as ``body(world, *captured_groups, *multiline_args)``.
    """

    pattern: StepPattern
    body: StepBody

    @classmethod
    def create(
        cls, pattern: str | re.Pattern[str] | StepPattern, body: StepBody
    ) -> StepDefinition:
        """Build a definition, coercing *pattern* into a :class:`StepPattern`."""
        if not callable(body):
            msg = f"step body must be callable, got {type(body).__name__}"
            raise TypeError(msg)
        return cls(as_pattern(pattern), body)

    def matches(self, text: str) -> bool:
        """Return ``True`` if *text* matches this definition's pattern."""
        return self.pattern(text)

    def conflicts_with(self, other: StepDefinition) -> bool:
        """Return ``True`` when *other* was registered with an equal pattern."""
        return self.pattern == other.pattern

    def execute(self, world: object, text: str, *multiline_args: object) -> t.Any:
        """Run the body against *world* with the groups captured from *text*."""
        args = (*self.pattern.args(text), *multiline_args)
        self._check_arity(world, args)
        return self.body(world, *args)

    def _check_arity(self, world: object, args: tuple[object, ...]) -> None:
        try:
            signature = inspect.signature(self.body)
        except (TypeError, ValueError):  # pragma: no cover - builtins
            return
        try:
            signature.bind(world, *args)
        except TypeError as exc:
            raise ArityMismatchError(self, len(args)) from exc

    def format_args(self, text: str, formatter: ArgFormatter) -> str:
        """Render *text* with its matched arguments passed through *formatter*."""
        return self.pattern.format_args(text, formatter)

    def source_location(self) -> tuple[str, int]:
        """Return the ``(filename, line)`` where the body was defined."""
        body = self.body
        while isinstance(body, functools.partial):
            body = body.func
        code = getattr(inspect.unwrap(body), "__code__", None)
        if code is None:
            code = getattr(getattr(body, "__call__", None), "__code__", None)
        if code is None:
            return _UNKNOWN_LOCATION
        return code.co_filename, code.co_firstlineno

    @property
    def file_colon_line(self) -> str:
        """Return the source location as ``"file:line"``."""
        filename, line = self.source_location()
        return f"{filename}:{line}"

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"StepDefinition({self.pattern.source!r}, {self.file_colon_line})"


__all__ = ["StepBody", "StepDefinition"]
