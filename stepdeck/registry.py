"""Ordered registry of step definitions."""

from __future__ import annotations

import enum
import logging
import re  # noqa: TC003
import typing as t

from .errors import (
    AmbiguousStepError,
    DuplicateStepError,
    LifecycleError,
    UndefinedStepError,
)
from .step_definition import StepBody, StepDefinition

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .patterns import StepPattern

logger = logging.getLogger(__name__)


class Phase(enum.StrEnum):
    """Lifecycle phases for :class:`StepRegistry`."""

    LOAD = "LOAD"
    RUN = "RUN"


class StepRegistry:
    """Append-only collection of step definitions.

    Definitions are registered during the load phase. :meth:`freeze` moves the
    registry to the run phase, after which it is read-only.
    """

    def __init__(self) -> None:
        self._definitions: list[StepDefinition] = []
        self._phase = Phase.LOAD

    @property
    def phase(self) -> Phase:
        """Return the current lifecycle phase."""
        return self._phase

    @property
    def definitions(self) -> tuple[StepDefinition, ...]:
        """Return the registered definitions in registration order."""
        return tuple(self._definitions)

    def __len__(self) -> int:
        """Return the number of registered definitions."""
        return len(self._definitions)

    def __iter__(self) -> t.Iterator[StepDefinition]:
        """Iterate over definitions in registration order."""
        return iter(tuple(self._definitions))

    def register(
        self, pattern: str | re.Pattern[str] | StepPattern, body: StepBody
    ) -> StepDefinition:
        """Register *body* under *pattern* and return the new definition.

        Raises
        ------
        DuplicateStepError
            When an existing definition was registered with an equal pattern.
        LifecycleError
            When the registry has been frozen.
        """
        if self._phase is not Phase.LOAD:
            msg = (
                "Cannot register step definitions after the registry is frozen "
                f"(current phase: {self._phase.name.lower()})"
            )
            raise LifecycleError(msg)
        definition = StepDefinition.create(pattern, body)
        for existing in self._definitions:
            if existing.conflicts_with(definition):
                raise DuplicateStepError(existing, definition)
        self._definitions.append(definition)
        logger.debug(
            "Registered step %r at %s",
            definition.pattern.source,
            definition.file_colon_line,
        )
        return definition

    def matches(self, step_text: str) -> list[StepDefinition]:
        """Return every definition matching *step_text*."""
        return [d for d in self._definitions if d.matches(step_text)]

    def resolve(self, step_text: str) -> StepDefinition:
        """Return the single definition matching *step_text*.

        Raises
        ------
        UndefinedStepError
            When nothing matches.
        AmbiguousStepError
            When more than one definition matches.
        """
        found = self.matches(step_text)
        if not found:
            raise UndefinedStepError(step_text)
        if len(found) > 1:
            raise AmbiguousStepError(step_text, found)
        return found[0]

    def freeze(self) -> None:
        """End the load phase; later registrations raise :class:`LifecycleError`."""
        if self._phase is Phase.RUN:
            return
        self._phase = Phase.RUN
        logger.debug("Step registry frozen with %d definitions", len(self))


__all__ = ["Phase", "StepRegistry"]
