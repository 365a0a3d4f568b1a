"""Per-scenario execution context and the capabilities attached to it."""

from __future__ import annotations

import dataclasses as dc
import typing as t

from .errors import PendingStepError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from collections.abc import Set


@dc.dataclass(frozen=True, slots=True)
class Scenario:
    """Descriptor of the scenario a world is built for."""

    name: str
    tags: tuple[str, ...] = ()

    def has_tag(self, tag: str) -> bool:
        """Return ``True`` if *tag* (with or without ``@``) is present."""
        bare = tag.removeprefix("@")
        return any(existing.removeprefix("@") == bare for existing in self.tags)


class StepRunner(t.Protocol):
    """What a world needs from the deck to invoke steps by name."""

    @property
    def adverbs(self) -> Set[str]:
        """Return the installed adverb names."""
        ...

    def invoke(self, step_text: str, world: object, *multiline_args: object) -> t.Any:
        """Resolve *step_text* and execute it against *world*."""
        ...


class World:
    """Default world object.

    Step bodies store scenario state as plain attributes. Once built by a deck
    the world can call other steps with :meth:`invoke` or with any installed
    adverb, e.g. ``world.Given("I have 3 cukes")``.
    """

    _stepdeck: StepRunner | None = None

    def __init__(self, **attrs: object) -> None:
        self.__dict__.update(attrs)

    def _bind(self, runner: StepRunner) -> None:
        self._stepdeck = runner

    def invoke(self, step_text: str, *multiline_args: object) -> t.Any:
        """Run the step matching *step_text* against this world now."""
        if self._stepdeck is None:
            msg = "world is not bound to a step deck"
            raise RuntimeError(msg)
        return self._stepdeck.invoke(step_text, self, *multiline_args)

    def pending(self, message: str = PendingStepError.DEFAULT_MESSAGE) -> t.NoReturn:
        """Mark the current step as pending."""
        raise PendingStepError(message)

    def __getattr__(self, name: str) -> t.Any:
        """Resolve adverb aliases to :meth:`invoke`."""
        runner = self.__dict__.get("_stepdeck")
        if runner is not None and name in runner.adverbs:
            return self.invoke
        msg = f"{type(self).__name__!r} object has no attribute {name!r}"
        raise AttributeError(msg)

    def __repr__(self) -> str:
        """Return the public attributes, like :class:`types.SimpleNamespace`."""
        items = ", ".join(
            f"{key}={value!r}"
            for key, value in self.__dict__.items()
            if not key.startswith("_")
        )
        return f"{type(self).__name__}({items})"


def attach_dispatch(world: object, runner: StepRunner) -> None:
    """Give *world* the ability to invoke steps through *runner*.

    :class:`World` instances are bound directly. Other objects returned by
    world factories get ``invoke``, ``pending`` and one attribute per adverb,
    none of which they may already define unless an earlier call attached it.
    """
    if isinstance(world, World):
        world._bind(runner)
        return

    def invoke(step_text: str, *multiline_args: object) -> t.Any:
        return runner.invoke(step_text, world, *multiline_args)

    def pending(message: str = PendingStepError.DEFAULT_MESSAGE) -> t.NoReturn:
        raise PendingStepError(message)

    invoke._stepdeck_dispatch = True  # type: ignore[attr-defined]
    pending._stepdeck_dispatch = True  # type: ignore[attr-defined]

    attributes = {"invoke": invoke, "pending": pending}
    attributes.update(dict.fromkeys(runner.adverbs, invoke))
    for name in attributes:
        existing = getattr(world, name, None)
        if existing is not None and not getattr(existing, "_stepdeck_dispatch", False):
            msg = (
                f"cannot attach step dispatch to a {type(world).__name__} world: "
                f"it already defines {name!r}"
            )
            raise TypeError(msg)

    try:
        for name, value in attributes.items():
            setattr(world, name, value)
    except (AttributeError, TypeError) as exc:
        msg = f"cannot attach step dispatch to a {type(world).__name__} world"
        raise TypeError(msg) from exc


__all__ = ["Scenario", "StepRunner", "World", "attach_dispatch"]
