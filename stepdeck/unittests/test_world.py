"""Unit tests for :mod:`stepdeck.world`."""

from __future__ import annotations

import typing as t

import pytest

from stepdeck.errors import PendingStepError
from stepdeck.world import Scenario, World, attach_dispatch


class _RecordingRunner:
    """Stand-in deck that records invocations."""

    def __init__(self, adverbs: t.Iterable[str] = ("Given",)) -> None:
        self.adverbs = frozenset(adverbs)
        self.calls: list[tuple[str, object, tuple[object, ...]]] = []

    def invoke(self, step_text: str, world: object, *multiline_args: object) -> str:
        self.calls.append((step_text, world, multiline_args))
        return f"ran {step_text}"


class _SlottedWorld:
    __slots__ = ("value",)


def test_scenario_tags() -> None:
    """Tags match with or without the leading ``@``."""
    scenario = Scenario("checkout", tags=("@slow", "wip"))
    assert scenario.has_tag("slow")
    assert scenario.has_tag("@wip")
    assert not scenario.has_tag("fast")


def test_world_holds_attributes() -> None:
    """Worlds accept initial attributes and show them in ``repr``."""
    world = World(cukes=3)
    world.belly = []
    assert world.cukes == 3
    assert repr(world) == "World(cukes=3, belly=[])"


def test_unbound_world_cannot_invoke() -> None:
    """Invoking before a deck binds the world is an error."""
    with pytest.raises(RuntimeError, match="not bound"):
        World().invoke("anything")


def test_bound_world_invokes_through_runner() -> None:
    """``invoke`` and adverbs route through the runner with the same world."""
    runner = _RecordingRunner()
    world = World()
    attach_dispatch(world, runner)
    assert world.invoke("I do A", "table") == "ran I do A"
    assert world.Given("I do B") == "ran I do B"
    assert runner.calls == [("I do A", world, ("table",)), ("I do B", world, ())]


def test_unknown_attribute_still_raises() -> None:
    """Names that are not adverbs raise :class:`AttributeError`."""
    world = World()
    attach_dispatch(world, _RecordingRunner())
    with pytest.raises(AttributeError, match="Gitt"):
        _ = world.Gitt


def test_world_pending_raises() -> None:
    """``pending`` raises :class:`PendingStepError` with the message."""
    with pytest.raises(PendingStepError) as excinfo:
        World().pending("not implemented")
    assert excinfo.value.message == "not implemented"


def test_attach_dispatch_to_foreign_object() -> None:
    """Non-:class:`World` objects get dispatch attributes set on them."""

    class Custom:
        pass

    runner = _RecordingRunner(adverbs=("Given", "Gitt"))
    world = Custom()
    attach_dispatch(world, runner)
    world.Gitt("step")  # type: ignore[attr-defined]
    world.invoke("other")  # type: ignore[attr-defined]
    assert [call[:2] for call in runner.calls] == [("step", world), ("other", world)]
    with pytest.raises(PendingStepError, match="TODO - implement me"):
        world.pending()  # type: ignore[attr-defined]


@pytest.mark.parametrize("name", ["invoke", "pending", "Given"])
def test_attach_dispatch_keeps_existing_attributes(name: str) -> None:
    """Foreign worlds that already define a dispatch name are rejected."""

    class Driver:
        pass

    def original() -> str:
        return "driver"

    world = Driver()
    setattr(world, name, original)
    with pytest.raises(TypeError, match=f"already defines {name!r}"):
        attach_dispatch(world, _RecordingRunner())
    assert getattr(world, name) is original


def test_attach_dispatch_reattaches_to_same_object() -> None:
    """A foreign world reused across scenarios can be attached again."""

    class Driver:
        pass

    world = Driver()
    first, second = _RecordingRunner(), _RecordingRunner()
    attach_dispatch(world, first)
    attach_dispatch(world, second)
    world.Given("step")  # type: ignore[attr-defined]
    assert first.calls == []
    assert [call[0] for call in second.calls] == ["step"]


def test_attach_dispatch_rejects_closed_objects() -> None:
    """Objects that refuse new attributes cannot become worlds."""
    with pytest.raises(TypeError, match="cannot attach step dispatch"):
        attach_dispatch(_SlottedWorld(), _RecordingRunner())
