"""pytest-bdd steps for world factories and setup hooks."""

from __future__ import annotations

from pytest_bdd import given, parsers, then, when

from stepdeck import Scenario, World, WorldSetupError
from tests.helpers.deck import DeckContext


@given(parsers.parse('world factories "{first}" and "{second}"'))
def register_factories(deck_context: DeckContext, first: str, second: str) -> None:
    """Register two factories that each return a brand new world."""
    for label in (first, second):

        def factory(world: object, scenario: Scenario, label: str = label) -> World:
            deck_context.order.append(label)
            deck_context.factory_inputs.append(world)
            built = World(made_by=label, scenario=scenario.name)
            deck_context.factory_outputs.append(built)
            return built

        deck_context.deck.world(factory)


@given(parsers.parse('setup hooks "{first}" and "{second}"'))
def register_hooks(deck_context: DeckContext, first: str, second: str) -> None:
    """Register two hooks that record when they run."""
    for label in (first, second):
        deck_context.deck.before(
            lambda world, scenario, label=label: deck_context.order.append(label)
        )


@given("a setup hook that fails")
def register_failing_hook(deck_context: DeckContext) -> None:
    """Register a hook that raises."""

    def broken(world: object, scenario: Scenario) -> None:
        raise RuntimeError("hook exploded")

    deck_context.deck.before(broken)


@when(parsers.parse('I build a world for scenario "{name}"'))
def build_world(deck_context: DeckContext, name: str) -> None:
    """Build the world for a named scenario."""

    def build() -> object:
        deck_context.world = deck_context.deck.build_world(Scenario(name))
        return deck_context.world

    deck_context.capture(build)


@then(parsers.parse('the setup order is "{order}"'))
def check_order(deck_context: DeckContext, order: str) -> None:
    """Factories and hooks ran in the given order."""
    assert deck_context.error is None
    assert deck_context.order == [item.strip() for item in order.split(",")]


@then("each factory received the previous factory's world")
def check_factory_chain(deck_context: DeckContext) -> None:
    """The second factory saw the first's output; the result is the last output."""
    inputs = deck_context.factory_inputs
    outputs = deck_context.factory_outputs
    assert inputs[1] is outputs[0]
    assert deck_context.world is outputs[-1]
    assert deck_context.world.made_by == "second"


@then(parsers.parse('a WorldSetupError for stage "{stage}" is raised'))
def check_setup_error(deck_context: DeckContext, stage: str) -> None:
    """Setup failed at the expected stage."""
    error = deck_context.error
    assert isinstance(error, WorldSetupError)
    assert error.stage == stage
    assert isinstance(error.__cause__, RuntimeError)
