"""StepDeck facade: registration, world construction and step dispatch."""

from __future__ import annotations

import logging
import re  # noqa: TC003
import typing as t

from .capabilities import CapabilityProvider, pytest_capability
from .errors import LifecycleError, WorldSetupError
from .invocation import Invocation
from .registry import Phase, StepRegistry
from .world import Scenario, World, attach_dispatch

if t.TYPE_CHECKING:
    from collections.abc import Iterable, Set

    from .patterns import StepPattern
    from .step_definition import StepBody, StepDefinition

logger = logging.getLogger(__name__)

WorldFactory: t.TypeAlias = t.Callable[[t.Any, Scenario], t.Any]
SetupHook: t.TypeAlias = t.Callable[[t.Any, Scenario], object]

_F = t.TypeVar("_F", bound=t.Callable[..., t.Any])

DEFAULT_ADVERBS: t.Final[tuple[str, ...]] = ("Given", "When", "Then", "And", "But")


class StepDeck:
    """Central registry and dispatcher for step definitions.

    Steps, world factories and setup hooks are registered during the load
    phase. A scenario runner then calls :meth:`build_world` once per scenario
    and :meth:`dispatch` (or :meth:`invoke`) once per step line.
    """

    def __init__(
        self,
        *,
        adverbs: Iterable[str] = DEFAULT_ADVERBS,
        freeze_on_first_world: bool = False,
        host_capabilities: bool = True,
        registry: StepRegistry | None = None,
    ) -> None:
        """Create a new deck.

        Parameters
        ----------
        adverbs:
            Names installed as aliases for :meth:`register_step` on the deck
            and for ``invoke`` on every built world.
        freeze_on_first_world:
            When ``True`` the first :meth:`build_world` call freezes the
            registry, ending the load phase.
        host_capabilities:
            When ``True`` (the default) worlds get pytest assertion helpers as
            ``world.expect`` if pytest is importable.
        registry:
            Optional :class:`StepRegistry` to share. A fresh one is created
            when omitted.
        """
        self.registry = registry if registry is not None else StepRegistry()
        self._adverbs: list[str] = []
        self._world_factories: list[WorldFactory] = []
        self._before_hooks: list[SetupHook] = []
        self._capabilities: list[tuple[str, CapabilityProvider]] = []
        self._freeze_on_first_world = freeze_on_first_world

        self.alias_steps(adverbs)
        if host_capabilities:
            self.register_capability("expect", pytest_capability)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def adverbs(self) -> Set[str]:
        """Return the installed adverb names."""
        return frozenset(self._adverbs)

    @property
    def world_factories(self) -> tuple[WorldFactory, ...]:
        """Return world factories in registration order."""
        return tuple(self._world_factories)

    @property
    def before_hooks(self) -> tuple[SetupHook, ...]:
        """Return setup hooks in registration order."""
        return tuple(self._before_hooks)

    @property
    def phase(self) -> Phase:
        """Return the lifecycle phase of the underlying registry."""
        return self.registry.phase

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    @t.overload
    def register_step(
        self, pattern: str | re.Pattern[str] | StepPattern, body: None = None
    ) -> t.Callable[[_F], _F]: ...

    @t.overload
    def register_step(
        self, pattern: str | re.Pattern[str] | StepPattern, body: StepBody
    ) -> StepDefinition: ...

    def register_step(
        self,
        pattern: str | re.Pattern[str] | StepPattern,
        body: StepBody | None = None,
    ) -> StepDefinition | t.Callable[[_F], _F]:
        """Register *body* as the step definition for *pattern*.

        Called with a body, returns the new :class:`StepDefinition`. Called
        with only a pattern, returns a decorator that registers the decorated
        function and hands it back unchanged. Every installed adverb is an
        alias for this method::

            @deck.Given(r"^I have (\\d+) cukes$")
            def have_cukes(world, count):
                world.cukes = int(count)
        """
        if body is not None:
            return self.registry.register(pattern, body)

        def decorator(func: _F) -> _F:
            self.registry.register(pattern, func)
            return func

        return decorator

    def before(self, hook: SetupHook) -> SetupHook:
        """Register *hook* to run as ``hook(world, scenario)`` on each new world."""
        self._require_load_phase("before")
        self._before_hooks.append(hook)
        return hook

    def world(self, factory: WorldFactory) -> WorldFactory:
        """Register *factory* as the next ``factory(world, scenario)`` in the chain.

        The factory's return value replaces the world passed to the next
        factory, so it may return a different object altogether.
        """
        self._require_load_phase("world")
        self._world_factories.append(factory)
        return factory

    def register_capability(self, name: str, provider: CapabilityProvider) -> None:
        """Attach ``provider(world)`` to each new world as ``world.<name>``.

        Providers returning ``None`` are treated as unavailable and skipped.

        Raises
        ------
        ValueError
            When *name* is private, already taken by an adverb or capability,
            or would shadow step dispatch on the world.
        """
        self._require_load_phase("register_capability")
        self._check_free_name("capability", name, World)
        self._capabilities.append((name, provider))

    def register_adverb(self, name: str) -> None:
        """Install *name* as an alias for step registration and invocation."""
        if name in self._adverbs:
            return
        self._check_free_name("adverb", name, StepDeck, World)
        if name in vars(self):
            msg = f"adverb {name!r} would shadow an existing attribute"
            raise ValueError(msg)
        self._adverbs.append(name)
        logger.debug("Installed step adverb %r", name)

    def alias_steps(self, names: Iterable[str]) -> None:
        """Install every adverb in *names*, e.g. ``["Gitt", "Når", "Så"]``."""
        for name in names:
            self.register_adverb(name)

    def freeze(self) -> None:
        """End the load phase; the deck only resolves steps from now on."""
        self.registry.freeze()

    def __getattr__(self, name: str) -> t.Any:
        """Resolve adverb aliases to :meth:`register_step`."""
        if name in self.__dict__.get("_adverbs", ()):
            return self.register_step
        msg = f"{type(self).__name__!r} object has no attribute {name!r}"
        raise AttributeError(msg)

    # ------------------------------------------------------------------
    # World lifecycle
    # ------------------------------------------------------------------
    def build_world(self, scenario: Scenario | None = None) -> t.Any:
        """Build a fresh world for *scenario*.

        World factories run first, in registration order. Step dispatch and
        host capabilities are attached next, then setup hooks run against the
        finished world. The runner must reuse the returned world for every
        step of the scenario.

        Raises
        ------
        WorldSetupError
            When a factory, capability provider or setup hook fails.
        """
        scenario = scenario if scenario is not None else Scenario(name="")
        if self._freeze_on_first_world:
            self.freeze()

        world: t.Any = World()
        for factory in self._world_factories:
            world = self._run_setup_stage(
                "world factory", scenario, factory, world, scenario
            )
            if world is None:
                cause = TypeError(f"world factory {factory!r} returned None")
                raise WorldSetupError(scenario, "world factory", cause) from cause

        self._run_setup_stage("step dispatch", scenario, attach_dispatch, world, self)
        self._attach_capabilities(world, scenario)

        for hook in self._before_hooks:
            self._run_setup_stage("setup hook", scenario, hook, world, scenario)

        logger.debug(
            "Built %s world for scenario %r", type(world).__name__, scenario.name
        )
        return world

    def _attach_capabilities(self, world: object, scenario: Scenario) -> None:
        """Attach every available host capability to *world*."""
        for name, provider in self._capabilities:
            capability = self._run_setup_stage("capability", scenario, provider, world)
            if capability is None:
                logger.debug("Capability %r unavailable; not attached", name)
                continue
            self._run_setup_stage(
                "capability", scenario, setattr, world, name, capability
            )

    @staticmethod
    def _run_setup_stage(
        stage: str, scenario: Scenario, func: t.Callable[..., t.Any], *args: object
    ) -> t.Any:
        """Call *func* and wrap any failure as a :class:`WorldSetupError`."""
        try:
            return func(*args)
        except Exception as exc:
            raise WorldSetupError(scenario, stage, exc) from exc

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def dispatch(self, step_text: str, world: object) -> Invocation:
        """Resolve *step_text* and bind it to *world*.

        Raises
        ------
        UndefinedStepError
            When no step definition matches.
        AmbiguousStepError
            When several step definitions match.
        """
        definition = self.registry.resolve(step_text)
        logger.debug("Dispatching %r to %s", step_text, definition.file_colon_line)
        return Invocation(world, definition, step_text)

    def invoke(self, step_text: str, world: object, *multiline_args: object) -> t.Any:
        """Dispatch *step_text* against *world* and execute it immediately."""
        return self.dispatch(step_text, world).execute(*multiline_args)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_load_phase(self, action: str) -> None:
        """Ensure registration happens before the registry is frozen."""
        if self.registry.phase is not Phase.LOAD:
            msg = (
                f"Cannot call {action}(): not in 'load' phase "
                f"(current phase: {self.registry.phase.name.lower()})"
            )
            raise LifecycleError(msg)

    def _check_free_name(self, kind: str, name: str, *owners: type) -> None:
        """Reject *name* unless it is public and unused on *owners* and worlds."""
        if not name.isidentifier() or name.startswith("_"):
            msg = f"{kind} must be a public identifier, got {name!r}"
            raise ValueError(msg)
        if any(hasattr(owner, name) for owner in owners):
            msg = f"{kind} {name!r} would shadow an existing attribute"
            raise ValueError(msg)
        if name in self._adverbs:
            msg = f"{kind} {name!r} is already installed as an adverb"
            raise ValueError(msg)
        if any(name == taken for taken, _ in self._capabilities):
            msg = f"{kind} {name!r} is already registered as a capability"
            raise ValueError(msg)


__all__ = ["DEFAULT_ADVERBS", "SetupHook", "StepDeck", "WorldFactory"]
