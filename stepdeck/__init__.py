"""Step registration and dispatch for behaviour-driven test runners.

Register step definitions on a :class:`StepDeck`, build one world per
scenario with :meth:`StepDeck.build_world`, and resolve each step line with
:meth:`StepDeck.dispatch`.
"""

from __future__ import annotations

from .capabilities import PytestAssertions, pytest_capability
from .deck import DEFAULT_ADVERBS, StepDeck
from .errors import (
    AmbiguousStepError,
    ArityMismatchError,
    DuplicateStepError,
    LifecycleError,
    PendingStepError,
    StepDeckError,
    UndefinedStepError,
    WorldSetupError,
    pending,
)
from .invocation import Invocation
from .multiline import DocString, Table
from .patterns import StepPattern, Template
from .registry import Phase, StepRegistry
from .step_definition import StepDefinition
from .world import Scenario, World

__all__ = [
    "DEFAULT_ADVERBS",
    "AmbiguousStepError",
    "ArityMismatchError",
    "DocString",
    "DuplicateStepError",
    "Invocation",
    "LifecycleError",
    "PendingStepError",
    "Phase",
    "PytestAssertions",
    "Scenario",
    "StepDeck",
    "StepDeckError",
    "StepDefinition",
    "StepPattern",
    "StepRegistry",
    "Table",
    "Template",
    "UndefinedStepError",
    "World",
    "WorldSetupError",
    "pending",
    "pytest_capability",
]
