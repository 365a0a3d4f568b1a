"""Host framework capabilities that can be attached to worlds.

A capability provider is a callable taking the freshly built world and
returning the object to attach, or ``None`` when the capability is not
available in the current environment.
"""

from __future__ import annotations

import importlib.util
import typing as t

CapabilityProvider: t.TypeAlias = t.Callable[[object], object | None]


class PytestAssertions:
    """Assertion helpers from pytest, exposed to step bodies as ``world.expect``."""

    def __init__(self) -> None:
        import pytest

        self._pytest = pytest

    def raises(self, expected: type[BaseException], **kwargs: t.Any) -> t.Any:
        """Return a :func:`pytest.raises` context manager."""
        return self._pytest.raises(expected, **kwargs)

    def approx(self, expected: t.Any, **kwargs: t.Any) -> t.Any:
        """Return a :func:`pytest.approx` comparison object."""
        return self._pytest.approx(expected, **kwargs)

    def fail(self, reason: str = "") -> t.NoReturn:
        """Fail the current test with *reason*."""
        self._pytest.fail(reason)

    def skip(self, reason: str = "") -> t.NoReturn:
        """Skip the current test with *reason*."""
        self._pytest.skip(reason)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return "PytestAssertions()"


def pytest_capability(world: object) -> PytestAssertions | None:
    """Return :class:`PytestAssertions` when pytest can be imported."""
    del world
    if importlib.util.find_spec("pytest") is None:
        return None
    return PytestAssertions()


__all__ = ["CapabilityProvider", "PytestAssertions", "pytest_capability"]
