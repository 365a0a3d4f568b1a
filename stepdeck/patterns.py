"""Pattern classes used to match step lines against step definitions."""

from __future__ import annotations

import re
import string
import typing as t

# A str formatter is a str.format template with at least one "{}" field.
ArgFormatter: t.TypeAlias = str | t.Callable[[str], str]

_PLACEHOLDER = re.compile(r"\$\w+")
# Only characters with a meaning outside verbose mode, so spaces stay readable.
_METACHARS = re.compile(r"([.^$*+?{}\[\]\\|()])")


def _has_field(template: str) -> bool:
    return any(
        field is not None for _, field, _, _ in string.Formatter().parse(template)
    )


class StepPattern:
    """Regular expression matched against literal step text.

    Two patterns are equal when their compiled expression and flags are equal,
    which is what duplicate detection compares.
    """

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        if isinstance(pattern, re.Pattern):
            self.regex = pattern
        elif isinstance(pattern, str):
            self.regex = re.compile(pattern)
        else:
            msg = f"step pattern must be str or re.Pattern, got {type(pattern).__name__}"
            raise TypeError(msg)

    @property
    def source(self) -> str:
        """Return the text the pattern was written as."""
        return self.regex.pattern

    def match(self, text: str) -> re.Match[str] | None:
        """Return the match of the pattern in *text*, if any."""
        return self.regex.search(text)

    def __call__(self, text: str) -> bool:
        """Return ``True`` if *text* matches the pattern."""
        return self.match(text) is not None

    def args(self, text: str) -> tuple[str | None, ...]:
        """Return the groups captured from *text*, or ``()`` when it doesn't match."""
        match = self.match(text)
        return () if match is None else match.groups()

    def format_args(self, text: str, formatter: ArgFormatter) -> str:
        """Return *text* with every captured group passed through *formatter*.

        A string formatter is a template such as ``"[{}]"``; a callable gets
        each group and returns its replacement. Groups nested inside an earlier
        group, and groups that did not participate, are left alone.

        Raises
        ------
        ValueError
            When a string formatter has no replacement field, e.g. ``"%s"``.
        """
        if isinstance(formatter, str) and not _has_field(formatter):
            msg = f"formatter template must contain a '{{}}' field, got {formatter!r}"
            raise ValueError(msg)
        match = self.match(text)
        if match is None:
            return text
        apply = formatter.format if isinstance(formatter, str) else formatter
        parts: list[str] = []
        pos = 0
        for index in range(1, self.regex.groups + 1):
            start, end = match.span(index)
            if start == -1 or start < pos:
                continue
            parts.append(text[pos:start])
            parts.append(apply(match.group(index)))
            pos = end
        parts.append(text[pos:])
        return "".join(parts)

    def _key(self) -> tuple[str, int]:
        return (self.regex.pattern, self.regex.flags)

    def __eq__(self, other: object) -> bool:
        """Return ``True`` when *other* compiles to the same expression."""
        if not isinstance(other, StepPattern):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        """Hash on the compiled expression."""
        return hash(self._key())

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"{type(self).__name__}({self.source!r})"


class Template(StepPattern):
    """Plain step text where each ``$name`` placeholder captures ``(.*)``.

    ``Template("I have $count cukes")`` matches exactly the same lines as
    ``StepPattern(r"^I have (.*) cukes$")`` and compares equal to it.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        pieces = _PLACEHOLDER.split(text)
        escaped = (_METACHARS.sub(r"\\\1", piece) for piece in pieces)
        super().__init__("^" + "(.*)".join(escaped) + "$")

    @property
    def source(self) -> str:
        """Return the template text."""
        return self.text


def as_pattern(pattern: str | re.Pattern[str] | StepPattern) -> StepPattern:
    """Coerce *pattern* into a :class:`StepPattern`.

    Plain strings are treated as regular expressions; wrap them in
    :class:`Template` for placeholder syntax.
    """
    if isinstance(pattern, StepPattern):
        return pattern
    return StepPattern(pattern)


__all__ = ["ArgFormatter", "StepPattern", "Template", "as_pattern"]
