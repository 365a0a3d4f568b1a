"""Multiline step arguments: data tables and doc strings."""

from __future__ import annotations

import dataclasses as dc
import typing as t


@dc.dataclass(frozen=True, slots=True)
class Table:
    """A data table attached to a step line."""

    rows: tuple[tuple[str, ...], ...]

    def __post_init__(self) -> None:
        rows = tuple(tuple(str(cell) for cell in row) for row in self.rows)
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            msg = f"table rows must have the same width, got widths {sorted(widths)}"
            raise ValueError(msg)
        object.__setattr__(self, "rows", rows)

    @classmethod
    def from_rows(cls, rows: t.Iterable[t.Iterable[object]]) -> Table:
        """Build a table from any iterable of rows."""
        return cls(tuple(tuple(str(cell) for cell in row) for row in rows))

    @property
    def headers(self) -> tuple[str, ...]:
        """Return the first row."""
        return self.rows[0] if self.rows else ()

    def raw(self) -> list[list[str]]:
        """Return every row, header included, as lists."""
        return [list(row) for row in self.rows]

    def hashes(self) -> list[dict[str, str]]:
        """Return the body rows as dictionaries keyed by the header row."""
        return [dict(zip(self.headers, row, strict=True)) for row in self.rows[1:]]

    def rows_hash(self) -> dict[str, str]:
        """Return a two-column table as a mapping of first to second column."""
        if self.rows and len(self.headers) != 2:
            msg = f"rows_hash() needs exactly 2 columns, got {len(self.headers)}"
            raise ValueError(msg)
        return {key: value for key, value in self.rows}

    def __len__(self) -> int:
        """Return the number of rows, header included."""
        return len(self.rows)


@dc.dataclass(frozen=True, slots=True)
class DocString:
    """A block string attached to a step line."""

    content: str
    content_type: str = ""

    def __str__(self) -> str:
        """Return the block content."""
        return self.content


MultilineArg: t.TypeAlias = Table | DocString


__all__ = ["DocString", "MultilineArg", "Table"]
