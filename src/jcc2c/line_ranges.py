"""Split a class's line table among its methods.

JaCoCo only associates lines with source files. A method is assumed to own
every line from its declared start line up to (but excluding) the next
larger start line declared in the same class; the method with the largest
start line owns everything after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from jcc2c.models import JacocoMethod, LineRecord


@dataclass(frozen=True)
class LineRange:
    """Half-open ``[start, end)`` range of line numbers; ``end=None`` is unbounded."""

    start: int
    end: int | None = None

    def __contains__(self, number: object) -> bool:
        if not isinstance(number, int):
            return False
        if number < self.start:
            return False
        return self.end is None or number < self.end


def method_line_range(start_line: int, all_start_lines: Iterable[int]) -> LineRange:
    """Return the range of the method starting at *start_line*.

    Methods sharing a start line get identical ranges.
    """
    larger = [line for line in all_start_lines if line > start_line]
    return LineRange(start_line, min(larger) if larger else None)


def select_lines(lines: Iterable[LineRecord], line_range: LineRange) -> list[LineRecord]:
    """Return the lines whose number falls in *line_range*, in input order."""
    return [line for line in lines if line.number in line_range]


def assign_method_lines(
    methods: Sequence[JacocoMethod],
    lines: Sequence[LineRecord],
) -> list[tuple[JacocoMethod, list[LineRecord]]]:
    """Pair every method with the lines of its range, preserving method order."""
    start_lines = [method.line for method in methods]
    return [
        (method, select_lines(lines, method_line_range(method.line, start_lines)))
        for method in methods
    ]
