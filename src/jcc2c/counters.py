"""Derive Cobertura metrics from JaCoCo counters."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol

from jcc2c.models import BRANCH, COMPLEXITY, LINE, CoverageMetrics

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from jcc2c.models import Counter


class HasCounters(Protocol):
    counters: list[Counter]


def find_counter(counters: Sequence[Counter], kind: str) -> Counter | None:
    """Return the first counter of the given kind, or None if there is none."""
    return next((counter for counter in counters if counter.kind == kind), None)


def rate(counter: Counter) -> float:
    """Return ``covered / (covered + missed)``; NaN when both are zero."""
    if counter.total == 0:
        return math.nan
    return counter.covered / counter.total


def total(counter: Counter) -> float:
    """Return ``covered + missed`` as a float."""
    return float(counter.total)


def counter_value(
    counters: Sequence[Counter],
    kind: str,
    operation: Callable[[Counter], float] = rate,
) -> float:
    """Apply *operation* to the counter of *kind*; 0.0 if the kind is absent."""
    counter = find_counter(counters, kind)
    if counter is None:
        return 0.0
    return operation(counter)


def metrics_for(node: HasCounters) -> CoverageMetrics:
    """Compute line-rate, branch-rate and complexity from a node's own counters."""
    return CoverageMetrics(
        line_rate=counter_value(node.counters, LINE),
        branch_rate=counter_value(node.counters, BRANCH),
        complexity=counter_value(node.counters, COMPLEXITY, total),
    )


def format_decimal(value: float) -> str:
    """Render a metric as text.

    Uses the shortest round-trip form (``0.75``, ``12.0``). NaN is written as
    ``NaN``, which is what existing consumers of the original tool expect.
    """
    if math.isnan(value):
        return "NaN"
    return repr(float(value))
