"""Profile criteria: which scalar to compare and which direction wins.

A :class:`Criterion` pairs a pure extraction function with a "better or
equal" comparator.  The engine never assumes a direction; it only asks
``better(a, b)`` when looking for the best value of an instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from perfprofile.records import MISSING, MaybeFloat, Record, as_number, lookup

__all__ = [
    "MISSING",
    "Criterion",
    "DIRECTIONS",
    "field_criterion",
    "higher_is_better",
    "lower_is_better",
]


def lower_is_better(a: float, b: float) -> bool:
    """``a`` is at least as good as ``b`` when it is not larger."""
    return a <= b


def higher_is_better(a: float, b: float) -> bool:
    """``a`` is at least as good as ``b`` when it is not smaller."""
    return a >= b


DIRECTIONS: dict[str, Callable[[float, float], bool]] = {
    "lower": lower_is_better,
    "higher": higher_is_better,
}


@dataclass(frozen=True)
class Criterion:
    """A named metric and its ordering rule.

    Attributes:
        name: Human-readable name, e.g. ``"CPU time"``.
        extract: ``record -> float | MISSING``.  Must be pure.
        better: ``(a, b) -> bool``, true when *a* is better than or equal
            to *b*.
    """

    name: str
    extract: Callable[[Record], MaybeFloat]
    better: Callable[[float, float], bool] = lower_is_better

    def value(self, record: Record) -> MaybeFloat:
        """Extract the metric from *record*, normalizing bad values to MISSING."""
        raw = self.extract(record)
        if raw is MISSING:
            return MISSING
        return as_number(raw)

    def best(self, values: list[float]) -> float:
        """Return the best of *values* under :attr:`better`.

        *values* must be non-empty.
        """
        best = values[0]
        for v in values[1:]:
            if self.better(v, best):
                best = v
        return best


def field_criterion(name: str, path: str, direction: str = "lower") -> Criterion:
    """Build a criterion reading the numeric field at dotted *path*.

    Args:
        name: Criterion display name.
        path: Dotted field path, e.g. ``"benchmark.time"``.
        direction: ``"lower"`` or ``"higher"`` is better.

    Raises:
        ValueError: If *direction* is unknown.
    """
    try:
        better = DIRECTIONS[direction]
    except KeyError:
        raise ValueError(
            f"Unknown criterion direction '{direction}'. "
            f"Valid directions: {', '.join(sorted(DIRECTIONS))}"
        ) from None

    def extract(record: Record) -> MaybeFloat:
        return as_number(lookup(record, path))

    extract.__qualname__ = f"field_criterion.<{path}>"
    return Criterion(name=name, extract=extract, better=better)
