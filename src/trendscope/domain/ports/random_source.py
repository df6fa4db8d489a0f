"""Port for the randomness behind engagement jitter."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Uniform draws in ``[low, high)``.

    Production uses an unseeded generator; tests substitute a fixed one
    (e.g. always the interval midpoint).
    """

    def uniform(self, low: float, high: float) -> float: ...
