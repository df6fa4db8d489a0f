from __future__ import annotations

import random


class SystemRandomSource:
    """Unseeded uniform generator for engagement jitter.

    Implements ``RandomSource``. Not cryptographically strong.
    """

    def __init__(self) -> None:
        self._rng = random.Random()

    def uniform(self, low: float, high: float) -> float:
        if high <= low:
            return low
        return low + (high - low) * self._rng.random()
