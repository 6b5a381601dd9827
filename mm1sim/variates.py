# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# variates.py
# -----------------------------------------------------------------------------
# Purpose:
#   Random variate sources for interarrival and service durations.
#
# Design notes:
#   - Each entity gets its own source so streams stay independent and a
#     fixed seed reproduces a run exactly (common random numbers).
#   - ReplayVariates feeds scripted durations for hand-checked scenarios.
#
# Usage:
#   src = ExponentialVariates(seed=42); src.draw(rate=1.0)
# -----------------------------------------------------------------------------

from __future__ import annotations
import math, random
from typing import Iterable, List, Optional

class ExponentialVariates:
    """Exponential durations with mean 1/rate from a private RNG."""
    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def draw(self, rate: float) -> float:
        assert rate > 0, f"rate must be positive, got {rate}"
        return self.rng.expovariate(rate)

class ReplayVariates:
    """
    Replays a fixed list of durations, ignoring the rate argument.

    Once the list is used up every draw returns +inf, which pushes the
    entity's next event beyond any finite horizon. With repeat=True the
    list is cycled instead.
    """
    def __init__(self, values: Iterable[float], repeat: bool = False):
        self.values: List[float] = [float(v) for v in values]
        self.repeat = repeat
        self._i = 0

    def draw(self, rate: float) -> float:
        if self._i >= len(self.values):
            if not (self.repeat and self.values):
                return math.inf
            self._i = 0
        val = self.values[self._i]
        self._i += 1
        return val
