# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# variates.py
# -----------------------------------------------------------------------------
# Purpose:
#   Random variate generation for the bank model: exponential inter-arrival
#   gaps and uniform integer transaction counts.
#
# Design notes:
#   - One RandomVariate object feeds every draw of a replication, so a seed
#     fully determines the run (needed for CRN comparisons and tests).
#   - Both variates are derived from next_uniform(); a test double only has
#     to override that method (or the variate methods themselves).
#
# Usage:
#   rv = RandomVariate(seed=42)
#   gap = rv.exponential(120.0)
#   n = rv.uniform_int(1, 100)
# -----------------------------------------------------------------------------

from __future__ import annotations
import math, random
from typing import Optional

class RandomVariate:
    """Injectable random source.

    Parameters
    ----------
    seed : int, optional
        Seed for a private ``random.Random``; ignored when ``rng`` is given.
    rng : random.Random, optional
        Generator to draw from (lets callers share or pre-seed a stream).
    """
    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random(seed)

    def next_uniform(self) -> float:
        """Uniform draw on the open interval (0, 1)."""
        u = self.rng.random()
        # random() is on [0, 1); log(0) is undefined
        while u <= 0.0:
            u = self.rng.random()
        return u

    def exponential(self, mean: float) -> float:
        """Inverse-transform exponential sample with the given mean."""
        if mean <= 0:
            raise ValueError(f"Exponential mean must be positive, got {mean}")
        return -mean * math.log(self.next_uniform())

    def uniform_int(self, lo: int, hi: int) -> int:
        """Uniform integer on [lo, hi], both ends inclusive."""
        if lo > hi:
            raise ValueError(f"Empty integer range [{lo}, {hi}]")
        span = hi - lo + 1
        return lo + min(int(self.next_uniform() * span), span - 1)
