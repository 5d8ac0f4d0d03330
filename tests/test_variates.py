"""Tests for the injectable random source."""

from __future__ import annotations

import math
import random

import pytest

from banksim.variates import RandomVariate


class _FixedRandom(random.Random):
    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


class TestRandomVariate:

    def test_exponential_inverse_transform(self):
        rv = RandomVariate(rng=_FixedRandom([0.5]))
        assert rv.exponential(120.0) == pytest.approx(-120.0 * math.log(0.5))

    def test_next_uniform_skips_zero(self):
        rv = RandomVariate(rng=_FixedRandom([0.0, 0.0, 0.25]))
        assert rv.next_uniform() == 0.25

    def test_exponential_is_strictly_positive(self):
        rv = RandomVariate(seed=3)
        assert all(rv.exponential(120.0) > 0 for _ in range(1000))

    def test_exponential_sample_mean(self):
        rv = RandomVariate(seed=11)
        draws = [rv.exponential(120.0) for _ in range(20000)]
        assert sum(draws) / len(draws) == pytest.approx(120.0, rel=0.05)

    def test_exponential_rejects_non_positive_mean(self):
        with pytest.raises(ValueError):
            RandomVariate(seed=1).exponential(0.0)

    def test_uniform_int_bounds_inclusive(self):
        rv = RandomVariate(seed=5)
        draws = {rv.uniform_int(1, 100) for _ in range(20000)}
        assert min(draws) == 1
        assert max(draws) == 100

    def test_uniform_int_top_of_range(self):
        rv = RandomVariate(rng=_FixedRandom([0.9999999999]))
        assert rv.uniform_int(1, 100) == 100

    def test_uniform_int_single_value(self):
        assert RandomVariate(seed=2).uniform_int(7, 7) == 7

    def test_uniform_int_rejects_empty_range(self):
        with pytest.raises(ValueError):
            RandomVariate(seed=2).uniform_int(5, 4)

    def test_same_seed_same_stream(self):
        a, b = RandomVariate(seed=42), RandomVariate(seed=42)
        assert [a.exponential(10.0) for _ in range(5)] == [b.exponential(10.0) for _ in range(5)]
