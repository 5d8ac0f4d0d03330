"""Shared fixtures: scripted random sources for deterministic scenarios."""

from __future__ import annotations

import itertools

import pytest

from banksim.variates import RandomVariate


class ScriptedVariate(RandomVariate):
    """Returns scripted gaps and transaction counts instead of random draws.

    The last value of each script repeats forever.
    """

    def __init__(self, gaps, transactions):
        super().__init__(seed=0)
        self._gaps = _repeat_last(gaps)
        self._transactions = _repeat_last(transactions)

    def exponential(self, mean):
        return next(self._gaps)

    def uniform_int(self, lo, hi):
        return next(self._transactions)


def _repeat_last(values):
    values = list(values)
    return itertools.chain(values, itertools.repeat(values[-1]))


@pytest.fixture
def scripted():
    return ScriptedVariate
