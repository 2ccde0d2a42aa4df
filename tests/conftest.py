"""Deterministic deviate streams for exercising the engine."""
import itertools
import logging

import pytest

from threaded_mc.deviates import DeviateStream


class CycleStream(DeviateStream):
    """Repeats a fixed sequence of deviates forever."""

    def __init__(self, values):
        self._values = itertools.cycle(values)

    def draw(self):
        return next(self._values)


@pytest.fixture
def constant_stream():
    return CycleStream([0.5])


@pytest.fixture
def alternating_stream():
    return CycleStream([0.0, 1.0])


@pytest.fixture
def fixed_mint():
    class CountingMint:
        def __init__(self):
            self.calls = 0

        def mint(self, count):
            self.calls += count
            return list(range(1, count + 1))

    return CountingMint()


@pytest.fixture(autouse=True)
def reset_package_logger():
    logger = logging.getLogger("threaded_mc")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
