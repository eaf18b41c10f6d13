"""
Pytest configuration and shared fixtures.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from pulse_fields.core.config import SimulationConfig
from pulse_fields.core.context import SimulationContext


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return SimulationConfig()


@pytest.fixture
def ctx(config, rng):
    return SimulationContext.create(config, rng=rng)
