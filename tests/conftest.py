"""Shared fixtures for the tilecrew test suite."""

import pytest

from tilecrew.config import TileworldParameters
from tilecrew.memory import DecayMemory
from tileworld.environment import SensorReading
from tileworld.world_generator import WorldObject


class Clock:
    """Settable simulation clock"""

    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def params():
    return TileworldParameters(
        width=20,
        height=20,
        num_agents=2,
        sensor_range=1,
        default_fuel_level=500,
        lifetime=50,
        hard_fuel_limit=100,
        seed=1,
    )


@pytest.fixture
def memory(clock):
    """10x10 memory, sensor range 1, horizon 20"""
    return DecayMemory(10, 10, 1, 20, clock)


@pytest.fixture
def make_reading():
    """Build a SensorReading from (kind, position) pairs"""

    def _make(position, objects=(), sensor_range=1):
        return SensorReading(
            [WorldObject(kind, pos) for kind, pos in objects],
            position,
            sensor_range,
        )

    return _make
