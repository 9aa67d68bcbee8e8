"""
Tileworld - grid environment for the tile collection agents

Holds the true world state (tiles, holes, obstacles, fuel station), the
object creation schedule and the A* pathfinder used by the agents.
"""

from .world_generator import Direction, ObjectCreator, ObjectKind, WorldGenerator, WorldObject
from .environment import (
    ActionError,
    CellBlockedError,
    InvalidActionError,
    OutOfFuelError,
    SensorReading,
    TileworldEnvironment,
)
from .pathfinding import Pathfinder, path_to_directions

__all__ = [
    'Direction',
    'ObjectCreator',
    'ObjectKind',
    'WorldGenerator',
    'WorldObject',
    'ActionError',
    'CellBlockedError',
    'InvalidActionError',
    'OutOfFuelError',
    'SensorReading',
    'TileworldEnvironment',
    'Pathfinder',
    'path_to_directions',
]
