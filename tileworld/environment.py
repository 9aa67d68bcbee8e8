"""
TileworldEnvironment - the shared grid that agents act upon

The environment owns the true object layout. Agents only see it through
sense() and only change it through the action methods, which validate the
request and raise an ActionError subclass when it cannot be carried out.
"""
import logging
import random
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from .world_generator import (
    Direction,
    ObjectCreator,
    ObjectKind,
    Position,
    WorldGenerator,
    WorldObject,
)

logger = logging.getLogger(__name__)


class ActionError(Exception):
    """An action was rejected by the environment"""


class CellBlockedError(ActionError):
    """The target cell holds an obstacle or lies outside the grid"""


class OutOfFuelError(ActionError):
    """The agent has no fuel left to move"""


class InvalidActionError(ActionError):
    """Pickup, deposit or refuel is not possible at the current cell"""


class SensorReading(NamedTuple):
    objects: List[WorldObject]
    position: Position
    sensor_range: int


class TileworldEnvironment:
    """
    Grid world holding tiles, holes, obstacles and one fuel station.

    Agents passed to the action methods only need ``position``,
    ``fuel_level`` and ``carried_tiles`` attributes; the environment reads
    them to validate the action but never writes them.
    """

    def __init__(
        self,
        width: int,
        height: int,
        lifetime: float,
        creators: Sequence[ObjectCreator] = (),
        rng: Optional[random.Random] = None,
        default_fuel_level: float = 500,
        carry_capacity: int = 3,
    ):
        self.width = width
        self.height = height
        self.lifetime = lifetime
        self.creators = list(creators)
        self.rng = rng or random.Random()
        self.default_fuel_level = default_fuel_level
        self.carry_capacity = carry_capacity

        self.generator = WorldGenerator(width, height, self.rng)
        self._objects: Dict[Position, WorldObject] = {}
        self.fuel_station: Optional[WorldObject] = None

        # Statistics
        self.reward = 0
        self.created_count = {kind: 0 for kind in ObjectKind}
        self.expired_count = {kind: 0 for kind in ObjectKind}

    # ========== WORLD STATE ==========

    def is_in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def object_at(self, position: Position) -> Optional[WorldObject]:
        return self._objects.get(tuple(position))

    def objects(self, kind: Optional[ObjectKind] = None) -> List[WorldObject]:
        if kind is None:
            return list(self._objects.values())
        return [o for o in self._objects.values() if o.kind is kind]

    def add_object(self, obj: WorldObject):
        """Place an object, replacing nothing"""
        if not self.is_in_bounds(*obj.position):
            raise ValueError(f"{obj.position} is outside the grid")
        if obj.position in self._objects:
            raise ValueError(f"Cell {obj.position} is already occupied")
        self._objects[obj.position] = obj
        if obj.kind is ObjectKind.FUEL_STATION:
            self.fuel_station = obj

    def is_cell_blocked(self, x: int, y: int) -> bool:
        obj = self._objects.get((x, y))
        return obj is not None and obj.kind is ObjectKind.OBSTACLE

    def place_fuel_station(self, taken: Iterable[Position] = ()) -> WorldObject:
        station = self.generator.place_fuel_station(set(taken) | set(self._objects))
        self.add_object(station)
        logger.info("Fuel station placed at %s", station.position)
        return station

    def step(self, now: float, occupied: Iterable[Position] = ()):
        """
        Advance the world by one step.

        Expired objects are removed first, then each creator adds its new
        objects on cells that hold neither an object nor an agent.

        Args:
            now: Current simulation time
            occupied: Cells currently holding agents
        """
        for position, obj in list(self._objects.items()):
            if obj.is_expired(now):
                del self._objects[position]
                self.expired_count[obj.kind] += 1

        free_cells = self.generator.free_cells(set(self._objects) | set(occupied))
        for creator in self.creators:
            for obj in creator.create(self.rng, free_cells, now, self.lifetime):
                self._objects[obj.position] = obj
                self.created_count[obj.kind] += 1

    # ========== SENSING ==========

    def sense(self, position: Position, sensor_range: int) -> SensorReading:
        """Return every object inside the square window around position"""
        x, y = position
        found = []
        for dy in range(-sensor_range, sensor_range + 1):
            for dx in range(-sensor_range, sensor_range + 1):
                obj = self._objects.get((x + dx, y + dy))
                if obj is not None:
                    found.append(obj)
        return SensorReading(found, (x, y), sensor_range)

    @staticmethod
    def distance(a: Position, b: Position) -> int:
        """Manhattan distance"""
        return abs(a[0] - b[0]) + abs(a[1] - b[1])

    # ========== ACTIONS ==========

    def move(self, agent, direction: Direction) -> Position:
        """
        Validate a move and return the agent's new position.

        Raises:
            OutOfFuelError: The agent has no fuel left
            CellBlockedError: The target is out of bounds or an obstacle
        """
        if direction is Direction.Z:
            return tuple(agent.position)
        if agent.fuel_level <= 0:
            raise OutOfFuelError(f"No fuel left at {agent.position}")
        target = direction.apply(agent.position)
        if not self.is_in_bounds(*target):
            raise CellBlockedError(f"{target} is outside the grid")
        if self.is_cell_blocked(*target):
            raise CellBlockedError(f"{target} is blocked by an obstacle")
        return target

    def can_pickup_tile(self, agent) -> bool:
        obj = self.object_at(agent.position)
        return (
            obj is not None
            and obj.kind is ObjectKind.TILE
            and agent.carried_tiles < self.carry_capacity
        )

    def pickup_tile(self, agent) -> WorldObject:
        if not self.can_pickup_tile(agent):
            raise InvalidActionError(f"No tile can be picked up at {agent.position}")
        return self._objects.pop(tuple(agent.position))

    def can_put_tile_in_hole(self, agent) -> bool:
        obj = self.object_at(agent.position)
        return obj is not None and obj.kind is ObjectKind.HOLE and agent.carried_tiles > 0

    def put_tile_in_hole(self, agent) -> WorldObject:
        if not self.can_put_tile_in_hole(agent):
            raise InvalidActionError(f"No hole can be filled at {agent.position}")
        hole = self._objects.pop(tuple(agent.position))
        self.reward += 1
        return hole

    def refuel(self, agent) -> float:
        """Return the refilled fuel level for an agent standing on the station"""
        obj = self.object_at(agent.position)
        if obj is None or obj.kind is not ObjectKind.FUEL_STATION:
            raise InvalidActionError(f"No fuel station at {agent.position}")
        return self.default_fuel_level

    def get_statistics(self) -> Dict[str, object]:
        return {
            'reward': self.reward,
            'tiles': len(self.objects(ObjectKind.TILE)),
            'holes': len(self.objects(ObjectKind.HOLE)),
            'obstacles': len(self.objects(ObjectKind.OBSTACLE)),
            'created': {kind.value: count for kind, count in self.created_count.items()},
            'expired': {kind.value: count for kind, count in self.expired_count.items()},
        }
