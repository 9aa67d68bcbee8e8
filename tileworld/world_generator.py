"""
Object vocabulary and creation schedule for the Tileworld grid.

Tiles, holes and obstacles appear at random empty cells every step and
disappear once their lifetime is over. A single fuel station is placed
when the world is created and never expires.
"""
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Set, Tuple

Position = Tuple[int, int]


class ObjectKind(Enum):
    """Kinds of objects that can occupy a cell"""
    TILE = "tile"
    HOLE = "hole"
    OBSTACLE = "obstacle"
    FUEL_STATION = "fuel_station"


class Direction(Enum):
    """Movement directions. Z means stay in place."""
    N = (0, -1)
    S = (0, 1)
    E = (1, 0)
    W = (-1, 0)
    Z = (0, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def apply(self, position: Position) -> Position:
        return position[0] + self.dx, position[1] + self.dy

    @classmethod
    def between(cls, origin: Position, target: Position) -> 'Direction':
        """Direction of a single orthogonal step from origin to target"""
        offset = (target[0] - origin[0], target[1] - origin[1])
        for direction in cls:
            if direction.value == offset:
                return direction
        raise ValueError(f"{origin} and {target} are not adjacent")


@dataclass(frozen=True)
class WorldObject:
    """An object placed on the grid"""
    kind: ObjectKind
    position: Position
    created_at: float = 0
    lifetime: Optional[float] = None

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]

    def is_expired(self, now: float) -> bool:
        if self.kind is ObjectKind.FUEL_STATION or self.lifetime is None:
            return False
        return now - self.created_at > self.lifetime


class ObjectCreator:
    """
    Creates objects of one kind at a normally distributed rate.

    Every step a rate is drawn from N(mean, dev). Its integer part is the
    number of objects created, plus one more with probability equal to
    the fractional part, so the expected count per step equals the mean.
    """

    def __init__(self, kind: ObjectKind, mean: float, dev: float):
        self.kind = kind
        self.mean = mean
        self.dev = dev

    def draw_count(self, rng: random.Random) -> int:
        rate = max(0.0, rng.gauss(self.mean, self.dev))
        count = int(math.floor(rate))
        if rng.random() < rate - count:
            count += 1
        return count

    def create(
        self,
        rng: random.Random,
        free_cells: List[Position],
        now: float,
        lifetime: float
    ) -> List[WorldObject]:
        """
        Create this step's objects on randomly chosen free cells.

        Args:
            rng: Random source owned by the model
            free_cells: Candidate cells; chosen cells are removed from the list
            now: Current simulation time
            lifetime: Steps an object survives before it is removed

        Returns:
            The created objects
        """
        created = []
        for _ in range(self.draw_count(rng)):
            if not free_cells:
                break
            index = rng.randrange(len(free_cells))
            position = free_cells.pop(index)
            created.append(WorldObject(self.kind, position, now, lifetime))
        return created


class WorldGenerator:
    """Places the static content of a new world"""

    def __init__(self, width: int, height: int, rng: random.Random):
        self.width = width
        self.height = height
        self.rng = rng

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def free_cells(self, taken: Iterable[Position] = ()) -> List[Position]:
        """All cells not listed in taken, in row-major order"""
        taken_set: Set[Position] = set(taken)
        return [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if (x, y) not in taken_set
        ]

    def place_fuel_station(self, taken: Iterable[Position] = ()) -> WorldObject:
        cells = self.free_cells(taken)
        if not cells:
            raise ValueError("No free cell left for the fuel station")
        position = cells[self.rng.randrange(len(cells))]
        return WorldObject(ObjectKind.FUEL_STATION, position)

    def random_positions(self, count: int, taken: Iterable[Position] = ()) -> List[Position]:
        """Pick count distinct free cells"""
        cells = self.free_cells(taken)
        if count > len(cells):
            raise ValueError(f"Cannot place {count} agents on {len(cells)} free cells")
        return self.rng.sample(cells, count)
