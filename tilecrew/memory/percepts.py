"""
Percept - what an agent remembers about a single grid cell.

The PerceptStore holds at most one percept per cell; cells with nothing
remembered are simply absent from it.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from tileworld.world_generator import ObjectKind, Position


@dataclass(frozen=True)
class Percept:
    """A timestamped belief about the occupant of one cell"""
    kind: ObjectKind
    position: Position
    timestamp: float

    @property
    def key(self) -> Tuple[Position, ObjectKind]:
        """Identity used when goals are announced and stripped"""
        return self.position, self.kind

    @property
    def is_fuel_station(self) -> bool:
        return self.kind is ObjectKind.FUEL_STATION


class PerceptStore:
    """Sparse grid of percepts"""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._cells: Dict[Position, Percept] = {}

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, position: Position) -> Optional[Percept]:
        return self._cells.get(tuple(position))

    def set(self, percept: Percept):
        if not self.in_bounds(*percept.position):
            raise ValueError(f"{percept.position} is outside the grid")
        self._cells[tuple(percept.position)] = percept

    def clear(self, position: Position) -> Optional[Percept]:
        return self._cells.pop(tuple(position), None)

    def snapshot(self) -> Dict[Position, Percept]:
        """Copy of the store, safe to hand to other agents"""
        return dict(self._cells)

    def __iter__(self) -> Iterator[Percept]:
        return iter(list(self._cells.values()))

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, position) -> bool:
        return tuple(position) in self._cells
