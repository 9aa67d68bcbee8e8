"""
DecayMemory - an agent's private, decaying model of the world

Combines the PerceptStore with an exploration score per cell. Percepts
older than the horizon are forgotten (the fuel station never is), and the
exploration score measures how long a cell has gone unobserved.
"""
import logging
from typing import Callable, Iterable, List, Mapping, Optional

import numpy as np

from tileworld.world_generator import ObjectKind, Position
from .percepts import Percept, PerceptStore

logger = logging.getLogger(__name__)


class DecayMemory:
    """
    Percept memory with time-based decay.

    Exploration scores start at +inf for cells never seen, are set to 0
    when a cell is observed (directly or through a peer's map) and grow
    on every decay: a 0 becomes 1 and anything else doubles.
    """

    def __init__(
        self,
        width: int,
        height: int,
        sensor_range: int,
        horizon: float,
        clock: Callable[[], float]
    ):
        """
        Args:
            width: Grid width
            height: Grid height
            sensor_range: Sensor range shared by every agent
            horizon: Age after which a percept is forgotten
            clock: Returns the current simulation time
        """
        self.width = width
        self.height = height
        self.sensor_range = sensor_range
        self.horizon = horizon
        self.clock = clock

        self.store = PerceptStore(width, height)
        # Indexed [x, y]
        self.exploration = np.full((width, height), np.inf)
        self.fuel_station: Optional[Position] = None

    def in_bounds(self, x: int, y: int) -> bool:
        return self.store.in_bounds(x, y)

    def _window(self, center: Position, radius: int) -> Iterable[Position]:
        """In-bounds cells of the square window around center"""
        cx, cy = center
        for x in range(max(0, cx - radius), min(self.width, cx + radius + 1)):
            for y in range(max(0, cy - radius), min(self.height, cy + radius + 1)):
                yield x, y

    # ========== UPDATES ==========

    def observe(self, reading):
        """
        Apply a sensor reading.

        Decays the memory first, then overwrites every cell in the sensed
        window. A re-sensed object of the same kind keeps its first-seen
        timestamp; a new or changed object is stamped with the current
        time. Cells in range that hold nothing are cleared.

        Args:
            reading: SensorReading with objects, position and sensor_range
        """
        self.decay()
        now = self.clock()
        sensed = {tuple(obj.position): obj for obj in reading.objects}

        for position in self._window(reading.position, reading.sensor_range):
            self.exploration[position] = 0.0
            obj = sensed.get(position)
            previous = self.store.get(position)

            if obj is None:
                if previous is not None:
                    self.store.clear(position)
                continue

            if obj.kind is ObjectKind.FUEL_STATION and self.fuel_station is None:
                self.fuel_station = position
                logger.debug("Fuel station found at %s", position)

            if previous is not None and previous.kind is obj.kind:
                continue
            self.store.set(Percept(obj.kind, position, now))

    def decay(self):
        """Forget stale percepts and age every exploration score"""
        now = self.clock()
        for percept in self.store:
            if not percept.is_fuel_station and now - percept.timestamp > self.horizon:
                self.store.clear(percept.position)

        with np.errstate(over='ignore'):
            fresh = self.exploration == 0
            self.exploration *= 2.0
            self.exploration[fresh] = 1.0

    def merge(self, peer_percepts: Mapping[Position, Percept], peer_position: Position):
        """
        Import a peer's map around the peer's position.

        Only cells within sensor range of peer_position are touched. The
        peer's percept wins when the local cell is empty or holds an older
        percept, and a cell the peer reports empty is cleared locally.
        A remembered fuel station is never overwritten or cleared.

        Args:
            peer_percepts: Snapshot of the peer's PerceptStore
            peer_position: Where the peer stood when it sent the snapshot
        """
        for position in self._window(peer_position, self.sensor_range):
            self.exploration[position] = 0.0
            peer = peer_percepts.get(position)
            local = self.store.get(position)

            if peer is None:
                if local is not None and not local.is_fuel_station:
                    self.store.clear(position)
                continue

            if peer.is_fuel_station and self.fuel_station is None:
                self.fuel_station = position

            if local is None or (not local.is_fuel_station and peer.timestamp > local.timestamp):
                self.store.set(peer)

    def remove(self, position: Position) -> Optional[Percept]:
        """Forget whatever is remembered at position"""
        return self.store.clear(position)

    # ========== QUERIES ==========

    def get(self, position: Position) -> Optional[Percept]:
        return self.store.get(position)

    def snapshot(self):
        return self.store.snapshot()

    def is_cell_blocked(self, x: int, y: int) -> bool:
        percept = self.store.get((x, y))
        return percept is not None and percept.kind is ObjectKind.OBSTACLE

    def remaining_lifetime(self, percept: Percept, threshold: float = 1.0) -> float:
        """
        Estimate how long a remembered object still has to live.

        Returns:
            horizon * threshold - (now - percept.timestamp)
        """
        return self.horizon * threshold - (self.clock() - percept.timestamp)

    def estimated_remaining_lifetime(self, position: Position, threshold: float = 1.0) -> Optional[float]:
        percept = self.store.get(position)
        if percept is None:
            return None
        return self.remaining_lifetime(percept, threshold)

    def objects_within(self, zone, kind: ObjectKind) -> List[Percept]:
        """Remembered objects of one kind inside a zone, ordered by column then row"""
        found = [p for p in self.store if p.kind is kind and zone.contains(p.position)]
        found.sort(key=lambda p: p.position)
        return found

    def objects_of_kind(self, kind: ObjectKind) -> List[Percept]:
        return sorted((p for p in self.store if p.kind is kind), key=lambda p: p.position)

    def exploration_score(self, position: Position) -> float:
        return float(self.exploration[tuple(position)])

    def _mirror(self, i: int, size: int) -> int:
        if i < 0:
            i = -i
        elif i >= size:
            i = 2 * (size - 1) - i
        return min(max(i, 0), size - 1)

    def anchor_exploration_score(self, anchor: Position) -> float:
        """
        Sum of exploration scores over the sensor window around anchor.

        Cells outside the grid take the score of their mirror image, so
        anchors near an edge are not penalised for having fewer cells.
        """
        ax, ay = anchor
        r = self.sensor_range
        xs = [self._mirror(i, self.width) for i in range(ax - r, ax + r + 1)]
        ys = [self._mirror(j, self.height) for j in range(ay - r, ay + r + 1)]
        return float(self.exploration[np.ix_(xs, ys)].sum())
