"""
Zone partitioning

Splits the map once into one rectangular band per agent and lays out the
anchor points an agent visits to sweep its band with its sensor.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from tileworld.world_generator import Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Zone:
    """
    A rectangular region patrolled by one agent.

    Bounds are half-open: left <= x < right and top <= y < bottom.
    """
    index: int
    left: int
    top: int
    right: int
    bottom: int
    anchors: Tuple[Position, ...] = field(default=())

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def corners(self) -> Tuple[Position, Position, Position, Position]:
        """Top-left, top-right, bottom-right and bottom-left cells"""
        return (
            (self.left, self.top),
            (self.right - 1, self.top),
            (self.right - 1, self.bottom - 1),
            (self.left, self.bottom - 1),
        )

    def contains(self, position: Position) -> bool:
        x, y = position
        return self.left <= x < self.right and self.top <= y < self.bottom

    def cells(self) -> List[Position]:
        return [
            (x, y)
            for y in range(self.top, self.bottom)
            for x in range(self.left, self.right)
        ]


class ZonePartitioner:
    """
    Divides a map rectangle into equal bands, one per agent.

    The map is cut along its longer side: into rows when it is at least as
    tall as it is wide, otherwise into columns. Every band gets the same
    integer width and the last one absorbs the remainder.
    """

    def __init__(self, width: int, height: int, sensor_range: int, left: int = 0, top: int = 0):
        self.width = width
        self.height = height
        self.sensor_range = sensor_range
        self.left = left
        self.top = top

    @property
    def by_rows(self) -> bool:
        return self.width <= self.height

    def _band_size(self, count: int) -> int:
        if count <= 0:
            raise ValueError("Cannot partition the map between zero agents")
        length = self.height if self.by_rows else self.width
        size = length // count
        if size == 0:
            raise ValueError(f"Cannot split {length} cells into {count} zones")
        return size

    def reference_point(self, index: int, count: int) -> Position:
        """Leading corner of a band, used to measure how close an agent is to it"""
        size = self._band_size(count)
        if self.by_rows:
            return self.left, self.top + size * index
        return self.left + size * index, self.top

    def assign(self, positions: Sequence[Position]) -> List[int]:
        """
        Greedily give every band to the nearest agent still without one.

        Bands are handled in index order. Ties go to the agent listed first.

        Args:
            positions: Agent positions, in agent order

        Returns:
            Band index for each agent, in the same order
        """
        count = len(positions)
        self._band_size(count)

        zone_of = [-1] * count
        for band in range(count):
            rx, ry = self.reference_point(band, count)
            best_agent = None
            best_distance = math.inf
            for agent, (x, y) in enumerate(positions):
                if zone_of[agent] != -1:
                    continue
                distance = abs(x - rx) + abs(y - ry)
                if distance < best_distance:
                    best_agent = agent
                    best_distance = distance
            zone_of[best_agent] = band

        return zone_of

    def build_zone(self, index: int, count: int) -> Zone:
        """Bounds and anchors of one band"""
        size = self._band_size(count)
        if not 0 <= index < count:
            raise ValueError(f"Zone index {index} out of range for {count} zones")

        last = index == count - 1
        if self.by_rows:
            left, right = self.left, self.left + self.width
            top = self.top + size * index
            bottom = self.top + self.height if last else top + size
        else:
            top, bottom = self.top, self.top + self.height
            left = self.left + size * index
            right = self.left + self.width if last else left + size

        anchors = self.compute_anchors(left, top, right, bottom)
        return Zone(index, left, top, right, bottom, tuple(anchors))

    def compute_anchors(self, left: int, top: int, right: int, bottom: int) -> List[Position]:
        """
        Anchor points spaced one sensor window apart.

        Rows alternate direction so consecutive anchors stay close.
        """
        xs = self._axis_anchors(left, right)
        ys = self._axis_anchors(top, bottom)
        anchors = []
        for row, y in enumerate(ys):
            row_xs = reversed(xs) if row % 2 else xs
            anchors.extend((x, y) for x in row_xs)
        return anchors

    def _axis_anchors(self, start: int, end: int) -> List[int]:
        r = self.sensor_range
        spacing = 2 * r + 1
        count = math.ceil((end - start) / spacing)
        coords = [start + r + spacing * k for k in range(count - 1)]
        # The last anchor hugs the far edge so the remainder is covered
        coords.append(max(start, end - 1 - r))
        return coords

    def partition(self, positions: Sequence[Position]) -> List[Zone]:
        """Zone of each agent, in agent order"""
        count = len(positions)
        assignment = self.assign(positions)
        zones = [self.build_zone(band, count) for band in assignment]
        logger.info(
            "Map %dx%d split by %s into %d zones",
            self.width, self.height, 'rows' if self.by_rows else 'columns', count
        )
        return zones
