"""
Pathfinding over an agent's belief of the grid.

Implements A* with 4-neighbour movement, unit step cost and the Manhattan
distance as heuristic. Cells are judged passable by a predicate so the
search can run over remembered obstacles rather than the true grid.
"""
import heapq
import itertools
from typing import Callable, Dict, List, Optional, Tuple

from .world_generator import Direction

Position = Tuple[int, int]


class Pathfinder:
    """A* pathfinder over a grid whose blocked cells are given by a predicate"""

    def __init__(
        self,
        width: int,
        height: int,
        is_blocked: Callable[[int, int], bool],
        max_search_distance: Optional[int] = None
    ):
        """
        Args:
            width: Grid width
            height: Grid height
            is_blocked: Returns True for cells that cannot be entered.
                Cells it does not know about should be reported as free.
            max_search_distance: Paths longer than this are not explored
        """
        self.width = width
        self.height = height
        self.is_blocked = is_blocked
        self.max_search_distance = max_search_distance

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _is_passable(self, x: int, y: int) -> bool:
        return self._in_bounds(x, y) and not self.is_blocked(x, y)

    def _get_neighbors(self, x: int, y: int) -> List[Position]:
        """The 4 direct neighbours, in a fixed order"""
        neighbors = []
        for dx, dy in [(1, 0), (-1, 0), (0, 1), (0, -1)]:
            nx, ny = x + dx, y + dy
            if self._in_bounds(nx, ny):
                neighbors.append((nx, ny))
        return neighbors

    @staticmethod
    def heuristic(a: Position, b: Position) -> int:
        return abs(a[0] - b[0]) + abs(a[1] - b[1])

    def astar(self, start: Position, goal: Position) -> Optional[List[Position]]:
        """
        Find a shortest path from start to goal.

        Entries with equal f-cost are expanded in insertion order, which
        makes the returned path deterministic.

        Returns:
            List of positions from start to goal (both included), or None
            if the goal cannot be reached
        """
        start = tuple(start)
        goal = tuple(goal)

        if not self._in_bounds(*start) or not self._is_passable(*goal):
            return None
        if start == goal:
            return [start]

        counter = itertools.count()
        open_heap = [(self.heuristic(start, goal), next(counter), start)]
        costs: Dict[Position, int] = {start: 0}
        came_from: Dict[Position, Optional[Position]] = {start: None}
        closed = set()

        while open_heap:
            _, _, current = heapq.heappop(open_heap)

            if current in closed:
                continue

            if current == goal:
                path = []
                node = goal
                while node is not None:
                    path.append(node)
                    node = came_from[node]
                path.reverse()
                return path

            closed.add(current)

            for neighbor in self._get_neighbors(*current):
                if neighbor in closed or not self._is_passable(*neighbor):
                    continue

                new_cost = costs[current] + 1
                if self.max_search_distance is not None and new_cost > self.max_search_distance:
                    continue

                if neighbor not in costs or new_cost < costs[neighbor]:
                    costs[neighbor] = new_cost
                    came_from[neighbor] = current
                    priority = new_cost + self.heuristic(neighbor, goal)
                    heapq.heappush(open_heap, (priority, next(counter), neighbor))

        return None

    def find_directions(self, start: Position, goal: Position) -> Optional[List[Direction]]:
        """Same as astar() but returns the moves instead of the cells"""
        path = self.astar(start, goal)
        if path is None:
            return None
        return path_to_directions(path)


def path_to_directions(path: List[Position]) -> List[Direction]:
    return [Direction.between(a, b) for a, b in zip(path, path[1:])]
