"""
Mode selection for the hybrid agent

select_mode() is a strict priority list evaluated fresh every tick. It is a
pure function of a Situation snapshot so the rules can be tested without a
running model.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from tileworld.world_generator import Position
from ..config import TileworldParameters
from ..memory.percepts import Percept


class Mode(Enum):
    """Behaviour chosen for the current tick"""
    EXPLORE = "explore"
    COLLECT = "collect"
    FILL = "fill"
    REFUEL = "refuel"
    ASSIST_COLLECT = "assist_collect"
    ASSIST_FILL = "assist_fill"
    REACT_COLLECT = "react_collect"
    REACT_FILL = "react_fill"
    WAIT = "wait"


@dataclass
class Situation:
    """What the agent knows when it picks a mode"""
    position: Position
    fuel_level: float
    carried: int
    fuel_station: Optional[Position] = None
    can_deposit_here: bool = False
    can_pickup_here: bool = False
    best_tile: Optional[Percept] = None
    best_hole: Optional[Percept] = None
    tile_rank: float = math.inf
    hole_rank: float = math.inf
    assist_tile: Optional[Percept] = None
    assist_hole: Optional[Percept] = None

    @property
    def on_fuel_station(self) -> bool:
        return self.fuel_station is not None and tuple(self.position) == tuple(self.fuel_station)

    @property
    def distance_to_station(self) -> float:
        if self.fuel_station is None:
            return math.inf
        return abs(self.position[0] - self.fuel_station[0]) + abs(self.position[1] - self.fuel_station[1])


def select_mode(situation: Situation, parameters: TileworldParameters) -> Mode:
    """
    Pick the agent's mode for this tick.

    Rules are checked in order and the first match wins:

    1. Can deposit on the current cell: REACT_FILL
    2. Can pick up on the current cell: REACT_COLLECT
    3. On the station and below the top-up level: REFUEL
    4. Station known and not much more fuel than the trip costs: REFUEL
    5. At or below the hard fuel floor: WAIT if the station is unknown,
       REFUEL otherwise
    6. Station unknown: EXPLORE
    7. Empty handed: COLLECT, ASSIST_COLLECT or EXPLORE
    8. Carrying and a hole is known: FILL unless a tile ranks better and
       there is room for it
    9. Carrying with room and a tile is known: COLLECT
    10. Holding an auction hole: ASSIST_FILL
    11. EXPLORE
    """
    s = situation
    p = parameters

    if s.can_deposit_here:
        return Mode.REACT_FILL
    if s.can_pickup_here and s.carried < p.carry_capacity:
        return Mode.REACT_COLLECT

    if s.on_fuel_station and s.fuel_level < p.refuel_opportunity_level:
        return Mode.REFUEL
    if s.fuel_station is not None and s.distance_to_station >= s.fuel_level * p.fuel_tolerance:
        return Mode.REFUEL

    if s.fuel_level <= p.hard_fuel_limit:
        return Mode.WAIT if s.fuel_station is None else Mode.REFUEL
    if s.fuel_station is None:
        return Mode.EXPLORE

    if s.carried == 0:
        if s.best_tile is not None:
            return Mode.COLLECT
        if p.allow_assistance and s.assist_tile is not None:
            return Mode.ASSIST_COLLECT
        return Mode.EXPLORE

    if s.best_hole is not None:
        if s.best_tile is None or s.hole_rank <= s.tile_rank or s.carried >= p.carry_capacity:
            return Mode.FILL
        return Mode.COLLECT

    if s.best_tile is not None and s.carried < p.carry_capacity:
        return Mode.COLLECT

    if p.allow_assistance and s.assist_hole is not None:
        return Mode.ASSIST_FILL

    return Mode.EXPLORE


def select_exploration_goal(
    anchors: Sequence[Position],
    position: Position,
    score: Callable[[Position], float],
    is_blocked: Callable[[int, int], bool],
    in_bounds: Callable[[int, int], bool]
) -> Position:
    """
    Choose the anchor to explore next.

    The anchor with the highest exploration score wins; on equal scores the
    one closer to the agent is kept. If the winner is believed blocked, the
    best scoring free cell of its 3x3 neighbourhood replaces it (the first
    one found on equal scores). With every neighbour blocked the anchor
    itself is returned.

    Args:
        anchors: Zone anchors in sweep order
        position: Agent position
        score: Exploration score of an anchor
        is_blocked: Belief that a cell holds an obstacle
        in_bounds: Whether a cell lies on the grid

    Returns:
        The cell to plan towards
    """
    if not anchors:
        raise ValueError("No anchors to explore")

    def distance(cell: Position) -> int:
        return abs(cell[0] - position[0]) + abs(cell[1] - position[1])

    best = anchors[0]
    best_score = -math.inf
    for anchor in anchors:
        anchor_score = score(anchor)
        if anchor_score > best_score or (anchor_score == best_score and distance(anchor) < distance(best)):
            best = anchor
            best_score = anchor_score

    if not is_blocked(*best):
        return best

    alternative = None
    alternative_score = -math.inf
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            x, y = best[0] + dx, best[1] + dy
            if not in_bounds(x, y) or is_blocked(x, y):
                continue
            cell_score = score((x, y))
            if alternative is None or cell_score > alternative_score:
                alternative = (x, y)
                alternative_score = cell_score

    return alternative if alternative is not None else best
