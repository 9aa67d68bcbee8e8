"""
HybridAgent - zone-based Tileworld agent with reactive overrides

Each agent explores its own zone, auctions what it cannot handle to its
neighbours and picks a mode every tick from a fixed priority list. The
path to the chosen goal is planned again from scratch every tick.
"""

import logging
from typing import Optional, Sequence

from tileworld.world_generator import ObjectKind, Position
from ..communication.broadcaster import MessageSink
from ..communication.protocol import Message
from ..coordination.coordinator import BroadcastCoordinator
from ..memory.decay_memory import DecayMemory
from ..memory.percepts import Percept
from .base_agent import Action, BaseAgent, Thought
from .modes import Mode, Situation, select_exploration_goal, select_mode
from .planner import DefaultPlanner

logger = logging.getLogger(__name__)


class HybridAgent(BaseAgent):
    """
    Agent combining zone exploration, auctions and reactive behaviour.

    Responsibilities:
    - Keep a decaying memory of its own observations and its peers' maps
    - Announce kept goals and auction surplus ones every tick
    - Choose a mode and a goal, then plan a path to it
    """

    def setup(self):
        """Initialize memory, coordinator and planner"""
        super().setup()
        p = self.parameters

        self.memory = DecayMemory(
            p.width, p.height, p.sensor_range, p.lifetime,
            clock=lambda: self.model.t
        )
        self.coordinator = BroadcastCoordinator(self.name, self.memory, p, lambda: self.position)
        self.planner = DefaultPlanner(self.memory, p.width, p.height, p.max_search_distance)

        self.mode = Mode.EXPLORE

    @property
    def zone(self):
        return self.coordinator.zone

    # ========== CYCLE ==========

    def sense(self):
        reading = super().sense()
        self.memory.observe(reading)
        return reading

    def communicate(self, sink: MessageSink):
        self.coordinator.communicate(sink, self.carried_tiles)

    def think(self, messages: Sequence[Message], sink: MessageSink) -> Thought:
        """
        Choose this tick's thought.

        Absorbs the channel, selects a mode, announces the goal it commits
        to and plans the first step toward it.
        """
        self.coordinator.absorb(messages)

        situation = self.situation()
        self.mode = select_mode(situation, self.parameters)

        # The previous plan is never reused
        self.planner.reset()
        return self._plan_for_mode(situation, sink)

    def situation(self) -> Situation:
        """Snapshot of everything select_mode() needs"""
        tiles, holes, assist_tiles, assist_holes = self.coordinator.pools()
        best_tile = tiles.peek()
        best_hole = holes.peek()
        situation = Situation(
            position=self.position,
            fuel_level=self.fuel_level,
            carried=self.carried_tiles,
            fuel_station=self.memory.fuel_station,
            can_deposit_here=self.environment.can_put_tile_in_hole(self),
            can_pickup_here=self.environment.can_pickup_tile(self),
            best_tile=best_tile,
            best_hole=best_hole,
            assist_tile=assist_tiles.peek(),
            assist_hole=assist_holes.peek(),
        )
        if best_tile is not None:
            situation.tile_rank = self.coordinator.rank(best_tile)
        if best_hole is not None:
            situation.hole_rank = self.coordinator.rank(best_hole)
        return situation

    def _plan_for_mode(self, situation: Situation, sink: MessageSink) -> Thought:
        mode = self.mode

        if mode is Mode.REACT_FILL:
            self._commit(sink, self._percept_here(ObjectKind.HOLE))
            return Thought(Action.PUTDOWN)
        if mode is Mode.REACT_COLLECT:
            self._commit(sink, self._percept_here(ObjectKind.TILE))
            return Thought(Action.PICKUP)
        if mode is Mode.WAIT:
            return Thought.hold()

        if mode is Mode.REFUEL:
            if situation.on_fuel_station:
                self.planner.add_goal(self.position)
                return Thought(Action.REFUEL)
            self.planner.add_goal(situation.fuel_station)
        elif mode is Mode.COLLECT:
            self._commit(sink, situation.best_tile)
        elif mode is Mode.FILL:
            self._commit(sink, situation.best_hole)
        elif mode is Mode.ASSIST_COLLECT:
            self._commit(sink, situation.assist_tile)
        elif mode is Mode.ASSIST_FILL:
            self._commit(sink, situation.assist_hole)
        else:
            goal = self._exploration_goal()
            if goal is None:
                return Thought.hold()
            self.planner.add_goal(goal)

        plan = self.planner.generate_plan(self.position)
        if plan is None:
            logger.debug("%s has no path to %s", self.name, self.planner.current_goal)
            return Thought.hold()
        if not plan:
            return Thought.hold()
        return Thought(Action.MOVE, self.planner.execute())

    def _commit(self, sink: MessageSink, goal: Percept):
        """Make goal the current target and announce it to the peers"""
        self.planner.add_goal(goal.position)
        self.coordinator.announce(sink, goal)

    def _percept_here(self, kind: ObjectKind) -> Percept:
        percept = self.memory.get(self.position)
        if percept is None or percept.kind is not kind:
            percept = Percept(kind, self.position, self.model.t)
        return percept

    def _exploration_goal(self) -> Optional[Position]:
        zone = self.zone
        if zone is None or not zone.anchors:
            return None
        return select_exploration_goal(
            zone.anchors,
            self.position,
            self.memory.anchor_exploration_score,
            self.memory.is_cell_blocked,
            self.memory.in_bounds,
        )

    # ========== ACTIONS ==========

    def pick_up_tile(self):
        super().pick_up_tile()
        self.memory.remove(self.position)
        self.planner.clear_goals()

    def put_tile_in_hole(self):
        super().put_tile_in_hole()
        self.memory.remove(self.position)
        self.planner.clear_goals()

    def refuel(self):
        super().refuel()
        self.planner.clear_goals()

    # ========== REPORTING ==========

    def report(self):
        logger.debug(
            "%s zone=%s mode=%s position=%s goal=%s tiles=%d fuel=%s score=%d",
            self.name,
            self.zone.index if self.zone else None,
            self.mode.name,
            self.position,
            self.planner.current_goal or 'WAIT',
            self.carried_tiles,
            self.fuel_level,
            self.score,
        )

    def get_state(self):
        state = super().get_state()
        state.update({
            'mode': self.mode.value,
            'zone': self.zone.index if self.zone else None,
            'goal': list(self.planner.current_goal) if self.planner.current_goal else None,
            'memory_size': len(self.memory.store),
        })
        return state
