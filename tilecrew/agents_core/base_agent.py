"""
BaseAgent - Tileworld agent following a sense-communicate-think-act cycle

All agents in the system inherit from this class. Every tick the model
drives them through:
1. Sense: Read the sensor window from the environment
2. Communicate: Broadcast on the tick's channel
3. Think: Decide on one Thought
4. Act: Carry the Thought out against the environment
5. Report: Log the resulting state
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

import agentpy as ap

from tileworld.environment import ActionError, SensorReading
from tileworld.world_generator import Direction
from ..communication.broadcaster import MessageSink
from ..communication.protocol import Message

logger = logging.getLogger(__name__)


class Action(Enum):
    """Primitive actions the environment accepts"""
    MOVE = "move"
    PICKUP = "pickup"
    PUTDOWN = "putdown"
    REFUEL = "refuel"


@dataclass(frozen=True)
class Thought:
    """The action an agent intends to take this tick"""
    action: Action
    direction: Direction = Direction.Z

    @classmethod
    def hold(cls) -> 'Thought':
        """Stay in place"""
        return cls(Action.MOVE, Direction.Z)


class BaseAgent(ap.Agent):
    """
    Base class for all agents in the system.

    Holds the agent's physical state (position, fuel, carried tiles, score)
    and the basic actions that change it. Decision making lives in
    subclasses, which implement think().
    """

    def setup(self):
        """
        Initialize the agent.

        Subclasses should call this before setting up their own state.
        """
        self.parameters = self.model.parameters
        self.environment = self.model.environment
        self.name = f"agent{self.id}"

        # Physical state
        self.position = tuple(self.model.claim_start_position())
        self.fuel_level = self.parameters.default_fuel_level
        self.carried_tiles = 0

        # Statistics
        self.score = 0
        self.moves = 0
        self.failed_actions = 0

        self.last_reading: Optional[SensorReading] = None

    def step(self, messages: Sequence[Message], sink: MessageSink):
        """
        Think, act and report for this tick.

        Args:
            messages: Snapshot of the tick's channel at call time
            sink: Append-only channel writer
        """
        thought = self.think(messages, sink)
        self.act(thought)
        self.report()

    def sense(self) -> SensorReading:
        """Read the sensor window around the agent"""
        self.last_reading = self.environment.sense(self.position, self.parameters.sensor_range)
        return self.last_reading

    def communicate(self, sink: MessageSink):
        """Broadcast messages for this tick. Silent by default."""

    def think(self, messages: Sequence[Message], sink: MessageSink) -> Thought:
        """
        Decide what to do this tick.

        Subclasses must override this.
        """
        raise NotImplementedError

    def act(self, thought: Thought):
        """
        Execute a thought.

        Rejected actions are logged and the agent does nothing else this
        tick.

        Args:
            thought: The action to carry out
        """
        try:
            if thought.action is Action.MOVE:
                self.move(thought.direction)
            elif thought.action is Action.PICKUP:
                self.pick_up_tile()
            elif thought.action is Action.PUTDOWN:
                self.put_tile_in_hole()
            elif thought.action is Action.REFUEL:
                self.refuel()
        except ActionError as e:
            self.failed_actions += 1
            logger.warning(
                "%s could not %s at %s: %s",
                self.name, thought.action.value, self.position, e
            )

    def report(self):
        """Log the agent's state"""
        logger.debug(
            "%s at %s fuel=%s tiles=%d score=%d",
            self.name, self.position, self.fuel_level, self.carried_tiles, self.score
        )

    def get_state(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'position': list(self.position),
            'fuel_level': self.fuel_level,
            'carried_tiles': self.carried_tiles,
            'score': self.score,
        }

    # ========== BASIC ACTIONS ==========

    def move(self, direction: Direction):
        """Move one cell. Staying in place costs no fuel."""
        self.position = self.environment.move(self, direction)
        if direction is not Direction.Z:
            self.fuel_level -= 1
            self.moves += 1

    def pick_up_tile(self):
        self.environment.pickup_tile(self)
        self.carried_tiles += 1

    def put_tile_in_hole(self):
        self.environment.put_tile_in_hole(self)
        self.carried_tiles -= 1
        self.score += 1

    def refuel(self):
        self.fuel_level = self.environment.refuel(self)

    def distance_to(self, position) -> int:
        return self.environment.distance(self.position, position)
