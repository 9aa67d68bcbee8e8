"""
TileworldModel - AgentPy model running the hybrid agents

This is the main simulation model that coordinates:
- Environment and agent creation
- The per-tick broadcast channel
- The fixed sense, communicate, think/act order of every step
"""

import logging
from typing import Any, Dict, List, Tuple

import agentpy as ap

from tileworld.environment import TileworldEnvironment
from tileworld.world_generator import ObjectCreator, ObjectKind
from ..agents_core import HybridAgent
from ..communication import BroadcastChannel
from ..config import TileworldParameters

logger = logging.getLogger(__name__)


class TileworldModel(ap.Model):
    """
    Multi-agent Tileworld simulation model.

    This model:
    - Builds the run parameters from ``self.p``
    - Creates the environment, the fuel station and the agents
    - Opens a new channel tick and advances the world every step
    - Runs all agents in a fixed order
    """

    def setup(self):
        """Initialize the model"""
        self.parameters = TileworldParameters.from_mapping(self.p)
        params = self.parameters

        creators = [
            ObjectCreator(ObjectKind.TILE, params.tile_mean, params.tile_dev),
            ObjectCreator(ObjectKind.HOLE, params.hole_mean, params.hole_dev),
            ObjectCreator(ObjectKind.OBSTACLE, params.obstacle_mean, params.obstacle_dev),
        ]
        self.environment = TileworldEnvironment(
            params.width,
            params.height,
            params.lifetime,
            creators,
            rng=self.random,
            default_fuel_level=params.default_fuel_level,
            carry_capacity=params.carry_capacity,
        )

        # Calculate start positions, then keep the station off them
        self.start_positions = self._calculate_start_positions()
        self._unclaimed_positions = list(self.start_positions)
        self.environment.place_fuel_station(taken=self.start_positions)

        self.channel = BroadcastChannel()

        # Create agents
        self.agents = ap.AgentList(self, params.num_agents, HybridAgent)

        # Statistics
        self.total_steps = 0

        logger.info(
            "Tileworld %dx%d with %d agents, fuel station at %s",
            params.width, params.height, params.num_agents,
            self.environment.fuel_station.position
        )

    def step(self):
        """Execute one simulation step"""
        self.total_steps += 1

        # 1. New tick: drop last tick's messages, expire and create objects
        self.channel.open_tick(self.t)
        self.environment.step(self.t, occupied=[agent.position for agent in self.agents])

        # 2. Everybody senses, then everybody broadcasts
        for agent in self.agents:
            agent.sense()
        for agent in self.agents:
            agent.communicate(self.channel.sink)

        # 3. Think and act in fixed order, each agent seeing the channel as it is now
        for agent in self.agents:
            agent.step(self.channel.snapshot(), self.channel.sink)

        if self.t >= self.parameters.end_time:
            self.stop()

    def end(self):
        """Called when simulation ends"""
        self.report('reward', self.environment.reward)
        for agent in self.agents:
            self.report(f'{agent.name}_score', agent.score)

        logger.info(
            "Simulation finished after %d steps, reward %d",
            self.total_steps, self.environment.reward
        )

    def claim_start_position(self) -> Tuple[int, int]:
        """Hand the next unclaimed start position to a new agent"""
        if not self._unclaimed_positions:
            raise ValueError("More agents than start positions")
        return self._unclaimed_positions.pop(0)

    def _calculate_start_positions(self) -> List[Tuple[int, int]]:
        """
        Calculate start positions for all agents.

        Uses the ``start_positions`` parameter when given, otherwise
        distinct random cells.
        """
        params = self.parameters
        given = self.p.get('start_positions')

        if given is None:
            return self.environment.generator.random_positions(params.num_agents)

        positions = [tuple(position) for position in given]
        if len(positions) < params.num_agents:
            raise ValueError(f"{params.num_agents} agents need as many start positions, got {len(positions)}")
        for x, y in positions:
            if not self.environment.is_in_bounds(x, y):
                raise ValueError(f"Start position {(x, y)} is outside the grid")
        return positions[:params.num_agents]

    def get_status(self) -> Dict[str, Any]:
        """Get current simulation status"""
        stats = self.environment.get_statistics()

        return {
            'step': self.total_steps,
            'reward': stats['reward'],
            'agents': [agent.get_state() for agent in self.agents],
            'world': {
                'tiles': stats['tiles'],
                'holes': stats['holes'],
                'obstacles': stats['obstacles'],
                'created': stats['created'],
                'expired': stats['expired'],
                'fuel_station': list(self.environment.fuel_station.position),
            },
            'messages_sent': self.channel.total_sent,
        }
