"""
BroadcastCoordinator - per-agent side of the auction protocol

Each tick the coordinator broadcasts the agent's map, its kept goals and
its surplus candidates, then reads everybody else's messages: peer maps
are merged into memory, auction items from nearby zones become assist
contracts, and announced goals are stripped from every pool.
"""
import logging
from typing import Callable, Iterable, List, Optional, Set, Tuple

from tileworld.world_generator import ObjectKind, Position
from ..communication.broadcaster import MessageSink
from ..communication.handlers import MessageHandler
from ..communication.protocol import Message, TileworldProtocol, Topic
from ..config import TileworldParameters
from ..memory.decay_memory import DecayMemory
from ..memory.percepts import Percept
from .auction import (
    GoalKey,
    RankedPool,
    accepts_contract,
    cull_unreachable,
    lifetime_weighted_distance,
    split_surplus,
)
from .zones import Zone, ZonePartitioner

logger = logging.getLogger(__name__)

# Peer maps are merged before contracts are judged, announced goals go last
PROCESSING_ORDER = (Topic.MAP, Topic.AUCTION_TILE, Topic.AUCTION_HOLE, Topic.GOALS)


class BroadcastCoordinator:
    """
    Owns an agent's candidate and contract pools.

    Candidate pools hold reachable objects inside the agent's own zone.
    Assist pools hold auction items accepted from neighbouring zones. All
    four are ranked by the lifetime-weighted distance from the agent.
    """

    def __init__(
        self,
        name: str,
        memory: DecayMemory,
        parameters: TileworldParameters,
        position_of: Callable[[], Position]
    ):
        """
        Args:
            name: Sender name used on the channel
            memory: The agent's DecayMemory
            parameters: Run parameters
            position_of: Returns the agent's current position
        """
        self.name = name
        self.memory = memory
        self.p = parameters
        self.position_of = position_of

        self.partitioner = ZonePartitioner(parameters.width, parameters.height, parameters.sensor_range)
        self.zone: Optional[Zone] = None
        self.zone_count = 0

        self.tile_candidates = RankedPool(self.rank)
        self.hole_candidates = RankedPool(self.rank)
        self.assist_tiles = RankedPool(self.rank)
        self.assist_holes = RankedPool(self.rank)
        self.stripped: Set[GoalKey] = set()

        self.handler = MessageHandler(name, {
            Topic.MAP: self._on_map,
            Topic.AUCTION_TILE: self._on_auction,
            Topic.AUCTION_HOLE: self._on_auction,
            Topic.GOALS: self._on_goals,
        })

    # ========== HEURISTICS ==========

    def distance_to(self, position: Position) -> int:
        x, y = self.position_of()
        return abs(x - position[0]) + abs(y - position[1])

    def rank(self, percept: Percept) -> float:
        """Lifetime-weighted distance from the agent to a remembered object"""
        return lifetime_weighted_distance(
            self.distance_to(percept.position),
            self.memory.remaining_lifetime(percept, 1.0),
            self.p.lifetime,
            self.p.tsp_heuristic,
        )

    def _remaining(self, percept: Percept) -> float:
        return self.memory.remaining_lifetime(percept, self.p.object_lifetime_threshold)

    # ========== ZONE ==========

    def assign_zone(self, messages: Iterable[Message]) -> Optional[Zone]:
        """
        Partition the map between every agent that shared its map.

        Agents are ordered as their MAP messages appear on the channel. If
        this agent's own MAP message is missing the zone stays unassigned
        and assignment is retried on a later tick.
        """
        senders: List[str] = []
        positions: List[Position] = []
        for message in messages:
            if message.topic is Topic.MAP and message.is_broadcast and message.sender not in senders:
                senders.append(message.sender)
                positions.append(message.payload.position)

        if self.name not in senders:
            logger.debug("%s cannot assign a zone yet, own map not on the channel", self.name)
            return None

        assignment = self.partitioner.assign(positions)
        own = senders.index(self.name)
        self.zone_count = len(senders)
        self.zone = self.partitioner.build_zone(assignment[own], self.zone_count)
        logger.info(
            "%s assigned zone %d: x %d-%d, y %d-%d, %d anchors",
            self.name, self.zone.index, self.zone.left, self.zone.right - 1,
            self.zone.top, self.zone.bottom - 1, len(self.zone.anchors)
        )
        return self.zone

    # ========== CANDIDATES ==========

    def refresh_candidates(self) -> Tuple[List[Percept], List[Percept]]:
        """
        Rebuild the candidate pools from memory.

        Returns:
            (unreachable tiles, unreachable holes) found in the zone
        """
        self.tile_candidates.clear()
        self.hole_candidates.clear()
        if self.zone is None:
            return [], []

        tiles, lost_tiles = cull_unreachable(
            self.memory.objects_within(self.zone, ObjectKind.TILE), self._remaining, self.distance_to
        )
        holes, lost_holes = cull_unreachable(
            self.memory.objects_within(self.zone, ObjectKind.HOLE), self._remaining, self.distance_to
        )
        self.tile_candidates.extend(tiles)
        self.hole_candidates.extend(holes)
        return lost_tiles, lost_holes

    # ========== BROADCAST ==========

    def communicate(self, sink: MessageSink, carried: int):
        """
        Broadcast this tick's MAP, GOALS and AUCTION messages.

        Args:
            sink: Append-only channel writer
            carried: Tiles the agent currently carries
        """
        sink(TileworldProtocol.map_update(self.name, self.memory.snapshot(), self.position_of()))
        if self.zone is None:
            return

        lost_tiles, lost_holes = self.refresh_candidates()
        kept, surplus = split_surplus(
            self.tile_candidates.items(),
            self.hole_candidates.items(),
            carried,
            self.p.carry_capacity,
            self.p.goal_announce_count,
        )
        auction_tiles = lost_tiles + [p for p in surplus if p.kind is ObjectKind.TILE]
        auction_holes = lost_holes + [p for p in surplus if p.kind is ObjectKind.HOLE]

        sink(TileworldProtocol.goals(self.name, kept))
        sink(TileworldProtocol.auction(self.name, ObjectKind.TILE, auction_tiles, self.zone.index))
        sink(TileworldProtocol.auction(self.name, ObjectKind.HOLE, auction_holes, self.zone.index))

    def announce(self, sink: MessageSink, goal: Percept):
        """Tell peers this agent is now pursuing goal"""
        sink(TileworldProtocol.goals(self.name, [goal]))

    # ========== INCOMING ==========

    def absorb(self, messages: Iterable[Message]):
        """
        Process the messages visible on the channel.

        Assigns the zone on the first call, then merges peer maps, judges
        auction items and strips announced goals, in that order.
        """
        messages = list(messages)
        if self.zone is None and self.assign_zone(messages) is not None:
            self.refresh_candidates()

        self.assist_tiles.clear()
        self.assist_holes.clear()
        self.stripped = set()
        self.handler.handle_all(messages, PROCESSING_ORDER)

    def _on_map(self, message: Message):
        self.memory.merge(message.payload.percepts, message.payload.position)

    def _on_auction(self, message: Message):
        if self.zone is None:
            return
        payload = message.payload
        if not accepts_contract(self.zone.index, payload.zone, self.p.max_assist_zone_distance):
            return
        pool = self.assist_tiles if message.topic is Topic.AUCTION_TILE else self.assist_holes
        for item in payload.items:
            if self._remaining(item) > self.distance_to(item.position):
                pool.add(item)

    def _on_goals(self, message: Message):
        for goal in message.payload:
            self.strip(goal.key)

    def strip(self, key: GoalKey):
        """Remove a goal from every pool"""
        self.stripped.add(key)
        for pool in (self.tile_candidates, self.hole_candidates, self.assist_tiles, self.assist_holes):
            pool.remove(key)

    def pools(self) -> Tuple[RankedPool, RankedPool, RankedPool, RankedPool]:
        return self.tile_candidates, self.hole_candidates, self.assist_tiles, self.assist_holes
