"""
Tileworld Message Protocol

Defines the messages agents exchange over the broadcast channel each tick.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Tuple

from tileworld.world_generator import ObjectKind, Position
from ..memory.percepts import Percept

BROADCAST = "ALL"


class Topic(Enum):
    """Types of messages that can be sent"""
    # Full percept snapshot and sender position
    MAP = "map"
    # Goals the sender has committed to
    GOALS = "goals"
    # Surplus candidates offered to nearby zones
    AUCTION_TILE = "auction_tile"
    AUCTION_HOLE = "auction_hole"


@dataclass(frozen=True)
class MapPayload:
    """Percept snapshot of the sender"""
    percepts: Mapping[Position, Percept]
    position: Position


@dataclass(frozen=True)
class AuctionPayload:
    """Items offered for auction, tagged with the sender's zone"""
    items: Tuple[Percept, ...]
    zone: int


@dataclass(frozen=True)
class Message:
    """A message on the broadcast channel"""
    sender: str
    recipient: str
    topic: Topic
    payload: Any

    @property
    def is_broadcast(self) -> bool:
        return self.recipient == BROADCAST

    def is_for(self, name: str) -> bool:
        return self.is_broadcast or self.recipient == name


class TileworldProtocol:
    """
    Tileworld Protocol

    Provides methods to create the messages agents broadcast.
    """

    AUCTION_TOPICS = {
        ObjectKind.TILE: Topic.AUCTION_TILE,
        ObjectKind.HOLE: Topic.AUCTION_HOLE,
    }

    @staticmethod
    def map_update(sender: str, percepts: Mapping[Position, Percept], position: Position) -> Message:
        """Create map sharing message"""
        return Message(sender, BROADCAST, Topic.MAP, MapPayload(percepts, tuple(position)))

    @staticmethod
    def goals(sender: str, goals: Iterable[Percept]) -> Message:
        """Create goal announcement message"""
        return Message(sender, BROADCAST, Topic.GOALS, tuple(goals))

    @staticmethod
    def auction(sender: str, kind: ObjectKind, items: Iterable[Percept], zone: int) -> Message:
        """Create auction message for tiles or holes"""
        try:
            topic = TileworldProtocol.AUCTION_TOPICS[kind]
        except KeyError:
            raise ValueError(f"{kind.value} cannot be auctioned") from None
        return Message(sender, BROADCAST, topic, AuctionPayload(tuple(items), zone))
