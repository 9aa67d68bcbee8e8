"""
Communication Layer

Per-tick broadcast channel and the messages agents exchange over it.
"""

from .protocol import BROADCAST, AuctionPayload, MapPayload, Message, TileworldProtocol, Topic
from .handlers import MessageHandler
from .broadcaster import BroadcastChannel

__all__ = [
    'BROADCAST',
    'AuctionPayload',
    'MapPayload',
    'Message',
    'TileworldProtocol',
    'Topic',
    'MessageHandler',
    'BroadcastChannel',
]
