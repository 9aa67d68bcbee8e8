"""
Broadcast Channel

Tick-scoped message buffer shared by all agents. The scheduler opens a new
tick, agents append to it through the sink and read immutable snapshots.
"""

import logging
from typing import Callable, Optional, Tuple

from .protocol import Message

logger = logging.getLogger(__name__)

MessageSink = Callable[[Message], None]


class BroadcastChannel:
    """
    Append-only per-tick message buffer.

    Every message sent during a tick is visible to all readers for the rest
    of that tick and dropped when the next tick is opened.
    """

    def __init__(self):
        self.tick: Optional[int] = None
        self._messages = []
        self.total_sent = 0

    def open_tick(self, tick: int):
        """
        Start a new tick, discarding the previous tick's messages.

        Args:
            tick: The tick being started
        """
        if self._messages:
            logger.debug("Tick %s closed with %d messages", self.tick, len(self._messages))
        self.tick = tick
        self._messages = []

    def send(self, message: Message):
        """
        Append a message to the current tick.

        Args:
            message: The message to broadcast
        """
        if not isinstance(message, Message):
            raise TypeError(f"Expected a Message, got {type(message).__name__}")
        self._messages.append(message)
        self.total_sent += 1

    @property
    def sink(self) -> MessageSink:
        """Write-only view handed to agents"""
        return self.send

    def snapshot(self) -> Tuple[Message, ...]:
        """Messages sent so far this tick"""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)
