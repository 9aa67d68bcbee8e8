"""
Message Handlers

Routes messages read from the broadcast channel to per-topic handlers.
"""

import logging
from typing import Callable, Dict, Iterable, Optional, Sequence

from .protocol import Message, Topic

logger = logging.getLogger(__name__)

Handler = Callable[[Message], None]


class MessageHandler:
    """
    Dispatches messages by topic.

    Messages sent by the owner itself, or addressed to somebody else, are
    skipped. Topics without a registered handler are logged and ignored.
    """

    def __init__(self, owner: str, handlers: Optional[Dict[Topic, Handler]] = None):
        """
        Initialize message handler.

        Args:
            owner: Name of the agent reading the messages
            handlers: Initial topic to handler mapping
        """
        self.owner = owner
        self.handlers: Dict[Topic, Handler] = dict(handlers or {})

    def register_handler(self, topic: Topic, handler: Handler):
        """
        Register a handler for a topic.

        Args:
            topic: The topic to handle
            handler: Function(message) -> None
        """
        self.handlers[topic] = handler

    def accepts(self, message: Message) -> bool:
        return message.sender != self.owner and message.is_for(self.owner)

    def handle_message(self, message: Message) -> bool:
        """
        Handle one message.

        Returns:
            True if a handler processed the message
        """
        if not self.accepts(message):
            return False

        handler = self.handlers.get(message.topic)
        if handler is None:
            logger.debug("%s has no handler for topic %s", self.owner, message.topic)
            return False

        handler(message)
        return True

    def handle_all(self, messages: Iterable[Message], order: Optional[Sequence[Topic]] = None) -> int:
        """
        Handle a batch of messages.

        Args:
            messages: Messages to process
            order: Topic groups in processing order. Within a group, messages
                keep their channel order. Defaults to channel order.

        Returns:
            Number of messages processed
        """
        messages = list(messages)
        if order is None:
            return sum(self.handle_message(m) for m in messages)

        handled = 0
        for topic in order:
            for message in messages:
                if message.topic is topic:
                    handled += self.handle_message(message)
        return handled
