"""Tests for MessageHandler topic dispatch."""

from tilecrew.communication import Message, MessageHandler, TileworldProtocol, Topic


def recorder(log, label):
    def handle(message):
        log.append((label, message.sender))
    return handle


class TestMessageHandler:
    def test_dispatches_by_topic(self):
        log = []
        handler = MessageHandler('agent1', {
            Topic.MAP: recorder(log, 'map'),
            Topic.GOALS: recorder(log, 'goals'),
        })
        assert handler.handle_message(TileworldProtocol.goals('agent2', []))
        assert log == [('goals', 'agent2')]

    def test_skips_own_messages(self):
        log = []
        handler = MessageHandler('agent1', {Topic.GOALS: recorder(log, 'goals')})
        assert not handler.handle_message(TileworldProtocol.goals('agent1', []))
        assert log == []

    def test_skips_messages_for_others(self):
        log = []
        handler = MessageHandler('agent1', {Topic.GOALS: recorder(log, 'goals')})
        assert not handler.handle_message(Message('agent2', 'agent3', Topic.GOALS, ()))
        assert log == []

    def test_unhandled_topic_is_ignored(self):
        handler = MessageHandler('agent1')
        assert not handler.handle_message(TileworldProtocol.goals('agent2', []))

    def test_register_handler(self):
        log = []
        handler = MessageHandler('agent1')
        handler.register_handler(Topic.GOALS, recorder(log, 'goals'))
        handler.handle_message(TileworldProtocol.goals('agent2', []))
        assert log == [('goals', 'agent2')]

    def test_handle_all_follows_topic_order(self):
        log = []
        handler = MessageHandler('agent1', {
            Topic.MAP: recorder(log, 'map'),
            Topic.GOALS: recorder(log, 'goals'),
        })
        messages = [
            TileworldProtocol.goals('agent2', []),
            TileworldProtocol.map_update('agent3', {}, (0, 0)),
            TileworldProtocol.map_update('agent2', {}, (1, 0)),
        ]
        handled = handler.handle_all(messages, order=(Topic.MAP, Topic.GOALS))
        assert handled == 3
        assert log == [('map', 'agent3'), ('map', 'agent2'), ('goals', 'agent2')]

    def test_handle_all_defaults_to_channel_order(self):
        log = []
        handler = MessageHandler('agent1', {
            Topic.MAP: recorder(log, 'map'),
            Topic.GOALS: recorder(log, 'goals'),
        })
        messages = [
            TileworldProtocol.goals('agent2', []),
            TileworldProtocol.map_update('agent3', {}, (0, 0)),
        ]
        handler.handle_all(messages)
        assert log == [('goals', 'agent2'), ('map', 'agent3')]
