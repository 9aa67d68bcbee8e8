"""
Agent Core - Tileworld agents

Agents follow a sense-communicate-think-act cycle driven by the model.
The hybrid agent decides with a priority mode selector and re-plans its
path every tick.
"""

from .base_agent import Action, BaseAgent, Thought
from .modes import Mode, Situation, select_exploration_goal, select_mode
from .planner import DefaultPlanner
from .hybrid_agent import HybridAgent

__all__ = [
    'Action',
    'BaseAgent',
    'Thought',
    'Mode',
    'Situation',
    'select_exploration_goal',
    'select_mode',
    'DefaultPlanner',
    'HybridAgent',
]
