"""
Agent memory: timestamped percepts and the decaying exploration model
"""

from .percepts import Percept, PerceptStore
from .decay_memory import DecayMemory

__all__ = [
    'Percept',
    'PerceptStore',
    'DecayMemory',
]
