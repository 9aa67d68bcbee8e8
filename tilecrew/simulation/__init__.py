"""
Simulation Engine

Runs the decentralized Tileworld agents with AgentPy.
"""

from .model import TileworldModel
from .runner import main, run_simulation

__all__ = ['TileworldModel', 'main', 'run_simulation']
