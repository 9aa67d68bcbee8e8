"""
tilecrew - decentralized agents for the Tileworld grid

Agents keep a decaying memory of the world, split the map into zones,
auction surplus work to their neighbours and re-plan every tick.
"""

from .config import PRESETS, TileworldParameters

__all__ = ['PRESETS', 'TileworldParameters']
