"""
Coordination: zone partitioning and the broadcast auction protocol
"""

from .zones import Zone, ZonePartitioner
from .auction import (
    RankedPool,
    accepts_contract,
    cull_unreachable,
    lifetime_weighted_distance,
    split_surplus,
)
from .coordinator import BroadcastCoordinator

__all__ = [
    'Zone',
    'ZonePartitioner',
    'RankedPool',
    'accepts_contract',
    'cull_unreachable',
    'lifetime_weighted_distance',
    'split_surplus',
    'BroadcastCoordinator',
]
