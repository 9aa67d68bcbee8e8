"""
Candidate ranking and surplus auctioning

Helpers shared by the BroadcastCoordinator: a ranked pool of candidate
goals, the reachability cull, the keep-or-auction quota and the contract
acceptance rule.
"""
import bisect
import itertools
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from tileworld.world_generator import ObjectKind, Position
from ..memory.percepts import Percept

GoalKey = Tuple[Position, ObjectKind]


class RankedPool:
    """
    Candidate goals ordered by a heuristic.

    The heuristic is evaluated once, when an item is added. Items with the
    same key keep insertion order. At most one item per goal key is held.
    """

    def __init__(self, heuristic: Callable[[Percept], float]):
        self.heuristic = heuristic
        self._entries: List[Tuple[float, int, Percept]] = []
        self._seq = itertools.count()

    def add(self, item: Percept) -> bool:
        if item.key in self:
            return False
        # The sequence number is unique, so items themselves are never compared
        bisect.insort(self._entries, (self.heuristic(item), next(self._seq), item))
        return True

    def extend(self, items: Iterable[Percept]):
        for item in items:
            self.add(item)

    def peek(self) -> Optional[Percept]:
        return self._entries[0][2] if self._entries else None

    def pop(self) -> Optional[Percept]:
        return self._entries.pop(0)[2] if self._entries else None

    def remove(self, key: GoalKey) -> bool:
        """Drop the item with this goal key, if held"""
        for index, (_, _, item) in enumerate(self._entries):
            if item.key == key:
                del self._entries[index]
                return True
        return False

    def clear(self):
        self._entries.clear()

    def items(self) -> List[Percept]:
        return [entry[2] for entry in self._entries]

    def __iter__(self) -> Iterator[Percept]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, key) -> bool:
        if isinstance(key, Percept):
            key = key.key
        return any(item.key == key for _, _, item in self._entries)


def cull_unreachable(
    candidates: Iterable[Percept],
    remaining_lifetime: Callable[[Percept], float],
    distance_to: Callable[[Position], float]
) -> Tuple[List[Percept], List[Percept]]:
    """
    Split candidates into those reachable before they expire and the rest.

    An object whose estimated remaining lifetime is not greater than the
    distance to it is judged unreachable.

    Returns:
        (reachable, unreachable), each in input order
    """
    reachable, unreachable = [], []
    for percept in candidates:
        if remaining_lifetime(percept) <= distance_to(percept.position):
            unreachable.append(percept)
        else:
            reachable.append(percept)
    return reachable, unreachable


def split_surplus(
    tiles: List[Percept],
    holes: List[Percept],
    carried: int,
    capacity: int,
    announce_count: int
) -> Tuple[List[Percept], List[Percept]]:
    """
    Decide which ranked candidates to keep and which to offer to peers.

    The first announce_count tiles are kept while carried plus kept tiles
    stays below capacity. The first announce_count holes are kept while
    that load still has a tile for them, each kept hole using one up.

    Args:
        tiles: Reachable tile candidates, best first
        holes: Reachable hole candidates, best first
        carried: Tiles the agent currently holds
        capacity: Maximum number of tiles an agent can hold
        announce_count: Number of goals of each kind the agent keeps

    Returns:
        (kept, surplus). Kept goals are announced, surplus is auctioned.
    """
    kept: List[Percept] = []
    surplus: List[Percept] = []

    load = carried
    for i, tile in enumerate(tiles):
        if i < announce_count and load < capacity:
            load += 1
            kept.append(tile)
        else:
            surplus.append(tile)

    for i, hole in enumerate(holes):
        if i < announce_count and load > 0:
            load -= 1
            kept.append(hole)
        else:
            surplus.append(hole)

    return kept, surplus


def accepts_contract(own_zone: int, contract_zone: int, max_zone_distance: int) -> bool:
    """Contracts are only taken from other zones close enough to our own"""
    return contract_zone != own_zone and abs(own_zone - contract_zone) <= max_zone_distance


def lifetime_weighted_distance(
    distance: float,
    remaining_lifetime: float,
    total_lifetime: float,
    enabled: bool = True
) -> float:
    """
    Ranking key for candidate goals.

    With the scarcity heuristic enabled, an object closer to expiry
    appears nearer than an equally distant fresh one.
    """
    if not enabled:
        return distance
    return distance * remaining_lifetime / total_lifetime
