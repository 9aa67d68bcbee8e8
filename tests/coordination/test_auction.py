"""Tests for ranked pools and the keep-or-auction rules."""

from tilecrew.coordination.auction import (
    RankedPool,
    accepts_contract,
    cull_unreachable,
    lifetime_weighted_distance,
    split_surplus,
)
from tilecrew.memory.percepts import Percept
from tileworld.world_generator import ObjectKind

TILE = ObjectKind.TILE
HOLE = ObjectKind.HOLE


def tile(x, y=0, t=0):
    return Percept(TILE, (x, y), t)


def hole(x, y=0, t=0):
    return Percept(HOLE, (x, y), t)


class TestRankedPool:
    def test_orders_by_heuristic(self):
        pool = RankedPool(lambda p: p.position[0])
        pool.extend([tile(5), tile(1), tile(3)])
        assert [p.position[0] for p in pool] == [1, 3, 5]
        assert pool.peek() == tile(1)

    def test_equal_keys_keep_insertion_order(self):
        pool = RankedPool(lambda p: 0)
        pool.extend([tile(5), tile(1), tile(3)])
        assert [p.position[0] for p in pool] == [5, 1, 3]

    def test_remove_by_goal_key(self):
        pool = RankedPool(lambda p: p.position[0])
        pool.extend([tile(1), tile(2)])
        assert pool.remove(((1, 0), TILE))
        assert not pool.remove(((1, 0), TILE))
        assert pool.items() == [tile(2)]

    def test_kind_is_part_of_the_key(self):
        pool = RankedPool(lambda p: 0)
        pool.add(tile(1))
        assert not pool.remove(((1, 0), HOLE))
        assert tile(1) in pool

    def test_duplicate_goal_ignored(self):
        pool = RankedPool(lambda p: 0)
        assert pool.add(tile(1, t=0))
        assert not pool.add(tile(1, t=4))
        assert len(pool) == 1

    def test_empty_pool(self):
        pool = RankedPool(lambda p: 0)
        assert not pool
        assert pool.peek() is None
        assert pool.pop() is None


class TestCullUnreachable:
    def test_lifetime_not_exceeding_distance_is_unreachable(self):
        lifetimes = {(1, 0): 5, (4, 0): 4, (9, 0): 20}
        reachable, unreachable = cull_unreachable(
            [tile(1), tile(4), tile(9)],
            lambda p: lifetimes[p.position],
            lambda pos: pos[0],
        )
        assert reachable == [tile(1), tile(9)]
        assert unreachable == [tile(4)]


class TestSplitSurplus:
    def test_keeps_announce_quota_of_tiles(self):
        kept, surplus = split_surplus([tile(0), tile(1), tile(2)], [hole(5)], carried=0, capacity=3, announce_count=1)
        assert kept == [tile(0), hole(5)]
        assert surplus == [tile(1), tile(2)]

    def test_full_agent_keeps_holes_not_tiles(self):
        kept, surplus = split_surplus([tile(0)], [hole(5), hole(6)], carried=3, capacity=3, announce_count=1)
        assert kept == [hole(5)]
        assert surplus == [tile(0), hole(6)]

    def test_empty_handed_agent_keeps_hole_for_kept_tile(self):
        kept, surplus = split_surplus([tile(0)], [hole(5)], carried=0, capacity=3, announce_count=1)
        assert hole(5) in kept
        assert surplus == []

    def test_holes_count_kept_tiles(self):
        kept, surplus = split_surplus(
            [tile(0), tile(1), tile(2)], [hole(5), hole(6)], carried=1, capacity=3, announce_count=2
        )
        assert kept == [tile(0), tile(1), hole(5), hole(6)]
        assert surplus == [tile(2)]

    def test_holes_limited_by_tile_load(self):
        kept, surplus = split_surplus(
            [tile(0), tile(1)], [hole(5), hole(6)], carried=0, capacity=1, announce_count=2
        )
        assert kept == [tile(0), hole(5)]
        assert surplus == [tile(1), hole(6)]

    def test_zero_quota_auctions_everything(self):
        kept, surplus = split_surplus([tile(0)], [hole(5)], carried=1, capacity=3, announce_count=0)
        assert kept == []
        assert surplus == [tile(0), hole(5)]


class TestContracts:
    def test_own_zone_rejected(self):
        assert not accepts_contract(1, 1, 1)

    def test_neighbouring_zone_accepted(self):
        assert accepts_contract(1, 0, 1)
        assert accepts_contract(1, 2, 1)

    def test_distant_zone_rejected(self):
        assert not accepts_contract(0, 2, 1)
        assert accepts_contract(0, 2, 2)


class TestLifetimeWeightedDistance:
    def test_scales_by_remaining_lifetime(self):
        assert lifetime_weighted_distance(10, 25, 50) == 5

    def test_plain_distance_when_disabled(self):
        assert lifetime_weighted_distance(10, 25, 50, enabled=False) == 10

    def test_older_object_ranks_closer(self):
        fresh = lifetime_weighted_distance(6, 50, 50)
        old = lifetime_weighted_distance(6, 10, 50)
        assert old < fresh
