"""Tests for the mode priority list and the exploration goal choice."""

import math

import pytest

from tilecrew.agents_core.modes import Mode, Situation, select_exploration_goal, select_mode
from tilecrew.memory.percepts import Percept
from tileworld.world_generator import ObjectKind

TILE = Percept(ObjectKind.TILE, (3, 3), 0)
HOLE = Percept(ObjectKind.HOLE, (6, 6), 0)

STATION = (10, 0)


def situation(**kwargs):
    values = dict(position=(0, 0), fuel_level=400, carried=0, fuel_station=STATION)
    values.update(kwargs)
    return Situation(**values)


class TestReactiveModes:
    def test_deposit_preempts_everything(self, params):
        s = situation(can_deposit_here=True, can_pickup_here=True, fuel_level=50, fuel_station=None, carried=1)
        assert select_mode(s, params) is Mode.REACT_FILL

    def test_deposit_preempts_survival_refuel(self, params):
        s = situation(can_deposit_here=True, fuel_level=5, carried=1)
        assert select_mode(s, params) is Mode.REACT_FILL

    def test_pickup_when_room_left(self, params):
        assert select_mode(situation(can_pickup_here=True), params) is Mode.REACT_COLLECT

    def test_no_pickup_at_capacity(self, params):
        s = situation(can_pickup_here=True, carried=3)
        assert select_mode(s, params) is not Mode.REACT_COLLECT


class TestFuelModes:
    def test_wait_without_station_below_floor(self, params):
        s = situation(fuel_level=50, fuel_station=None)
        assert select_mode(s, params) is Mode.WAIT

    def test_refuel_below_floor_with_station(self, params):
        s = situation(fuel_level=90, best_tile=TILE, tile_rank=1)
        assert select_mode(s, params) is Mode.REFUEL

    def test_refuel_when_trip_uses_most_fuel(self, params):
        s = situation(position=(0, 0), fuel_station=(195, 0), fuel_level=200, best_tile=TILE, tile_rank=1)
        assert select_mode(s, params) is Mode.REFUEL

    def test_top_up_on_station(self, params):
        s = situation(position=STATION, fuel_level=300, best_tile=TILE, tile_rank=1)
        assert select_mode(s, params) is Mode.REFUEL

    def test_no_top_up_when_nearly_full(self, params):
        s = situation(position=STATION, fuel_level=400, best_tile=TILE, tile_rank=1)
        assert select_mode(s, params) is Mode.COLLECT

    def test_explore_until_station_found(self, params):
        s = situation(fuel_station=None, best_tile=TILE, tile_rank=1)
        assert select_mode(s, params) is Mode.EXPLORE


class TestResourceModes:
    def test_collect_when_empty_handed(self, params):
        assert select_mode(situation(best_tile=TILE, tile_rank=4), params) is Mode.COLLECT

    def test_assist_collect_from_contract(self, params):
        assert select_mode(situation(assist_tile=TILE), params) is Mode.ASSIST_COLLECT

    def test_no_assist_when_disabled(self, params):
        from dataclasses import replace
        no_assist = replace(params, allow_assistance=False)
        assert select_mode(situation(assist_tile=TILE), no_assist) is Mode.EXPLORE

    def test_fill_at_capacity_even_with_closer_tile(self, params):
        s = situation(carried=3, best_tile=TILE, tile_rank=1, best_hole=HOLE, hole_rank=12)
        assert select_mode(s, params) is Mode.FILL

    def test_collect_closer_tile_when_room_left(self, params):
        s = situation(carried=1, best_tile=TILE, tile_rank=1, best_hole=HOLE, hole_rank=12)
        assert select_mode(s, params) is Mode.COLLECT

    def test_fill_when_hole_at_least_as_close(self, params):
        s = situation(carried=1, best_tile=TILE, tile_rank=5, best_hole=HOLE, hole_rank=5)
        assert select_mode(s, params) is Mode.FILL

    def test_fill_when_no_tile_known(self, params):
        s = situation(carried=2, best_hole=HOLE, hole_rank=30)
        assert select_mode(s, params) is Mode.FILL

    def test_collect_more_tiles_without_holes(self, params):
        s = situation(carried=2, best_tile=TILE, tile_rank=3)
        assert select_mode(s, params) is Mode.COLLECT

    def test_assist_fill_when_nothing_in_zone(self, params):
        s = situation(carried=3, best_tile=TILE, tile_rank=3, assist_hole=HOLE)
        assert select_mode(s, params) is Mode.ASSIST_FILL

    def test_default_is_explore(self, params):
        assert select_mode(situation(carried=1), params) is Mode.EXPLORE


class TestExplorationGoal:
    def choose(self, anchors, scores, blocked=(), position=(0, 0), size=10):
        blocked = set(blocked)
        return select_exploration_goal(
            anchors,
            position,
            lambda cell: scores.get(cell, 0),
            lambda x, y: (x, y) in blocked,
            lambda x, y: 0 <= x < size and 0 <= y < size,
        )

    def test_highest_score_wins(self):
        anchors = [(1, 1), (4, 1), (7, 1)]
        assert self.choose(anchors, {(1, 1): 3, (4, 1): 9, (7, 1): 5}) == (4, 1)

    def test_tie_goes_to_closer_anchor(self):
        anchors = [(7, 1), (1, 1), (4, 1)]
        scores = {a: math.inf for a in anchors}
        assert self.choose(anchors, scores) == (1, 1)

    def test_blocked_anchor_replaced_by_best_neighbour(self):
        anchors = [(4, 4)]
        scores = {(4, 4): 10, (5, 5): 8, (3, 4): 2}
        assert self.choose(anchors, scores, blocked=[(4, 4)]) == (5, 5)

    def test_neighbour_ties_keep_first_found(self):
        anchors = [(4, 4)]
        assert self.choose(anchors, {(4, 4): 1}, blocked=[(4, 4)]) == (3, 3)

    def test_neighbours_off_grid_skipped(self):
        anchors = [(0, 0)]
        assert self.choose(anchors, {}, blocked=[(0, 0)]) == (0, 1)

    def test_fully_walled_anchor_kept(self):
        walls = [(x, y) for x in range(3, 6) for y in range(3, 6)]
        assert self.choose([(4, 4)], {}, blocked=walls) == (4, 4)

    def test_no_anchors_rejected(self):
        with pytest.raises(ValueError):
            self.choose([], {})
