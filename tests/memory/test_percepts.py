"""Tests for Percept and PerceptStore."""

import pytest

from tilecrew.memory.percepts import Percept, PerceptStore
from tileworld.world_generator import ObjectKind


class TestPercept:
    def test_key_is_position_and_kind(self):
        percept = Percept(ObjectKind.TILE, (2, 3), 5)
        assert percept.key == ((2, 3), ObjectKind.TILE)

    def test_only_fuel_station_flagged(self):
        assert Percept(ObjectKind.FUEL_STATION, (0, 0), 0).is_fuel_station
        assert not Percept(ObjectKind.HOLE, (0, 0), 0).is_fuel_station


class TestPerceptStore:
    def test_empty_cell_is_absent(self):
        store = PerceptStore(5, 5)
        assert store.get((1, 1)) is None
        assert (1, 1) not in store
        assert len(store) == 0

    def test_set_then_get(self):
        store = PerceptStore(5, 5)
        percept = Percept(ObjectKind.OBSTACLE, (4, 4), 1)
        store.set(percept)
        assert store.get((4, 4)) == percept
        assert (4, 4) in store

    def test_one_percept_per_cell(self):
        store = PerceptStore(5, 5)
        store.set(Percept(ObjectKind.TILE, (1, 2), 1))
        store.set(Percept(ObjectKind.HOLE, (1, 2), 3))
        assert len(store) == 1
        assert store.get((1, 2)).kind is ObjectKind.HOLE

    def test_out_of_bounds_rejected(self):
        store = PerceptStore(5, 5)
        with pytest.raises(ValueError):
            store.set(Percept(ObjectKind.TILE, (5, 0), 0))

    def test_clear_returns_removed_percept(self):
        store = PerceptStore(5, 5)
        percept = Percept(ObjectKind.TILE, (0, 1), 0)
        store.set(percept)
        assert store.clear((0, 1)) == percept
        assert store.clear((0, 1)) is None

    def test_snapshot_is_detached(self):
        store = PerceptStore(5, 5)
        store.set(Percept(ObjectKind.TILE, (0, 1), 0))
        snapshot = store.snapshot()
        store.clear((0, 1))
        assert (0, 1) in snapshot
        assert len(store) == 0
