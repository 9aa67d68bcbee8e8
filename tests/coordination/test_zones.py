"""Tests for ZonePartitioner: bands, greedy assignment and anchors."""

import pytest

from tilecrew.coordination.zones import Zone, ZonePartitioner


def covered_cells(zones):
    cells = []
    for zone in zones:
        cells.extend(zone.cells())
    return cells


class TestBands:
    def test_nine_by_three_gives_three_equal_columns(self):
        partitioner = ZonePartitioner(9, 3, sensor_range=1)
        zones = [partitioner.build_zone(i, 3) for i in range(3)]
        assert [(z.left, z.right) for z in zones] == [(0, 3), (3, 6), (6, 9)]
        assert all(z.width == 3 and z.height == 3 for z in zones)
        assert [z.anchors for z in zones] == [((1, 1),), ((4, 1),), ((7, 1),)]

    def test_zones_partition_the_map(self):
        partitioner = ZonePartitioner(10, 7, sensor_range=1)
        zones = [partitioner.build_zone(i, 3) for i in range(3)]
        cells = covered_cells(zones)
        assert len(cells) == len(set(cells)) == 70

    def test_last_band_absorbs_remainder(self):
        partitioner = ZonePartitioner(10, 4, sensor_range=1)
        widths = [partitioner.build_zone(i, 3).width for i in range(3)]
        assert widths == [3, 3, 4]

    def test_tall_map_split_by_rows(self):
        partitioner = ZonePartitioner(5, 12, sensor_range=1)
        assert partitioner.by_rows
        zones = [partitioner.build_zone(i, 2) for i in range(2)]
        assert [(z.top, z.bottom) for z in zones] == [(0, 6), (6, 12)]
        assert all(z.width == 5 for z in zones)

    def test_square_map_split_by_rows(self):
        assert ZonePartitioner(6, 6, sensor_range=1).by_rows

    def test_zero_agents_rejected(self):
        with pytest.raises(ValueError):
            ZonePartitioner(9, 3, sensor_range=1).assign([])

    def test_more_zones_than_cells_rejected(self):
        with pytest.raises(ValueError):
            ZonePartitioner(3, 2, sensor_range=1).build_zone(0, 4)


class TestAssignment:
    def test_greedy_nearest_agent_per_band(self):
        partitioner = ZonePartitioner(9, 3, sensor_range=1)
        assert partitioner.assign([(8, 1), (0, 0), (4, 2)]) == [2, 0, 1]

    def test_ties_go_to_first_agent(self):
        partitioner = ZonePartitioner(9, 3, sensor_range=1)
        assert partitioner.assign([(4, 1), (4, 1), (4, 1)]) == [0, 1, 2]

    def test_every_agent_gets_a_distinct_zone(self):
        partitioner = ZonePartitioner(20, 5, sensor_range=1)
        zones = partitioner.partition([(19, 4), (18, 4), (0, 0), (10, 2)])
        assert sorted(z.index for z in zones) == [0, 1, 2, 3]
        assert len(set(covered_cells(zones))) == 100


class TestAnchors:
    def test_rows_alternate_direction(self):
        partitioner = ZonePartitioner(9, 6, sensor_range=1)
        zone = partitioner.build_zone(0, 1)
        assert zone.anchors == ((1, 1), (4, 1), (7, 1), (7, 4), (4, 4), (1, 4))

    def test_last_anchor_covers_far_edge(self):
        partitioner = ZonePartitioner(10, 3, sensor_range=1)
        zone = partitioner.build_zone(0, 1)
        assert [x for x, _ in zone.anchors] == [1, 4, 7, 8]

    def test_anchor_windows_cover_zone(self):
        partitioner = ZonePartitioner(17, 11, sensor_range=2)
        zone = partitioner.build_zone(0, 1)
        seen = set()
        for ax, ay in zone.anchors:
            for x in range(ax - 2, ax + 3):
                for y in range(ay - 2, ay + 3):
                    seen.add((x, y))
        assert set(zone.cells()) <= seen

    def test_narrow_zone_keeps_anchor_inside(self):
        partitioner = ZonePartitioner(2, 2, sensor_range=3)
        zone = partitioner.build_zone(0, 1)
        assert zone.anchors == ((0, 0),)


class TestZone:
    def test_contains_is_half_open(self):
        zone = Zone(0, 3, 0, 6, 3)
        assert zone.contains((3, 0))
        assert zone.contains((5, 2))
        assert not zone.contains((6, 0))
        assert not zone.contains((3, 3))

    def test_corners(self):
        zone = Zone(1, 3, 0, 6, 3)
        assert zone.corners == ((3, 0), (5, 0), (5, 2), (3, 2))
