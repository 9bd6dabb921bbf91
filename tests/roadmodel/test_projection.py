"""Unit tests for click projection."""

import numpy as np
import pytest

from src.roadmodel.lanes import construct_lanes
from src.roadmodel.projection import distance_to_polyline, nearest_index, nearest_lane
from src.utils.geodesy import GeoPoint, haversine_distance


def northbound_route(n=4, step_deg=0.001, lon=144.9631, lat0=-37.8136):
    return [GeoPoint(lon, lat0 + i * step_deg) for i in range(n)]


class TestNearestIndex:
    """Test suite for nearest_index."""

    def test_picks_closest_vertex(self):
        """Test a click next to the third vertex."""
        line = northbound_route()
        click = GeoPoint(line[2].lon + 0.00001, line[2].lat + 0.00002)
        assert nearest_index(line, click) == 2

    def test_first_of_equal_vertices_wins(self):
        """Test tie-breaking on repeated vertices."""
        line = northbound_route()
        line = [line[0], line[1], line[1], line[2]]
        assert nearest_index(line, line[1]) == 1

    def test_matches_brute_force_minimum(self):
        """Test against a brute-force scan on random polylines."""
        rng = np.random.default_rng(7)
        for _ in range(20):
            coords = rng.uniform([144.95, -37.82], [144.97, -37.80], size=(30, 2))
            line = [GeoPoint(*c) for c in coords]
            click = GeoPoint(*rng.uniform([144.95, -37.82], [144.97, -37.80]))

            i = nearest_index(line, click)
            dists = [haversine_distance(p.lat, p.lon, click.lat, click.lon) for p in line]
            assert dists[i] == min(dists)
            assert i == dists.index(min(dists))

    def test_empty_polyline_rejected(self):
        """Test that an empty polyline has no nearest vertex."""
        with pytest.raises(ValueError):
            nearest_index([], GeoPoint(0.0, 0.0))


class TestNearestLane:
    """Test suite for nearest_lane and distance_to_polyline."""

    def test_distance_measured_to_segment(self):
        """Test that a click between vertices is measured to the segment."""
        line = northbound_route(2)
        mid = GeoPoint(line[0].lon, (line[0].lat + line[1].lat) / 2)
        assert distance_to_polyline(mid, line) == pytest.approx(0.0, abs=1e-6)

    def test_click_on_each_lane(self):
        """Test that clicking mid-segment on a lane selects it."""
        lanes = construct_lanes(northbound_route())
        for lane in lanes:
            a, b = lane.coordinates[1], lane.coordinates[2]
            click = GeoPoint((a.lon + b.lon) / 2, (a.lat + b.lat) / 2)
            assert nearest_lane(click, lanes, tolerance_m=1.0) == lane.lane_index

    def test_click_near_centre_lane(self):
        """Test that a click 1 m right of the centre lane selects it."""
        route = northbound_route()
        lanes = construct_lanes(route)
        # About one metre east at this latitude
        click = GeoPoint(route[1].lon + 1.0 / 88000.0, route[1].lat)
        assert nearest_lane(click, lanes, tolerance_m=1.5) == 1

    def test_click_far_away_misses(self):
        """Test that clicks beyond the tolerance hit nothing."""
        route = northbound_route()
        lanes = construct_lanes(route)
        click = GeoPoint(route[1].lon + 0.001, route[1].lat)
        assert nearest_lane(click, lanes, tolerance_m=2.0) is None

    def test_no_lanes(self):
        """Test the query on an empty lane set."""
        assert nearest_lane(GeoPoint(0.0, 0.0), [], tolerance_m=2.0) is None
