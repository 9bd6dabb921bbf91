"""Unit tests for taper and sign planning."""

import math

import numpy as np
import pytest

from src.common.errors import PreconditionNotMet
from src.roadmodel.lanes import Lane
from src.tgs.planner import SIGN_LABEL, TGSPlanner, walk_upstream
from src.tgs.workzone import WorkzoneSelector
from src.utils.config import TGSSettings
from src.utils.geodesy import EARTH_RADIUS_M, GeodesicMath, GeoPoint

METRES_PER_DEGREE = EARTH_RADIUS_M * math.pi / 180


def meridian_lane(spacings, lon=144.9631, lat0=-37.8136, lane_index=1):
    """Lane running north with the given gaps (metres) between vertices."""
    lats = lat0 + np.concatenate([[0.0], np.cumsum(spacings)]) / METRES_PER_DEGREE
    coords = tuple(GeoPoint(lon, float(lat)) for lat in lats)
    return Lane(lane_index=lane_index, offset_meters=0.0, coordinates=coords)


def upstream_sum(lane, start, stop):
    """Distance walked from ``start`` down to ``stop`` in walk order."""
    geo = GeodesicMath()
    total = 0.0
    for i in range(start, stop, -1):
        total += geo.distance(lane[i], lane[i - 1])
    return total


class TestWalkUpstream:
    """Test suite for walk_upstream."""

    def test_threshold_met(self):
        """Test that the walk stops on the vertex where the threshold is met."""
        lane = meridian_lane([10.2] * 10)
        idx, exhausted = walk_upstream(lane.coordinates, 10, 30.0, GeodesicMath().distance)
        assert (idx, exhausted) == (7, False)

    def test_exhausted_keeps_start(self):
        """Test that running out of lane returns the start index."""
        lane = meridian_lane([10.2] * 3)
        idx, exhausted = walk_upstream(lane.coordinates, 3, 60.0, GeodesicMath().distance)
        assert (idx, exhausted) == (3, True)

    def test_start_at_zero(self):
        """Test that a walk from index 0 does not move."""
        lane = meridian_lane([10.2] * 3)
        assert walk_upstream(lane.coordinates, 0, 1.0, GeodesicMath().distance) == (0, True)

    def test_zero_length_segments(self):
        """Test that repeated vertices add nothing to the walk."""
        lane = meridian_lane([0.0, 35.0, 0.0, 35.0])
        idx, exhausted = walk_upstream(lane.coordinates, 4, 60.0, GeodesicMath().distance)
        assert (idx, exhausted) == (1, False)


class TestTGSPlanner:
    """Test suite for TGSPlanner.plan."""

    def test_five_vertex_boundary_case(self):
        """Test the taper reaching index 0 and the sign walk exhausting."""
        lane = meridian_lane([30.5] * 4)
        plan = TGSPlanner().plan(lane, WorkzoneSelector((2, 4)))

        assert plan.workzone_start == 2
        assert plan.workzone_end == 4
        assert plan.taper_start_index == 0
        assert plan.taper_exhausted is False
        assert plan.taper.coordinates == lane.coordinates[0:3]
        assert plan.sign_index == 0
        assert plan.sign_exhausted is True
        assert plan.sign.coordinate == lane[0]
        assert plan.sign.label == "Roadwork Ahead"

    def test_long_lane(self):
        """Test taper and sign on a lane with enough upstream length."""
        lane = meridian_lane([10.2] * 29)
        plan = TGSPlanner().plan(lane, (28, 25))

        assert plan.workzone_start == 25
        assert plan.taper_start_index == 19
        assert len(plan.taper.coordinates) == 7
        assert plan.taper.end_index == 25
        assert plan.sign_index == 9
        assert not plan.taper_exhausted and not plan.sign_exhausted

    def test_taper_exhausted_collapses_to_workzone_start(self):
        """Test a workzone too close to the start of the lane."""
        lane = meridian_lane([10.2] * 10)
        plan = TGSPlanner().plan(lane, (3, 6))

        assert plan.taper_exhausted is True
        assert plan.taper_start_index == 3
        assert plan.taper.coordinates == (lane[3],)
        assert plan.sign_index == 3

    def test_bound_order_does_not_matter(self):
        """Test that reversed bounds give the same plan."""
        lane = meridian_lane([12.0] * 20)
        planner = TGSPlanner()
        assert planner.plan(lane, (15, 18)) == planner.plan(lane, (18, 15))

    def test_repeatable(self):
        """Test that planning twice gives identical results."""
        lane = meridian_lane([12.0] * 20)
        planner = TGSPlanner()
        assert planner.plan(lane, (15, 18)) == planner.plan(lane, (15, 18))

    def test_settings_are_applied(self):
        """Test planner construction from settings."""
        settings = TGSSettings(taper_length_m=20.0, sign_distance_m=20.0, sign_label="Works")
        lane = meridian_lane([10.2] * 10)
        plan = TGSPlanner.from_settings(settings).plan(lane, (8, 9))

        assert plan.taper_start_index == 6
        assert plan.sign_index == 4
        assert plan.sign.label == "Works"

    def test_invariants_on_random_lanes(self):
        """Test index ordering and threshold relations on random lanes."""
        rng = np.random.default_rng(42)
        planner = TGSPlanner()
        for _ in range(50):
            n = int(rng.integers(2, 40))
            lane = meridian_lane(rng.uniform(0.0, 40.0, size=n - 1))
            s, e = rng.choice(n, size=2, replace=False)
            plan = planner.plan(lane, (int(s), int(e)))
            t, w_start, w_end = plan.taper_start_index, plan.workzone_start, plan.workzone_end

            assert 0 <= plan.sign_index <= t <= w_start < w_end <= len(lane) - 1
            if plan.taper_exhausted:
                assert t == w_start
                assert upstream_sum(lane, w_start, 0) < 60.0
            else:
                assert upstream_sum(lane, w_start, t) >= 60.0
                assert upstream_sum(lane, w_start, t + 1) < 60.0
            if plan.sign_exhausted:
                assert plan.sign_index == t
                assert upstream_sum(lane, t, 0) < 100.0
            else:
                assert upstream_sum(lane, t, plan.sign_index) >= 100.0

    def test_requires_lane(self):
        """Test that planning without a lane is refused."""
        with pytest.raises(PreconditionNotMet):
            TGSPlanner().plan(None, (1, 2))

    @pytest.mark.parametrize("bounds", [(), (3,), (1, 2, 3), WorkzoneSelector((3,))])
    def test_requires_two_bounds(self, bounds):
        """Test that planning needs exactly two workzone bounds."""
        with pytest.raises(PreconditionNotMet):
            TGSPlanner().plan(meridian_lane([10.0] * 5), bounds)

    def test_bounds_must_lie_on_lane(self):
        """Test that out-of-range indices are refused."""
        with pytest.raises(PreconditionNotMet):
            TGSPlanner().plan(meridian_lane([10.0] * 5), (2, 9))

    def test_default_label(self):
        """Test the default sign label."""
        assert SIGN_LABEL == "Roadwork Ahead"
