"""Map click coordinates onto polylines.

A click is resolved to the nearest vertex of a polyline by a linear
scan over haversine distances.  The first vertex wins when several are
equally close.

Lane hit-testing measures the distance from the click to the lane's
segments instead of its vertices, in a local equirectangular frame
centred on the click.  Over the few metres that matter for a hit this
frame is accurate to well below a centimetre.
"""

import math
from typing import Optional, Sequence

import numpy as np

from src.utils.geodesy import EARTH_RADIUS_M, GeoPoint, haversine_distance

from .lanes import Lane


def nearest_index(polyline: Sequence[GeoPoint], point: GeoPoint) -> int:
    """Index of the polyline vertex closest to ``point``.

    Raises
    ------
    ValueError
        If the polyline is empty.
    """
    if len(polyline) == 0:
        raise ValueError("nearest_index requires a non-empty polyline")
    best_i = 0
    best_d = float("inf")
    for i, p in enumerate(polyline):
        d = haversine_distance(p[1], p[0], point[1], point[0])
        if d < best_d:
            best_d = d
            best_i = i
    return best_i


def distance_to_polyline(point: GeoPoint, polyline: Sequence[GeoPoint]) -> float:
    """Shortest distance in metres from ``point`` to any segment of ``polyline``."""
    pts = np.asarray(polyline, dtype=float)
    if pts.ndim != 2 or len(pts) == 0:
        return float("inf")
    # Local metric frame around the click
    k_lat = math.radians(1.0) * EARTH_RADIUS_M
    k_lon = k_lat * math.cos(math.radians(point[1]))
    xy = np.column_stack([(pts[:, 0] - point[0]) * k_lon, (pts[:, 1] - point[1]) * k_lat])
    if len(xy) == 1:
        return float(np.hypot(*xy[0]))
    a = xy[:-1]
    ab = xy[1:] - a
    denom = np.einsum("ij,ij->i", ab, ab)
    t = np.where(denom > 0, -np.einsum("ij,ij->i", a, ab) / np.where(denom > 0, denom, 1.0), 0.0)
    t = np.clip(t, 0.0, 1.0)
    closest = a + t[:, None] * ab
    return float(np.min(np.hypot(closest[:, 0], closest[:, 1])))


def nearest_lane(point: GeoPoint, lanes: Sequence[Lane], tolerance_m: float) -> Optional[int]:
    """Lane index hit by a click, or None if no lane is within tolerance.

    Lower lane index wins on ties.
    """
    best_lane = None
    best_d = float("inf")
    for lane in lanes:
        d = distance_to_polyline(point, lane.coordinates)
        if d < best_d:
            best_d = d
            best_lane = lane.lane_index
    if best_lane is None or best_d > tolerance_m:
        return None
    return best_lane
