"""Geodesic utilities.

Provides the haversine distance between longitude/latitude coordinates
and a geodesic lateral offset of a polyline.  Both are bundled behind
the :class:`GeoMath` protocol so the lane generator and the planner do
not depend on a particular geometry backend.
"""

import math
from typing import List, NamedTuple, Protocol, Sequence

import numpy as np
from pyproj import Geod

EARTH_RADIUS_M = 6371008.8
MITER_LIMIT = 4.0


class GeoPoint(NamedTuple):
    """WGS84 coordinate in degrees, longitude first."""
    lon: float
    lat: float


Polyline = Sequence[GeoPoint]


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute the great-circle distance between two points on Earth.

    Parameters
    ----------
    lat1, lon1 : float
        Latitude and longitude of point 1 in degrees.
    lat2, lon2 : float
        Latitude and longitude of point 2 in degrees.

    Returns
    -------
    float
        Distance in metres.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2)**2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


class GeoMath(Protocol):
    """Distance and offset capability used by lanes and planner."""

    def distance(self, a: GeoPoint, b: GeoPoint) -> float:
        ...

    def offset(self, polyline: Polyline, meters: float) -> List[GeoPoint]:
        ...


def _fill_degenerate_azimuths(azimuths: np.ndarray, lengths: np.ndarray) -> np.ndarray:
    """Give zero-length segments the bearing of a neighbouring segment."""
    valid = lengths > 1e-9
    if not valid.any():
        return np.zeros_like(azimuths)
    filled = azimuths.copy()
    first = int(np.argmax(valid))
    filled[:first] = azimuths[first]
    for k in range(first + 1, len(filled)):
        if not valid[k]:
            filled[k] = filled[k - 1]
    return filled


class GeodesicMath:
    """:class:`GeoMath` backed by haversine distances and ``pyproj.Geod``.

    Offsetting moves every vertex perpendicular to the local bearing on
    the WGS84 ellipsoid.  Interior vertices use the bisector of the
    incoming and outgoing segment azimuths and are pushed out by the
    miter factor ``1 / cos(turn / 2)`` so the offset segments stay
    parallel to the originals; the factor is capped at ``MITER_LIMIT``
    for near reversals.  Positive distances lie to the right of the
    direction of travel.
    """

    def __init__(self, ellps: str = "WGS84"):
        self.geod = Geod(ellps=ellps)

    def distance(self, a: GeoPoint, b: GeoPoint) -> float:
        return haversine_distance(a[1], a[0], b[1], b[0])

    def offset(self, polyline: Polyline, meters: float) -> List[GeoPoint]:
        pts = np.asarray(polyline, dtype=float)
        if pts.ndim != 2 or pts.shape[0] < 2:
            raise ValueError("offset requires a polyline with at least 2 points")
        if meters == 0:
            return [GeoPoint(float(lon), float(lat)) for lon, lat in pts]

        az, _, seg_len = self.geod.inv(pts[:-1, 0], pts[:-1, 1], pts[1:, 0], pts[1:, 1])
        az = _fill_degenerate_azimuths(np.asarray(az, dtype=float), np.asarray(seg_len, dtype=float))

        incoming = np.concatenate([az[:1], az])
        outgoing = np.concatenate([az, az[-1:]])
        turn = (outgoing - incoming + 180.0) % 360.0 - 180.0
        heading = incoming + turn / 2.0
        miter = 1.0 / np.maximum(np.cos(np.radians(turn / 2.0)), 1.0 / MITER_LIMIT)

        side = 90.0 if meters > 0 else -90.0
        lons, lats, _ = self.geod.fwd(pts[:, 0], pts[:, 1], heading + side, abs(meters) * miter)
        return [GeoPoint(float(lon), float(lat)) for lon, lat in zip(lons, lats)]
