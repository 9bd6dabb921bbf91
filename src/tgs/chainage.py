"""Chainage table for a lane.

Chainage is the running distance along the lane from its first vertex.
The table is handy for checking where a taper or sign landed relative
to the workzone and is written out alongside exported maps.
"""

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from src.utils.geodesy import GeoMath, GeodesicMath, GeoPoint

CHAINAGE_COLUMNS = ["index", "lon", "lat", "segment_m", "chainage_m"]


def lane_chainage(coordinates: Sequence[GeoPoint], geo: Optional[GeoMath] = None) -> pd.DataFrame:
    """Return per-vertex segment length and chainage in metres.

    ``segment_m`` is the length of the segment ending at the vertex
    (0 for the first vertex).
    """
    geo = geo or GeodesicMath()
    if len(coordinates) == 0:
        return pd.DataFrame(columns=CHAINAGE_COLUMNS)
    segments = [0.0] + [geo.distance(a, b) for a, b in zip(coordinates[:-1], coordinates[1:])]
    return pd.DataFrame({
        "index": np.arange(len(coordinates)),
        "lon": [p[0] for p in coordinates],
        "lat": [p[1] for p in coordinates],
        "segment_m": segments,
        "chainage_m": np.cumsum(segments),
    })


def upstream_length(table: pd.DataFrame, start: int, end: int) -> float:
    """Distance along the lane between vertex ``start`` and vertex ``end``."""
    chain = table["chainage_m"].to_numpy()
    return float(abs(chain[end] - chain[start]))
