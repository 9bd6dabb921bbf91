"""Road model: route geometry, lane centre lines and click projection."""

from .route import Route, decode_polyline, encode_polyline
from .lanes import Lane, LANE_WIDTH, NUM_LANES, construct_lanes, lane_offset
from .projection import distance_to_polyline, nearest_index, nearest_lane

__all__ = [
    "Route",
    "decode_polyline",
    "encode_polyline",
    "Lane",
    "LANE_WIDTH",
    "NUM_LANES",
    "construct_lanes",
    "lane_offset",
    "distance_to_polyline",
    "nearest_index",
    "nearest_lane",
]
