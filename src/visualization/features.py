"""GeoJSON features handed to the map renderer.

Every feature carries a ``role`` property so the renderer can style it:
``route``, ``lane``, ``workzone``, ``taper`` and ``sign``.  Coordinates
stay longitude first, as GeoJSON requires.
"""

from typing import Any, Dict, List, Optional, Sequence

from src.tgs.session import SessionState
from src.utils.config import TGSSettings
from src.utils.geodesy import GeoPoint

Feature = Dict[str, Any]


def line_feature(coordinates: Sequence[GeoPoint], **properties) -> Feature:
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": [[p[0], p[1]] for p in coordinates]},
        "properties": properties,
    }


def point_feature(point: GeoPoint, **properties) -> Feature:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [point[0], point[1]]},
        "properties": properties,
    }


def build_features(state: SessionState, settings: Optional[TGSSettings] = None) -> List[Feature]:
    """Features for everything currently visible in ``state``."""
    settings = settings or TGSSettings()
    features: List[Feature] = []
    for i, p in enumerate(state.segment_points):
        features.append(point_feature(p, role="segment_point", order=i))
    if state.route is None:
        return features
    features.append(line_feature(state.route.coordinates, role="route"))
    for lane in state.lanes:
        features.append(line_feature(
            lane.coordinates,
            role="lane",
            laneIdx=lane.lane_index,
            offsetMeters=lane.offset_meters,
            color=settings.lane_color(lane.lane_index),
            selected=lane.lane_index == state.selected_lane,
        ))
    workzone = state.workzone_coordinates()
    if workzone:
        features.append(line_feature(workzone, role="workzone"))
    if state.plan is not None:
        features.append(line_feature(state.plan.taper.coordinates, role="taper"))
        features.append(point_feature(state.plan.sign.coordinate, role="sign", label=state.plan.sign.label))
    return features


def build_feature_collection(state: SessionState, settings: Optional[TGSSettings] = None) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": build_features(state, settings)}
