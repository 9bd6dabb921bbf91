"""Static HTML map of a planning session.

Draws the route, lanes, workzone, taper and warning sign of a session
state onto a folium map and saves it.  folium wants ``(lat, lon)``
locations, so coordinates are swapped on the way in.
"""

from pathlib import Path
from typing import Optional, Sequence, Union

import folium

from src.tgs.session import SessionState
from src.utils.config import TGSSettings
from src.utils.geodesy import GeoPoint
from src.utils.logging import get_logger

logger = get_logger(__name__)

ROUTE_COLOR = "#3b82f6"
WORKZONE_COLOR = "#ffd600"
TAPER_COLOR = "#a020f0"


def _latlon(coordinates: Sequence[GeoPoint]):
    return [(p[1], p[0]) for p in coordinates]


def _center(state: SessionState) -> GeoPoint:
    if state.route is not None:
        coords = state.route.coordinates
        return coords[len(coords) // 2]
    if state.segment_points:
        return state.segment_points[0]
    if state.map_center is not None:
        return state.map_center
    # Melbourne CBD
    return GeoPoint(144.9631, -37.8136)


def draw_map(state: SessionState, settings: Optional[TGSSettings] = None, zoom_start: int = 16) -> folium.Map:
    """Return a folium map showing ``state``."""
    settings = settings or TGSSettings()
    center = _center(state)
    m = folium.Map(location=(center[1], center[0]), zoom_start=zoom_start)

    for i, p in enumerate(state.segment_points):
        color = "lightblue" if i == 0 else "pink"
        folium.CircleMarker((p[1], p[0]), radius=6, color=color, fill=True,
                            tooltip=f"Segment point {i + 1}").add_to(m)

    if state.route is not None:
        folium.PolyLine(_latlon(state.route.coordinates), color=ROUTE_COLOR, weight=5,
                        opacity=0.8, tooltip="Route").add_to(m)

    for lane in state.lanes:
        selected = lane.lane_index == state.selected_lane
        folium.PolyLine(
            _latlon(lane.coordinates),
            color=settings.lane_color(lane.lane_index),
            weight=8 if selected else 4,
            opacity=0.9 if selected else 0.7,
            tooltip=f"Lane {lane.lane_index + 1}",
        ).add_to(m)

    workzone = state.workzone_coordinates()
    if workzone:
        folium.PolyLine(_latlon(workzone), color=WORKZONE_COLOR, weight=12, opacity=0.85,
                        tooltip="Workzone").add_to(m)

    if state.plan is not None:
        folium.PolyLine(_latlon(state.plan.taper.coordinates), color=TAPER_COLOR, weight=8,
                        opacity=0.8, dash_array="6", tooltip="Taper").add_to(m)
        sign = state.plan.sign
        folium.Marker((sign.coordinate[1], sign.coordinate[0]), tooltip=sign.label,
                      popup=sign.label, icon=folium.Icon(color="orange", icon="warning-sign")).add_to(m)
    return m


def export_map(state: SessionState, path: Union[str, Path], settings: Optional[TGSSettings] = None) -> Path:
    """Write the map of ``state`` to ``path`` as HTML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    draw_map(state, settings).save(str(path))
    logger.info("Map written to %s", path)
    return path
