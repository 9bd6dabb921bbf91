"""Lane reconstruction from a route centre line.

Lanes are modelled as centre lines running parallel to the route.  The
route itself is taken as the centre of the carriageway and each lane is
the route offset sideways by a whole number of half lane widths, so the
lane set is symmetric about the route.  Offsetting is geodesic: the
route is given in WGS84 degrees and the offset follows its curvature.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from src.common.errors import InvalidRouteGeometry
from src.utils.geodesy import GeoMath, GeodesicMath, GeoPoint
from src.utils.logging import get_logger

NUM_LANES = 3
LANE_WIDTH = 3.5

logger = get_logger(__name__)


@dataclass(frozen=True)
class Lane:
    """A lane centre line derived from the route."""
    lane_index: int
    offset_meters: float
    coordinates: Tuple[GeoPoint, ...]

    def __len__(self) -> int:
        return len(self.coordinates)

    def __getitem__(self, idx):
        return self.coordinates[idx]

    def slice(self, start: int, end: int) -> List[GeoPoint]:
        """Vertices ``start..end`` inclusive, in ascending index order."""
        return list(self.coordinates[start:end + 1])


def lane_offset(lane_index: int, num_lanes: int = NUM_LANES, lane_width: float = LANE_WIDTH) -> float:
    """Signed lateral offset of a lane from the route centre line in metres."""
    return (lane_index - (num_lanes - 1) / 2) * lane_width


def construct_lanes(
    center_line: Sequence[GeoPoint],
    lane_width: float = LANE_WIDTH,
    num_lanes: int = NUM_LANES,
    geo: Optional[GeoMath] = None,
) -> List[Lane]:
    """Construct lane centre lines from a route centre line.

    Parameters
    ----------
    center_line : sequence of GeoPoint
        Route polyline in traversal order, at least two points.
    lane_width : float
        Width of a single lane in metres.
    num_lanes : int
        Number of lanes to construct (assumes symmetrical lanes).
    geo : GeoMath, optional
        Geometry backend; defaults to :class:`GeodesicMath`.

    Returns
    -------
    list of Lane
        ``num_lanes`` lanes ordered by ``lane_index``.  Lane ``i`` lies
        ``lane_offset(i)`` metres to the right of the route; with an
        odd lane count the middle lane coincides with the route.

    Raises
    ------
    InvalidRouteGeometry
        If the route has fewer than two points.
    """
    if len(center_line) < 2:
        raise InvalidRouteGeometry(
            f"Route needs at least 2 points to derive lanes, got {len(center_line)}"
        )
    geo = geo or GeodesicMath()
    lanes: List[Lane] = []
    for i in range(num_lanes):
        offset = lane_offset(i, num_lanes, lane_width)
        coords = geo.offset(center_line, offset)
        lanes.append(Lane(lane_index=i, offset_meters=offset, coordinates=tuple(coords)))
    logger.debug("Constructed %d lanes over %d route points", len(lanes), len(center_line))
    return lanes
