"""Route polyline and the routing wire format.

The routing service returns geometry as compact ASCII polylines: pairs
of zig-zag encoded latitude/longitude deltas at 1e5 precision, five
bits per character offset by 63.  :func:`decode_polyline` turns that
text into longitude-first :class:`GeoPoint` values.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from src.common.errors import ExternalRouteError
from src.utils.geodesy import GeoPoint

PRECISION = 1e5


def _decode_value(encoded: str, index: int) -> Tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise ExternalRouteError("Encoded polyline ends inside a value")
        b = ord(encoded[index]) - 63
        index += 1
        result |= (b & 0x1f) << shift
        shift += 5
        if b < 0x20:
            break
    delta = ~(result >> 1) if result & 1 else result >> 1
    return delta, index


def decode_polyline(encoded: str) -> List[GeoPoint]:
    """Decode a compact polyline string into ``(lon, lat)`` points.

    Parameters
    ----------
    encoded : str
        Polyline text as returned in a route section.

    Returns
    -------
    list of GeoPoint
        Decoded coordinates in traversal order.

    Raises
    ------
    ExternalRouteError
        If the text ends in the middle of a value.
    """
    coordinates: List[GeoPoint] = []
    index = 0
    lat = 0
    lng = 0
    while index < len(encoded):
        dlat, index = _decode_value(encoded, index)
        lat += dlat
        dlng, index = _decode_value(encoded, index)
        lng += dlng
        coordinates.append(GeoPoint(lng / PRECISION, lat / PRECISION))
    return coordinates


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1f)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return "".join(chunks)


def encode_polyline(points: Iterable[Sequence[float]]) -> str:
    """Encode ``(lon, lat)`` points into the compact polyline format."""
    out = []
    prev_lat = 0
    prev_lng = 0
    for lon, lat in points:
        ilat = int(round(lat * PRECISION))
        ilng = int(round(lon * PRECISION))
        out.append(_encode_value(ilat - prev_lat))
        out.append(_encode_value(ilng - prev_lng))
        prev_lat, prev_lng = ilat, ilng
    return "".join(out)


@dataclass(frozen=True)
class Route:
    """Travel route between two operator-picked points.

    A route is replaced as a whole whenever a new segment is requested
    and is never edited in place.
    """
    coordinates: Tuple[GeoPoint, ...]
    origin: Optional[GeoPoint] = None
    destination: Optional[GeoPoint] = None

    def __len__(self) -> int:
        return len(self.coordinates)

    @classmethod
    def from_sections(
        cls,
        encoded_sections: Sequence[str],
        origin: Optional[GeoPoint] = None,
        destination: Optional[GeoPoint] = None,
    ) -> "Route":
        """Join the decoded geometry of consecutive route sections.

        The first vertex of a section repeats the last vertex of the
        previous one and is dropped.
        """
        coords: List[GeoPoint] = []
        for encoded in encoded_sections:
            section = decode_polyline(encoded)
            if coords and section and section[0] == coords[-1]:
                section = section[1:]
            coords.extend(section)
        if not coords:
            raise ExternalRouteError("Route response carried no geometry")
        return cls(coordinates=tuple(coords), origin=origin, destination=destination)
