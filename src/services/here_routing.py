"""Client for the HERE routing API.

Routes are requested for car travel between two points and returned
with compact polyline geometry per section.  The sections of the first
route are joined into one :class:`Route`.
"""

from typing import Any, Dict, Optional

import requests

from src.common.errors import ExternalRouteError
from src.roadmodel.route import Route
from src.utils.config import TGSSettings
from src.utils.geodesy import GeoPoint
from src.utils.logging import get_logger

logger = get_logger(__name__)

NO_ROUTE_MESSAGE = "No route found."
FETCH_ERROR_MESSAGE = "Error fetching route."


def parse_route_response(
    data: Dict[str, Any],
    origin: Optional[GeoPoint] = None,
    destination: Optional[GeoPoint] = None,
) -> Route:
    """Build a :class:`Route` from a decoded routing response body.

    Raises
    ------
    ExternalRouteError
        If the response has no route or no section carries a polyline.
    """
    routes = data.get("routes") or []
    sections = (routes[0].get("sections") or []) if routes else []
    encoded = [s["polyline"] for s in sections if s.get("polyline")]
    if not encoded:
        raise ExternalRouteError(NO_ROUTE_MESSAGE)
    return Route.from_sections(encoded, origin=origin, destination=destination)


class HereRoutingClient:
    """Fetch routes between two points."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://router.hereapi.com/v8/routes",
        transport_mode: str = "car",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.transport_mode = transport_mode
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: TGSSettings, session: Optional[requests.Session] = None) -> "HereRoutingClient":
        return cls(
            api_key=settings.api_key,
            base_url=settings.routing_url,
            transport_mode=settings.transport_mode,
            timeout=settings.request_timeout_s,
            session=session,
        )

    def fetch_route(self, origin: GeoPoint, destination: GeoPoint) -> Route:
        # HERE expects "lat,lng"
        params = {
            "transportMode": self.transport_mode,
            "origin": f"{origin[1]},{origin[0]}",
            "destination": f"{destination[1]},{destination[0]}",
            "return": "polyline",
            "apiKey": self.api_key,
        }
        logger.info("Requesting route %s -> %s", params["origin"], params["destination"])
        try:
            r = self.session.get(self.base_url, params=params, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Routing request failed: %s", exc)
            raise ExternalRouteError(FETCH_ERROR_MESSAGE) from exc
        return parse_route_response(data, GeoPoint(*origin), GeoPoint(*destination))
