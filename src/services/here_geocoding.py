"""Client for the HERE geocoding API (free-text place lookup)."""

from typing import List, Optional

import requests

from src.common.errors import ExternalLookupError
from src.utils.config import TGSSettings
from src.utils.geodesy import GeoPoint
from src.utils.logging import get_logger

logger = get_logger(__name__)

NO_RESULTS_MESSAGE = "No results found."
SEARCH_ERROR_MESSAGE = "Error searching address."


class HereGeocodingClient:
    """Resolve free text to candidate positions."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://geocode.search.hereapi.com/v1/geocode",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: TGSSettings, session: Optional[requests.Session] = None) -> "HereGeocodingClient":
        return cls(
            api_key=settings.api_key,
            base_url=settings.geocode_url,
            timeout=settings.request_timeout_s,
            session=session,
        )

    def candidates(self, query: str) -> List[GeoPoint]:
        """All candidate positions for ``query``, best match first."""
        logger.info("Looking up %r", query)
        try:
            r = self.session.get(
                self.base_url,
                params={"q": query, "apiKey": self.api_key},
                timeout=self.timeout,
            )
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Place lookup failed: %s", exc)
            raise ExternalLookupError(SEARCH_ERROR_MESSAGE) from exc
        points = []
        for item in data.get("items") or []:
            position = item.get("position") or {}
            if "lat" in position and "lng" in position:
                points.append(GeoPoint(float(position["lng"]), float(position["lat"])))
        return points

    def lookup(self, query: str) -> GeoPoint:
        """Position of the first candidate for ``query``."""
        points = self.candidates(query)
        if not points:
            raise ExternalLookupError(NO_RESULTS_MESSAGE)
        return points[0]
