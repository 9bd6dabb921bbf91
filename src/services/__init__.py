"""External collaborators: routing and place lookup."""

from .here_routing import HereRoutingClient, parse_route_response
from .here_geocoding import HereGeocodingClient

__all__ = ["HereRoutingClient", "HereGeocodingClient", "parse_route_response"]
