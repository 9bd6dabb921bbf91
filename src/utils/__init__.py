"""Utility functions shared by the traffic guidance planner."""

from .logging import get_logger
from .config import TGSSettings, load_config, load_settings
from .geodesy import GeoMath, GeodesicMath, GeoPoint, haversine_distance

__all__ = [
    "get_logger",
    "load_config",
    "load_settings",
    "TGSSettings",
    "GeoMath",
    "GeodesicMath",
    "GeoPoint",
    "haversine_distance",
]
