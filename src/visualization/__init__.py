"""GeoJSON features and HTML map export for planning sessions."""

from .features import build_feature_collection, build_features
from .map_export import draw_map, export_map

__all__ = ["build_feature_collection", "build_features", "draw_map", "export_map"]
