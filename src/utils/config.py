"""Configuration loader.

Settings are read from a YAML file (``configs/tgs.yaml`` by default)
and turned into a :class:`TGSSettings` value.  Keys missing from the
file fall back to the defaults below, unknown keys are ignored.  The
HERE API key can be given through the ``HERE_API_KEY`` environment
variable, which takes precedence over the file.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "tgs.yaml"


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML configuration file into a dictionary.

    Parameters
    ----------
    path : str or Path
        Path to the YAML configuration file.

    Returns
    -------
    dict
        Parsed configuration dictionary.  Returns an empty dict if the
        file does not exist or is empty.
    """
    cfg_path = Path(path)
    if not cfg_path.is_file():
        return {}
    with open(cfg_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {cfg_path}")
    return data


@dataclass(frozen=True)
class TGSSettings:
    """Planner constants and collaborator endpoints."""

    num_lanes: int = 3
    """Number of parallel lanes derived from a route."""

    lane_width_m: float = 3.5
    """Spacing between adjacent lane centrelines in metres."""

    taper_length_m: float = 60.0
    """Length of the merge taper upstream of the workzone."""

    sign_distance_m: float = 100.0
    """Distance of the advance warning sign upstream of the taper."""

    sign_label: str = "Roadwork Ahead"

    lane_hit_tolerance_m: float = 2.0
    """Maximum click distance for a click to count as a lane hit."""

    routing_url: str = "https://router.hereapi.com/v8/routes"
    geocode_url: str = "https://geocode.search.hereapi.com/v1/geocode"
    transport_mode: str = "car"
    request_timeout_s: float = 10.0
    api_key: str = ""

    lane_colors: Tuple[str, ...] = ("#e41a1c", "#4daf4a", "#ff7f00")
    log_level: str = "INFO"

    def __post_init__(self):
        if self.num_lanes < 1:
            raise ValueError(f"num_lanes must be >= 1, got {self.num_lanes}")
        for name in ("lane_width_m", "taper_length_m", "sign_distance_m", "request_timeout_s"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.lane_hit_tolerance_m < 0:
            raise ValueError("lane_hit_tolerance_m must not be negative")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TGSSettings":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "lane_colors" in kwargs:
            kwargs["lane_colors"] = tuple(kwargs["lane_colors"])
        env_key = os.environ.get("HERE_API_KEY")
        if env_key:
            kwargs["api_key"] = env_key
        return cls(**kwargs)

    def lane_color(self, lane_index: int) -> str:
        return self.lane_colors[lane_index % len(self.lane_colors)]


def load_settings(path: Optional[Union[str, Path]] = None) -> TGSSettings:
    """Read ``path`` (or the bundled default) into :class:`TGSSettings`."""
    return TGSSettings.from_dict(load_config(path or DEFAULT_CONFIG_PATH))
