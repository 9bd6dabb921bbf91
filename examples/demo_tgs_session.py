"""Demo script for planning a traffic guidance scheme on synthetic data.

This script drives a full operator session without network access: a
stub routing client returns an encoded polyline for a gently curving
street, the operator picks a lane and marks a workzone, and the taper
and warning sign are generated.  The lane chainage table and an HTML
map are written to the output directory.

Usage:
    python examples/demo_tgs_session.py [output_dir]
"""

import math
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.roadmodel.route import Route, encode_polyline
from src.tgs.chainage import lane_chainage, upstream_length
from src.tgs.session import TGSSession
from src.utils.config import load_settings
from src.utils.logging import get_logger
from src.utils.geodesy import GeoPoint
from src.visualization.map_export import export_map


class SyntheticRouting:
    """Routing stand-in that returns a curved street between two points."""

    def __init__(self, n_points: int = 40):
        self.n_points = n_points

    def fetch_route(self, origin: GeoPoint, destination: GeoPoint) -> Route:
        points = []
        for i in range(self.n_points):
            t = i / (self.n_points - 1)
            # Straight line with a sideways bow of about 30 m
            bow = 0.0003 * math.sin(math.pi * t)
            points.append((
                origin.lon + t * (destination.lon - origin.lon) + bow,
                origin.lat + t * (destination.lat - origin.lat),
            ))
        # Send it through the wire format like a real response
        return Route.from_sections([encode_polyline(points)], origin, destination)


def main(output_dir: str = "demo_output") -> int:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    settings = load_settings()
    get_logger("src", settings.log_level)
    session = TGSSession(settings=settings, routing=SyntheticRouting())

    print("Selecting road segment...")
    session.click(GeoPoint(144.9631, -37.8136))
    state = session.click(GeoPoint(144.9631, -37.8096))
    print(f"  - Route points: {len(state.route)}")
    print(f"  - Lanes: {len(state.lanes)}")

    print("\nSelecting lane and workzone...")
    lane = state.lanes[2]
    session.select_lane(lane.lane_index)
    session.click(lane[34])
    state = session.click(lane[30])
    w_start, w_end = state.workzone.bounds()
    print(f"  - Lane {lane.lane_index + 1}, workzone vertices {w_start}-{w_end}")

    print("\nGenerating TGS...")
    state = session.generate()
    plan = state.plan
    table = lane_chainage(lane)
    print(f"  - Taper: vertices {plan.taper_start_index}-{plan.taper.end_index}, "
          f"{upstream_length(table, plan.taper_start_index, w_start):.1f} m")
    print(f"  - Sign '{plan.sign.label}' at vertex {plan.sign_index}, "
          f"{upstream_length(table, plan.sign_index, plan.taper_start_index):.1f} m before taper")
    if plan.taper_exhausted or plan.sign_exhausted:
        print("  ⚠ Not enough lane upstream of the workzone for a full scheme")

    table.to_csv(out / "lane_chainage.csv", index=False)
    map_path = export_map(state, out / "tgs_map.html", settings)
    print(f"\nOutput directory: {out}")
    print(f"  - {map_path.name}")
    print("  - lane_chainage.csv")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
