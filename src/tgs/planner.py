"""Taper and advance warning sign placement.

Given a lane and a bounded workzone on it, the planner walks upstream
(towards lower vertex indices) from the start of the workzone until the
accumulated haversine length reaches the taper length, then walks on
from the taper start until the sign distance is reached.

Lane direction is taken from vertex order: ascending index is the
direction of travel, so "upstream" means descending index.

When a walk runs out of lane before reaching its threshold the start
index of that walk is kept, i.e. the taper collapses to the workzone
start vertex and the sign sits on the taper start.  Such plans are
flagged through ``taper_exhausted`` and ``sign_exhausted``.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, Union

from src.common.errors import PreconditionNotMet
from src.roadmodel.lanes import Lane
from src.utils.config import TGSSettings
from src.utils.geodesy import GeoMath, GeodesicMath, GeoPoint
from src.utils.logging import get_logger

from .workzone import WorkzoneSelector

TAPER_LENGTH = 60.0
SIGN_DISTANCE = 100.0
SIGN_LABEL = "Roadwork Ahead"

logger = get_logger(__name__)


@dataclass(frozen=True)
class TaperPlan:
    """Lane slice leading into the workzone, ascending index order."""
    coordinates: Tuple[GeoPoint, ...]
    start_index: int
    end_index: int


@dataclass(frozen=True)
class SignPlacement:
    coordinate: GeoPoint
    label: str = SIGN_LABEL


@dataclass(frozen=True)
class TGSPlan:
    """Result of one planning run on one lane."""
    lane_index: int
    workzone_start: int
    workzone_end: int
    taper: TaperPlan
    sign: SignPlacement
    sign_index: int
    taper_exhausted: bool
    sign_exhausted: bool

    @property
    def taper_start_index(self) -> int:
        return self.taper.start_index


def walk_upstream(
    coordinates: Sequence[GeoPoint],
    start: int,
    threshold: float,
    distance: Callable[[GeoPoint, GeoPoint], float],
) -> Tuple[int, bool]:
    """Walk from ``start`` towards index 0 until ``threshold`` metres are covered.

    Returns
    -------
    (int, bool)
        The index where the threshold was met and False, or ``start``
        and True when index 0 is reached first.
    """
    cumulative = 0.0
    for i in range(start, 0, -1):
        cumulative += distance(coordinates[i], coordinates[i - 1])
        if cumulative >= threshold:
            return i - 1, False
    return start, True


class TGSPlanner:
    """Compute a taper and sign placement for a workzone on a lane."""

    def __init__(
        self,
        taper_length: float = TAPER_LENGTH,
        sign_distance: float = SIGN_DISTANCE,
        sign_label: str = SIGN_LABEL,
        geo: Optional[GeoMath] = None,
    ):
        self.taper_length = taper_length
        self.sign_distance = sign_distance
        self.sign_label = sign_label
        self.geo = geo or GeodesicMath()

    @classmethod
    def from_settings(cls, settings: TGSSettings, geo: Optional[GeoMath] = None) -> "TGSPlanner":
        return cls(
            taper_length=settings.taper_length_m,
            sign_distance=settings.sign_distance_m,
            sign_label=settings.sign_label,
            geo=geo,
        )

    def plan(
        self,
        lane: Optional[Lane],
        workzone: Union[WorkzoneSelector, Sequence[int]],
    ) -> TGSPlan:
        """Plan taper and sign for ``workzone`` on ``lane``.

        Parameters
        ----------
        lane : Lane or None
            The selected lane.
        workzone : WorkzoneSelector or sequence of int
            Workzone bounds in either order.

        Returns
        -------
        TGSPlan

        Raises
        ------
        PreconditionNotMet
            If no lane is given, the workzone does not have exactly two
            bounds, or a bound lies outside the lane.
        """
        if lane is None:
            raise PreconditionNotMet("No lane selected")
        if not isinstance(workzone, WorkzoneSelector):
            workzone = WorkzoneSelector(tuple(workzone))
        w_start, w_end = workzone.bounds()
        if w_start < 0 or w_end > len(lane) - 1:
            raise PreconditionNotMet(
                f"Workzone ({w_start}, {w_end}) outside lane of {len(lane)} vertices"
            )

        coords = lane.coordinates
        taper_start, taper_exhausted = walk_upstream(
            coords, w_start, self.taper_length, self.geo.distance
        )
        sign_idx, sign_exhausted = walk_upstream(
            coords, taper_start, self.sign_distance, self.geo.distance
        )
        logger.debug(
            "Lane %d workzone %d-%d: taper from %d%s, sign at %d%s",
            lane.lane_index, w_start, w_end,
            taper_start, " (exhausted)" if taper_exhausted else "",
            sign_idx, " (exhausted)" if sign_exhausted else "",
        )
        return TGSPlan(
            lane_index=lane.lane_index,
            workzone_start=w_start,
            workzone_end=w_end,
            taper=TaperPlan(
                coordinates=tuple(lane.slice(taper_start, w_start)),
                start_index=taper_start,
                end_index=w_start,
            ),
            sign=SignPlacement(coordinate=coords[sign_idx], label=self.sign_label),
            sign_index=sign_idx,
            taper_exhausted=taper_exhausted,
            sign_exhausted=sign_exhausted,
        )
