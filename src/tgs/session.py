"""Operator session state.

The whole interactive session is one immutable :class:`SessionState`.
Operator actions and collaborator responses are events, and
:func:`reduce` maps ``(state, event)`` to the next state without side
effects.  :class:`TGSSession` is the thin shell around it that performs
the routing and place-lookup requests a state asks for and feeds their
results back as events.

Responses are tagged with the id of the request that produced them.  A
response whose id no longer matches the pending request (because the
operator started a new segment or search in the meantime) is dropped.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from src.common.errors import (
    ExternalLookupError,
    ExternalRouteError,
    InvalidRouteGeometry,
    PreconditionNotMet,
)
from src.roadmodel.lanes import Lane, construct_lanes
from src.roadmodel.projection import nearest_index, nearest_lane
from src.roadmodel.route import Route
from src.utils.config import TGSSettings
from src.utils.geodesy import GeoMath, GeoPoint
from src.utils.logging import get_logger

from .planner import TGSPlan, TGSPlanner
from .workzone import WorkzoneSelector

logger = get_logger(__name__)


@dataclass(frozen=True)
class RouteRequest:
    request_id: int
    origin: GeoPoint
    destination: GeoPoint


@dataclass(frozen=True)
class SearchRequest:
    request_id: int
    query: str


@dataclass(frozen=True)
class SessionState:
    segment_points: Tuple[GeoPoint, ...] = ()
    route: Optional[Route] = None
    lanes: Tuple[Lane, ...] = ()
    selected_lane: Optional[int] = None
    workzone: WorkzoneSelector = field(default_factory=WorkzoneSelector)
    plan: Optional[TGSPlan] = None
    error: str = ""
    map_center: Optional[GeoPoint] = None
    route_request: Optional[RouteRequest] = None
    search_request: Optional[SearchRequest] = None
    next_request_id: int = 1

    @property
    def lane(self) -> Optional[Lane]:
        """The selected lane, if any."""
        if self.selected_lane is None:
            return None
        for lane in self.lanes:
            if lane.lane_index == self.selected_lane:
                return lane
        return None

    @property
    def can_generate(self) -> bool:
        return self.lane is not None and self.workzone.is_bounded

    def workzone_coordinates(self) -> List[GeoPoint]:
        """Confirmed workzone sub-segment of the selected lane, or []."""
        lane = self.lane
        if lane is None or not self.workzone.is_bounded:
            return []
        w_start, w_end = self.workzone.bounds()
        return lane.slice(w_start, w_end)


# Events ---------------------------------------------------------------------

@dataclass(frozen=True)
class MapClicked:
    point: GeoPoint


@dataclass(frozen=True)
class LaneSelected:
    lane_index: int


@dataclass(frozen=True)
class GenerateRequested:
    pass


@dataclass(frozen=True)
class RouteReceived:
    request_id: int
    route: Route


@dataclass(frozen=True)
class RouteFailed:
    request_id: int
    message: str


@dataclass(frozen=True)
class SearchRequested:
    query: str


@dataclass(frozen=True)
class SearchResolved:
    request_id: int
    point: GeoPoint


@dataclass(frozen=True)
class SearchFailed:
    request_id: int
    message: str


# Transitions ----------------------------------------------------------------

def _select_lane(state: SessionState, lane_index: int) -> SessionState:
    if not any(lane.lane_index == lane_index for lane in state.lanes):
        return state
    return replace(state, selected_lane=lane_index, workzone=state.workzone.reset(), plan=None)


def _segment_click(state: SessionState, point: GeoPoint) -> SessionState:
    cleared = replace(
        state,
        route=None,
        lanes=(),
        selected_lane=None,
        workzone=state.workzone.reset(),
        plan=None,
        error="",
        route_request=None,
    )
    if len(state.segment_points) == 1:
        request = RouteRequest(state.next_request_id, state.segment_points[0], point)
        return replace(
            cleared,
            segment_points=(state.segment_points[0], point),
            route_request=request,
            next_request_id=state.next_request_id + 1,
        )
    return replace(cleared, segment_points=(point,))


def _map_click(state: SessionState, point: GeoPoint, settings: TGSSettings) -> SessionState:
    hit = nearest_lane(point, state.lanes, settings.lane_hit_tolerance_m) if state.lanes else None
    if hit is not None and hit != state.selected_lane:
        return _select_lane(state, hit)
    lane = state.lane
    if lane is not None:
        k = nearest_index(lane.coordinates, point)
        return replace(state, workzone=state.workzone.click(k), plan=None)
    return _segment_click(state, point)


def _route_received(state: SessionState, event: RouteReceived,
                    settings: TGSSettings, geo: Optional[GeoMath]) -> SessionState:
    try:
        lanes = construct_lanes(event.route.coordinates, settings.lane_width_m, settings.num_lanes, geo)
    except InvalidRouteGeometry as exc:
        logger.warning("Discarding route: %s", exc)
        return replace(state, route=None, lanes=(), route_request=None, error="No route found.")
    return replace(
        state,
        route=event.route,
        lanes=tuple(lanes),
        selected_lane=None,
        workzone=state.workzone.reset(),
        plan=None,
        error="",
        route_request=None,
    )


def _generate(state: SessionState, planner: TGSPlanner) -> SessionState:
    try:
        plan = planner.plan(state.lane, state.workzone)
    except PreconditionNotMet as exc:
        logger.debug("Generate ignored: %s", exc)
        return state
    return replace(state, plan=plan)


def _is_pending(pending, request_id: int) -> bool:
    if pending is None or pending.request_id != request_id:
        logger.info("Discarding stale response for request %d", request_id)
        return False
    return True


def reduce(state: SessionState, event, settings: Optional[TGSSettings] = None,
           geo: Optional[GeoMath] = None) -> SessionState:
    """Return the state that follows ``state`` after ``event``."""
    settings = settings or TGSSettings()
    if isinstance(event, MapClicked):
        return _map_click(state, event.point, settings)
    if isinstance(event, LaneSelected):
        return _select_lane(state, event.lane_index)
    if isinstance(event, GenerateRequested):
        return _generate(state, TGSPlanner.from_settings(settings, geo))
    if isinstance(event, RouteReceived):
        if not _is_pending(state.route_request, event.request_id):
            return state
        return _route_received(state, event, settings, geo)
    if isinstance(event, RouteFailed):
        if not _is_pending(state.route_request, event.request_id):
            return state
        return replace(state, route_request=None, error=event.message)
    if isinstance(event, SearchRequested):
        query = event.query.strip()
        if not query:
            return state
        return replace(
            state,
            search_request=SearchRequest(state.next_request_id, query),
            next_request_id=state.next_request_id + 1,
            error="",
        )
    if isinstance(event, SearchResolved):
        if not _is_pending(state.search_request, event.request_id):
            return state
        return replace(state, search_request=None, map_center=event.point)
    if isinstance(event, SearchFailed):
        if not _is_pending(state.search_request, event.request_id):
            return state
        return replace(state, search_request=None, error=event.message)
    raise TypeError(f"Unknown session event: {event!r}")


class TGSSession:
    """Holds the current state and talks to the routing and lookup services.

    Parameters
    ----------
    settings : TGSSettings, optional
        Planner constants; defaults are used when omitted.
    routing : object, optional
        Anything with ``fetch_route(origin, destination) -> Route``.
    geocoder : object, optional
        Anything with ``lookup(query) -> GeoPoint``.
    geo : GeoMath, optional
        Geometry backend for lanes and planning.
    """

    def __init__(self, settings: Optional[TGSSettings] = None, routing=None, geocoder=None,
                 geo: Optional[GeoMath] = None):
        self.settings = settings or TGSSettings()
        self.routing = routing
        self.geocoder = geocoder
        self.geo = geo
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    def dispatch(self, event) -> SessionState:
        before = self._state
        self._state = reduce(before, event, self.settings, self.geo)
        request = self._state.route_request
        if request is not None and request is not before.route_request:
            self._fetch_route(request)
        search = self._state.search_request
        if search is not None and search is not before.search_request:
            self._lookup(search)
        return self._state

    def _fetch_route(self, request: RouteRequest) -> None:
        if self.routing is None:
            return
        try:
            route = self.routing.fetch_route(request.origin, request.destination)
        except ExternalRouteError as exc:
            self.dispatch(RouteFailed(request.request_id, str(exc)))
            return
        self.dispatch(RouteReceived(request.request_id, route))

    def _lookup(self, request: SearchRequest) -> None:
        if self.geocoder is None:
            return
        try:
            point = self.geocoder.lookup(request.query)
        except ExternalLookupError as exc:
            self.dispatch(SearchFailed(request.request_id, str(exc)))
            return
        self.dispatch(SearchResolved(request.request_id, point))

    def click(self, point: GeoPoint) -> SessionState:
        return self.dispatch(MapClicked(GeoPoint(*point)))

    def select_lane(self, lane_index: int) -> SessionState:
        return self.dispatch(LaneSelected(lane_index))

    def generate(self) -> SessionState:
        return self.dispatch(GenerateRequested())

    def search(self, query: str) -> SessionState:
        return self.dispatch(SearchRequested(query))
