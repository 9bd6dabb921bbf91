"""Traffic guidance scheme planning: workzone selection, taper and sign."""

from .workzone import SelectionState, WorkzoneSelector
from .planner import SignPlacement, TaperPlan, TGSPlan, TGSPlanner, walk_upstream
from .chainage import lane_chainage
from .session import SessionState, TGSSession, reduce

__all__ = [
    "SelectionState",
    "WorkzoneSelector",
    "SignPlacement",
    "TaperPlan",
    "TGSPlan",
    "TGSPlanner",
    "walk_upstream",
    "lane_chainage",
    "SessionState",
    "TGSSession",
    "reduce",
]
