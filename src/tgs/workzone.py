"""Workzone selection along the selected lane.

The operator marks a workzone by clicking twice along a lane.  Each
click is projected to a vertex index and fed to
:class:`WorkzoneSelector`, an immutable value that moves between three
states:

* ``EMPTY``          no index selected
* ``ONE_SELECTED``   one index selected
* ``BOUNDED``        two distinct indices selected, in click order

A repeated click on the only selected index is ignored, and any click
while bounded starts a new selection from that click.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from src.common.errors import PreconditionNotMet


class SelectionState(Enum):
    EMPTY = 0
    ONE_SELECTED = 1
    BOUNDED = 2


@dataclass(frozen=True)
class WorkzoneSelector:
    """Zero, one or two vertex indices on the selected lane."""
    indices: Tuple[int, ...] = ()

    def __post_init__(self):
        if len(self.indices) > 2:
            raise PreconditionNotMet(
                f"Workzone takes at most two bounds, got {len(self.indices)}"
            )

    @property
    def state(self) -> SelectionState:
        return SelectionState(len(self.indices))

    @property
    def is_bounded(self) -> bool:
        return self.state is SelectionState.BOUNDED

    def click(self, k: int) -> "WorkzoneSelector":
        """Return the selection after a click projected to index ``k``."""
        if self.state is SelectionState.ONE_SELECTED:
            if k == self.indices[0]:
                return self
            return WorkzoneSelector((self.indices[0], k))
        return WorkzoneSelector((k,))

    def reset(self) -> "WorkzoneSelector":
        return WorkzoneSelector()

    def bounds(self) -> Tuple[int, int]:
        """Normalised ``(w_start, w_end)`` with ``w_start <= w_end``."""
        if not self.is_bounded:
            raise PreconditionNotMet(
                f"Workzone needs two bounds, {len(self.indices)} selected"
            )
        s, e = self.indices
        return min(s, e), max(s, e)
